"""
Contains the FormControl class, the leaf of a control tree.
"""
from typing import Any, Generic, Iterable, Optional

from typeguard import TypeCheckError, check_type

from ..errors import ValidatorError, format_path
from ..execution import ValidationEngine
from ..types import UNSET, AsyncValidatorLike, ValidatorLike, ValueT
from .base import AbstractControl


class FormControl(AbstractControl, Generic[ValueT]):
    """
    A leaf control holding a single value. If a `value_type` is given, every value written to the control is checked
    against it and a TypeCheckError is raised on mismatch.
    The control becomes dirty the first time its value changes from the value it had when it was last pristine.
    """

    def __init__(
        self,
        value: Optional[ValueT] = None,
        validators: Optional[Iterable[ValidatorLike]] = None,
        async_validators: Optional[Iterable[AsyncValidatorLike]] = None,
        *,
        value_type: Any = Any,
        disabled: bool = False,
        engine: Optional[ValidationEngine] = None,
    ):
        super().__init__(validators, async_validators, engine)
        self.value_type = value_type
        self._check_type(value)
        self._value = value
        self._initial_value = value
        self._pristine_value = value
        self._disabled = disabled
        self.update_value_and_validity(only_self=True)

    @property
    def value(self) -> Optional[ValueT]:
        return self._value

    @property
    def initial_value(self) -> Optional[ValueT]:
        """The value `reset()` restores if called without a value"""
        return self._initial_value

    def _check_type(self, value: Any) -> None:
        try:
            check_type(value, self.value_type)
        except TypeCheckError as error:
            raise TypeCheckError(f"{format_path(self.path)}: {error}") from error

    def set_value(self, value: Any, only_self: bool = False) -> None:
        """
        Sets the value and recomputes this control and its ancestors. If one of the validators of this control
        raises, the previous value is restored before the ValidatorError propagates; status, errors and a pending
        async run stay as they were.
        """
        self._check_type(value)
        previous = self._value
        self._value = value
        try:
            self._recompute()
        except ValidatorError:
            self._value = previous
            raise
        if not self._dirty_self and value != self._pristine_value:
            self.mark_as_dirty()
        if self._parent is not None and not only_self:
            self._parent.update_value_and_validity()

    def _clear_dirty(self) -> None:
        self._pristine_value = self._value
        super()._clear_dirty()

    def _reset_state(self, value: Any) -> None:
        if value is UNSET:
            value = self._initial_value
        self._check_type(value)
        self._value = value
        self._pristine_value = value
        self._dirty_self = self._dirty = False
        self._touched_self = self._touched = False
