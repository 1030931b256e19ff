"""
Contains the FormArray class, a composite of indexed children which may be added and removed at runtime.
"""
from collections.abc import Sequence
from typing import Any, Iterable, Iterator, Optional

from ..errors import StructuralError
from ..execution import ValidationEngine
from ..types import UNSET, AsyncValidatorLike, PathSegment, ValidatorLike
from .base import AbstractControl
from .composite import CompositeControl


class FormArray(CompositeControl):
    """
    A composite of an ordered list of children. Its value is the list of the values of the enabled children.
    Every edit (`append`, `insert`, `remove_at`, `set_control`, `clear`) recomputes the array and its ancestors.
    """

    def __init__(
        self,
        controls: Iterable[AbstractControl] = (),
        validators: Optional[Iterable[ValidatorLike]] = None,
        async_validators: Optional[Iterable[AsyncValidatorLike]] = None,
        *,
        disabled: bool = False,
        engine: Optional[ValidationEngine] = None,
    ):
        super().__init__(validators, async_validators, engine)
        self._controls: list[AbstractControl] = []
        for control in controls:
            self._own(control)
            self._controls.append(control)
        for control in self._controls:
            control._adopt_engine()
        self._value = []
        if disabled:
            self._propagate_disabled(True)
        self._refresh_interaction_state()
        self.update_value_and_validity(only_self=True)

    @property
    def controls(self) -> tuple[AbstractControl, ...]:
        return tuple(self._controls)

    def iter_children(self) -> Iterator[tuple[PathSegment, AbstractControl]]:
        return iter(list(enumerate(self._controls)))

    def key_of(self, child: AbstractControl) -> PathSegment:
        for index, control in enumerate(self._controls):
            if control is child:
                return index
        raise StructuralError(f"{child!r} is not a child of {self!r}")

    def __getitem__(self, index: int) -> AbstractControl:
        return self._controls[index]

    def __len__(self) -> int:
        return len(self._controls)

    @property
    def raw_value(self) -> list[Any]:
        return [control.raw_value for control in self._controls]

    def _update_value(self) -> None:
        self._value = [control.value for control in self._controls if control.enabled or self._disabled]

    def _check_index(self, index: int) -> int:
        if not -len(self._controls) <= index < len(self._controls):
            raise StructuralError(f"{self!r}: index {index} out of range")
        return index % len(self._controls)

    # --- tree edits ----------------------------------------------------------------------------------------------

    def append(self, control: AbstractControl) -> None:
        self._own(control)
        self._controls.append(control)
        self._children_changed(control)

    def insert(self, index: int, control: AbstractControl) -> None:
        """Inserts the control before `index`, like `list.insert`"""
        self._own(control)
        self._controls.insert(index, control)
        self._children_changed(control)

    def remove_at(self, index: int) -> AbstractControl:
        """Removes and returns the child at `index`"""
        control = self._controls.pop(self._check_index(index))
        self._disown(control)
        self._children_changed()
        return control

    def set_control(self, index: int, control: AbstractControl) -> None:
        """Replaces the child at `index`"""
        index = self._check_index(index)
        self._own(control)
        self._disown(self._controls[index])
        self._controls[index] = control
        self._children_changed(control)

    def clear(self) -> None:
        """Removes all children"""
        if len(self._controls) == 0:
            return
        for control in self._controls:
            self._disown(control)
        self._controls.clear()
        self._children_changed()

    # --- values --------------------------------------------------------------------------------------------------

    def set_value(self, value: Any, only_self: bool = False) -> None:
        """
        Sets the values of all children. `value` must be a sequence with exactly one entry per child; disabled
        children included. Use `patch_value` to set only the first entries.
        """
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise StructuralError(f"{self!r} expects a sequence, got {type(value).__name__}")
        if len(value) != len(self._controls):
            raise StructuralError(f"{self!r}: expected {len(self._controls)} value(s), got {len(value)}")
        try:
            for control, child_value in zip(self._controls, value):
                control.set_value(child_value, only_self=True)
        finally:
            self.update_value_and_validity(only_self=only_self)

    def patch_value(self, value: Sequence[Any], only_self: bool = False) -> None:
        """Sets the values of the first children; surplus entries are ignored"""
        try:
            for control, child_value in zip(self._controls, value):
                control.patch_value(child_value, only_self=True)
        finally:
            self.update_value_and_validity(only_self=only_self)

    def _child_value(self, value: Any, key: PathSegment) -> Any:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and isinstance(key, int):
            if key < len(value):
                return value[key]
        return UNSET
