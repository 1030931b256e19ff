"""
Contains the FormGroup class, a composite of named children.
"""
from collections.abc import Mapping
from typing import Any, Iterable, Iterator, Optional

from ..errors import StructuralError
from ..execution import ValidationEngine
from ..types import UNSET, AsyncValidatorLike, PathSegment, ValidatorLike
from .base import AbstractControl
from .composite import CompositeControl


class FormGroup(CompositeControl):
    """
    A composite of named children. Its value is a dict mapping the names of the enabled children to their values.
    """

    def __init__(
        self,
        controls: Mapping[str, AbstractControl],
        validators: Optional[Iterable[ValidatorLike]] = None,
        async_validators: Optional[Iterable[AsyncValidatorLike]] = None,
        *,
        disabled: bool = False,
        engine: Optional[ValidationEngine] = None,
    ):
        super().__init__(validators, async_validators, engine)
        self._controls: dict[str, AbstractControl] = {}
        for name, control in controls.items():
            self._own(control)
            self._controls[name] = control
        for control in self._controls.values():
            control._adopt_engine()
        self._value = {}
        if disabled:
            self._propagate_disabled(True)
        self._refresh_interaction_state()
        self.update_value_and_validity(only_self=True)

    @property
    def controls(self) -> Mapping[str, AbstractControl]:
        """A read-only mapping of the children. Use `add_control`/`remove_control` to change it."""
        return dict(self._controls)

    def iter_children(self) -> Iterator[tuple[PathSegment, AbstractControl]]:
        return iter(list(self._controls.items()))

    def key_of(self, child: AbstractControl) -> PathSegment:
        for name, control in self._controls.items():
            if control is child:
                return name
        raise StructuralError(f"{child!r} is not a child of {self!r}")

    def __getitem__(self, name: str) -> AbstractControl:
        return self._controls[name]

    def __contains__(self, name: object) -> bool:
        return name in self._controls

    @property
    def raw_value(self) -> dict[str, Any]:
        return {name: control.raw_value for name, control in self._controls.items()}

    def _update_value(self) -> None:
        self._value = {
            name: control.value
            for name, control in self._controls.items()
            if control.enabled or self._disabled
        }

    # --- tree edits ----------------------------------------------------------------------------------------------

    def add_control(self, name: str, control: AbstractControl) -> None:
        """Adds a child. If a child with that name exists already, nothing happens (use `set_control` to replace)."""
        if name in self._controls:
            return
        self._own(control)
        self._controls[name] = control
        self._children_changed(control)

    def set_control(self, name: str, control: AbstractControl) -> None:
        """Adds the child or replaces the existing one with that name"""
        previous = self._controls.get(name)
        self._own(control)
        if previous is not None:
            self._disown(previous)
        self._controls[name] = control
        self._children_changed(control)

    def remove_control(self, name: str) -> None:
        """Removes the child with that name; unknown names are ignored"""
        control = self._controls.pop(name, None)
        if control is None:
            return
        self._disown(control)
        self._children_changed()

    # --- values --------------------------------------------------------------------------------------------------

    def set_value(self, value: Any, only_self: bool = False) -> None:
        """
        Sets the values of all children. `value` must be a mapping with exactly one entry per child; disabled
        children included. Use `patch_value` to set only some of them.
        """
        if not isinstance(value, Mapping):
            raise StructuralError(f"{self!r} expects a mapping, got {type(value).__name__}")
        missing = self._controls.keys() - value.keys()
        if len(missing) > 0:
            raise StructuralError(f"{self!r}: missing value(s) for {sorted(missing)}")
        unknown = value.keys() - self._controls.keys()
        if len(unknown) > 0:
            raise StructuralError(f"{self!r}: no control(s) named {sorted(unknown)}")
        try:
            for name, control in self._controls.items():
                control.set_value(value[name], only_self=True)
        finally:
            self.update_value_and_validity(only_self=only_self)

    def patch_value(self, value: Mapping[str, Any], only_self: bool = False) -> None:
        """Sets the values of the children named in `value`; unknown names are ignored"""
        try:
            for name, child_value in value.items():
                control = self._controls.get(name)
                if control is not None:
                    control.patch_value(child_value, only_self=True)
        finally:
            self.update_value_and_validity(only_self=only_self)

    def _child_value(self, value: Any, key: PathSegment) -> Any:
        if isinstance(value, Mapping):
            return value.get(key, UNSET)
        return UNSET
