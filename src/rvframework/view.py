"""
Contains the read-only view on a control which is handed to validator functions.
"""
from typing import TYPE_CHECKING, Any, Iterator, Optional

from .types import ControlPath, PathSegment, Status, ValidationErrors

if TYPE_CHECKING:
    from .controls.base import AbstractControl


class ControlView:
    """
    A read-only view on a control. The value is captured when the view is created, i.e. an async validator sees the
    value it was started for, even if the control changed meanwhile. Everything else (status, errors, children) is
    read from the control when accessed.
    Validators only get views, never the controls themselves, so they can't mutate the tree.
    """

    __slots__ = ("_control", "_value")

    def __init__(self, control: "AbstractControl"):
        self._control = control
        self._value = control.value

    @property
    def value(self) -> Any:
        return self._value

    @property
    def status(self) -> Status:
        return self._control.status

    @property
    def errors(self) -> ValidationErrors:
        return self._control.errors

    @property
    def own_errors(self) -> ValidationErrors:
        return self._control.own_errors

    @property
    def valid(self) -> bool:
        return self._control.valid

    @property
    def invalid(self) -> bool:
        return self._control.invalid

    @property
    def pending(self) -> bool:
        return self._control.pending

    @property
    def disabled(self) -> bool:
        return self._control.disabled

    @property
    def dirty(self) -> bool:
        return self._control.dirty

    @property
    def touched(self) -> bool:
        return self._control.touched

    @property
    def path(self) -> ControlPath:
        return self._control.path

    @property
    def parent(self) -> Optional["ControlView"]:
        parent = self._control.parent
        return None if parent is None else ControlView(parent)

    @property
    def root(self) -> "ControlView":
        return ControlView(self._control.root)

    def get(self, path: str | PathSegment | ControlPath) -> Optional["ControlView"]:
        """
        Looks up a descendant by a dotted path (`"address.street"`), a name or index, or a tuple of segments.
        Returns None if there is no such control. Validators should treat this as "no opinion", the field may simply
        not exist in this variant of the form.
        """
        control = self._control.get(path)
        return None if control is None else ControlView(control)

    def __getitem__(self, key: PathSegment) -> "ControlView":
        control = self._control.get(key)
        if control is None:
            raise KeyError(key)
        return ControlView(control)

    def children(self) -> Iterator[tuple[PathSegment, "ControlView"]]:
        """Yields (name or index, view) for all direct children. Leaf controls have none."""
        for key, child in self._control.iter_children():
            yield key, ControlView(child)

    def __repr__(self):
        return f"ControlView({self._control!r})"
