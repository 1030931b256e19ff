"""
Contains the CompositeControl class, the base of FormGroup and FormArray.
"""
from abc import abstractmethod
from typing import Any, Iterator, Optional

from ..errors import StructuralError
from ..types import PathSegment
from .base import AbstractControl


class CompositeControl(AbstractControl):
    """
    An inner node of the control tree. It exclusively owns its children; the children only keep a back reference to
    it for lookups. Its status aggregates the status of all enabled children and the result of its own validators,
    which see the whole composite and may therefore compare the values of several children (cross-field validation).
    """

    _value: Any = None

    @property
    def value(self) -> Any:
        """The aggregated value of all enabled children (of all children if the composite itself is disabled)"""
        return self._value

    @property
    @abstractmethod
    def raw_value(self) -> Any:
        """The aggregated value of all children, including the disabled ones"""

    @abstractmethod
    def key_of(self, child: AbstractControl) -> PathSegment:
        """Returns the name or index under which `child` is stored"""

    @abstractmethod
    def iter_children(self) -> Iterator[tuple[PathSegment, AbstractControl]]:
        ...

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_children())

    def _own(self, child: AbstractControl) -> None:
        """Sets the back reference of a new child. Controls can't be shared between composites."""
        if not isinstance(child, AbstractControl):
            raise TypeError(f"{child!r} is not a control")
        if child._parent is not None:
            raise StructuralError(f"{child!r} already belongs to {child._parent!r}")
        node: Optional[AbstractControl] = self
        while node is not None:
            if node is child:
                raise StructuralError(f"{child!r} can't become a descendant of itself")
            node = node._parent
        child._parent = self

    @staticmethod
    def _disown(child: AbstractControl) -> None:
        child._parent = None

    def _children_changed(self, *added: AbstractControl) -> None:
        """
        Called after children got added or removed: new children inherit the disabled state of this composite and
        switch to its engine, then this composite and its ancestors are recomputed.
        """
        for child in added:
            if self._disabled and not child._disabled:
                child._propagate_disabled(True)
            child._adopt_engine()
        self._refresh_interaction_state()
        self.update_value_and_validity()

    def _reset_state(self, value: Any) -> None:
        for key, child in self.iter_children():
            child._reset_state(self._child_value(value, key))
        self._dirty_self = self._dirty = False
        self._touched_self = self._touched = False

    @abstractmethod
    def _child_value(self, value: Any, key: PathSegment) -> Any:
        """Picks the part of a composite value which belongs to the child stored under `key` (or UNSET)"""
