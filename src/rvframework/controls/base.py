"""
Contains the AbstractControl class which implements the status and interaction state handling shared by all controls.
"""
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional

from frozendict import frozendict

from ..errors import ValidatorError
from ..execution import ValidationEngine
from ..result import ValidationResult
from ..types import (
    UNSET,
    AsyncValidatorLike,
    ControlPath,
    PathSegment,
    Status,
    ValidationErrors,
    ValidatorLike,
)
from ..utils.query_object import resolve_control
from ..validator import AsyncValidator, Validator, compose, to_async_validator, to_validator
from ..view import ControlView

if TYPE_CHECKING:
    from ..execution import AsyncRun
    from .composite import CompositeControl

_logger = logging.getLogger(__name__)

_NO_ERRORS: ValidationErrors = frozendict()


# pylint: disable=too-many-instance-attributes, too-many-public-methods
class AbstractControl(ABC):
    """
    The base class of all controls. A control holds a value, its validators and the cached results of the last
    recompute: status, errors and the interaction state (dirty/touched). All queries are O(1); the mutating methods
    keep the cache up to date by recomputing the control itself and then each ancestor up to the root, once.
    """

    def __init__(
        self,
        validators: Optional[Iterable[ValidatorLike]] = None,
        async_validators: Optional[Iterable[AsyncValidatorLike]] = None,
        engine: Optional[ValidationEngine] = None,
    ):
        self._parent: Optional["CompositeControl"] = None
        self._engine = engine
        self._validators: tuple[Validator, ...] = ()
        self._async_validators: tuple[AsyncValidator, ...] = ()
        self._composed = compose(())
        self._replace_validators(validators or (), async_validators or ())

        self._status: Status = Status.VALID
        self._errors: ValidationErrors = _NO_ERRORS
        self._sync_result: ValidationResult = ValidationResult.valid()
        self._own_result: ValidationResult = ValidationResult.valid()
        self._disabled = False

        # "self" flags are the ones set directly on this control, the plain ones include the descendants
        self._dirty_self = False
        self._dirty = False
        self._touched_self = False
        self._touched = False

        self._generation = 0
        self._async_pending = False
        self._async_run: Optional["AsyncRun"] = None

    # --- queries -------------------------------------------------------------------------------------------------

    @property
    @abstractmethod
    def value(self) -> Any:
        """The current value of this control"""

    @property
    def status(self) -> Status:
        return self._status

    @property
    def errors(self) -> ValidationErrors:
        """
        The errors of this control. For composites these are the errors of the composite's own (cross-field)
        validators plus one entry per enabled child which has errors, keyed by the child's name (or index as string).
        The own validators win if a key collides with a child name.
        """
        return self._errors

    @property
    def own_errors(self) -> ValidationErrors:
        """The errors reported by the sync and async validators of this control itself"""
        return self._own_result.errors

    @property
    def valid(self) -> bool:
        return self._status == Status.VALID

    @property
    def invalid(self) -> bool:
        return self._status == Status.INVALID

    @property
    def pending(self) -> bool:
        return self._status == Status.PENDING

    @property
    def disabled(self) -> bool:
        return self._disabled

    @property
    def enabled(self) -> bool:
        return not self._disabled

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def pristine(self) -> bool:
        return not self._dirty

    @property
    def touched(self) -> bool:
        return self._touched

    @property
    def untouched(self) -> bool:
        return not self._touched

    @property
    def validators(self) -> tuple[Validator, ...]:
        return self._validators

    @property
    def async_validators(self) -> tuple[AsyncValidator, ...]:
        return self._async_validators

    @property
    def generation(self) -> int:
        """
        Counts the async validation runs started for this control. Only results of the latest run are applied.
        """
        return self._generation

    @property
    def parent(self) -> Optional["CompositeControl"]:
        return self._parent

    @property
    def root(self) -> "AbstractControl":
        node: AbstractControl = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def path(self) -> ControlPath:
        """The names/indices leading from the root to this control. The root itself has the empty path."""
        if self._parent is None:
            return ()
        return self._parent.path + (self._parent.key_of(self),)

    @property
    def engine(self) -> ValidationEngine:
        """
        The engine which runs the async validators of this control tree. All controls of a tree share the engine of
        their root. If the root got none on construction, a fresh one is created.
        """
        root = self.root
        if root._engine is None:
            root._engine = ValidationEngine()
        return root._engine

    def iter_children(self) -> Iterator[tuple[PathSegment, "AbstractControl"]]:
        """Yields (name or index, control) for all direct children. Leaf controls have none."""
        return iter(())

    def get(self, path: str | PathSegment | ControlPath) -> Optional["AbstractControl"]:
        """
        Looks up a descendant by a dotted path (`"address.street"`), a single name or index, or a tuple of segments.
        Returns None if there is no such control.
        """
        return resolve_control(self, path)

    # --- validators ----------------------------------------------------------------------------------------------

    def _replace_validators(self, validators: Iterable[ValidatorLike], async_validators: Iterable[AsyncValidatorLike]):
        self._validators = tuple(to_validator(validator) for validator in validators)
        self._async_validators = tuple(to_async_validator(validator) for validator in async_validators)
        self._composed = compose(self._validators)

    def set_validators(self, validators: Iterable[ValidatorLike]) -> None:
        """Replaces the synchronous validators and recomputes the status"""
        self._replace_validators(validators, self._async_validators)
        self.update_value_and_validity()

    def add_validators(self, *validators: ValidatorLike) -> None:
        self.set_validators(self._validators + tuple(validators))

    def remove_validators(self, *validators: ValidatorLike) -> None:
        to_remove = {to_validator(validator) for validator in validators}
        self.set_validators(validator for validator in self._validators if validator not in to_remove)

    def clear_validators(self) -> None:
        self.set_validators(())

    def set_async_validators(self, async_validators: Iterable[AsyncValidatorLike]) -> None:
        """Replaces the asynchronous validators and recomputes the status"""
        self._replace_validators(self._validators, async_validators)
        self.update_value_and_validity()

    def add_async_validators(self, *async_validators: AsyncValidatorLike) -> None:
        self.set_async_validators(self._async_validators + tuple(async_validators))

    def clear_async_validators(self) -> None:
        self.set_async_validators(())

    def has_error(self, error_key: str, path: Optional[str | PathSegment | ControlPath] = None) -> bool:
        return self.get_error(error_key, path) is not None

    def get_error(self, error_key: str, path: Optional[str | PathSegment | ControlPath] = None) -> Any:
        """Returns the payload of `error_key` on this control (or the descendant at `path`) or None"""
        control = self if path is None else self.get(path)
        if control is None:
            return None
        return control.errors.get(error_key)

    # --- recompute -----------------------------------------------------------------------------------------------

    def update_value_and_validity(self, only_self: bool = False) -> None:
        """
        Recomputes the value, runs the validators and updates the status of this control. Then all ancestors are
        recomputed in root-ward order (unless `only_self` is set). Calling this repeatedly without changing anything
        in between yields the same status and errors.
        A ValidatorError is raised if a validator raises. The control keeps its previous errors in this case, but a
        pending async run is cancelled because it was started for a value which is outdated now. The ancestors are
        recomputed nevertheless, so that their aggregated values stay in line with their children.
        """
        try:
            self._recompute()
        except ValidatorError:
            self._cancel_async()
            self._status = self._calculate_status()
            raise
        finally:
            if self._parent is not None and not only_self:
                self._parent.update_value_and_validity()

    def _recompute(self) -> None:
        """Recomputes this control only. Raises a ValidatorError before anything but the value got updated."""
        self._update_value()
        if self._disabled:
            self._cancel_async()
            self._sync_result = self._own_result = ValidationResult.valid()
            self._errors = _NO_ERRORS
            self._status = Status.DISABLED
            return
        view = ControlView(self)
        sync_result = self._composed(view)
        self._cancel_async()
        self._sync_result = self._own_result = sync_result
        self._refresh_errors()
        if sync_result.is_valid and len(self._async_validators) > 0:
            self._async_pending = True
            self.engine.start(self, view)
        self._status = self._calculate_status()
        _logger.debug("Recomputed %r: %s", self, self._status.value)

    def _recompute_subtree(self) -> None:
        """Recomputes all descendants bottom-up and then this control; ancestors are not touched"""
        for _, child in self.iter_children():
            child._recompute_subtree()
        self._recompute()

    def _cancel_async(self) -> None:
        self._async_pending = False
        run = self._async_run
        if run is not None:
            self._async_run = None
            run.cancel()

    def _settle_async(self, result: ValidationResult) -> None:
        """
        Called by the engine once all async validators of the current generation settled. Only errors and status
        are refreshed for this control and its ancestors; no validator is run again.
        """
        self._async_run = None
        self._async_pending = False
        self._own_result = self._sync_result.merge(result)
        node: Optional[AbstractControl] = self
        while node is not None:
            node._refresh_errors()
            node._status = node._calculate_status()
            node = node._parent

    def _refresh_errors(self) -> None:
        if self._disabled:
            self._errors = _NO_ERRORS
            return
        child_errors = {
            str(key): child.errors for key, child in self.iter_children() if child.enabled and len(child.errors) > 0
        }
        self._errors = ValidationResult.of(child_errors).merge(self._own_result).errors

    def _update_value(self) -> None:
        """Composites rebuild their aggregated value here"""

    def _any_child(self, status: Status) -> bool:
        return any(child.status == status for _, child in self.iter_children())

    def _calculate_status(self) -> Status:
        if self._disabled:
            return Status.DISABLED
        if len(self._errors) > 0 or self._any_child(Status.INVALID):
            return Status.INVALID
        if self._async_pending or self._any_child(Status.PENDING):
            return Status.PENDING
        return Status.VALID

    # --- enable/disable ------------------------------------------------------------------------------------------

    def set_disabled(self, disabled: bool) -> None:
        """
        Disables or enables this control and all its descendants. A disabled control runs no validators, has no
        errors and is excluded from the status and value of its parent.
        """
        self._propagate_disabled(disabled)
        if disabled:
            self._recompute()
        else:
            self._recompute_subtree()
        if self._parent is not None:
            self._parent.update_value_and_validity()

    def disable(self) -> None:
        self.set_disabled(True)

    def enable(self) -> None:
        self.set_disabled(False)

    def _propagate_disabled(self, disabled: bool) -> None:
        self._disabled = disabled
        if disabled:
            self._cancel_async()
            self._sync_result = self._own_result = ValidationResult.valid()
            self._errors = _NO_ERRORS
            self._status = Status.DISABLED
        for _, child in self.iter_children():
            child._propagate_disabled(disabled)

    # --- interaction state ---------------------------------------------------------------------------------------

    def mark_as_dirty(self) -> None:
        """Marks this control (and therefore all its ancestors) as dirty"""
        self._dirty_self = True
        self._refresh_interaction_state()

    def mark_as_pristine(self) -> None:
        """Clears the dirty flag of this control and all its descendants"""
        self._clear_dirty()
        self._refresh_interaction_state()

    def mark_as_touched(self) -> None:
        """Marks this control (and therefore all its ancestors) as touched. This is the "blur" signal."""
        self._touched_self = True
        self._refresh_interaction_state()

    def mark_all_as_touched(self) -> None:
        """Marks this control and all its descendants as touched"""
        for _, child in self.iter_children():
            child.mark_all_as_touched()
        self.mark_as_touched()

    def mark_as_untouched(self) -> None:
        """Clears the touched flag of this control and all its descendants"""
        self._clear_touched()
        self._refresh_interaction_state()

    def _clear_dirty(self) -> None:
        self._dirty_self = False
        self._dirty = False
        for _, child in self.iter_children():
            child._clear_dirty()

    def _clear_touched(self) -> None:
        self._touched_self = False
        self._touched = False
        for _, child in self.iter_children():
            child._clear_touched()

    def _refresh_interaction_state(self) -> None:
        node: Optional[AbstractControl] = self
        while node is not None:
            children = [child for _, child in node.iter_children()]
            node._dirty = node._dirty_self or any(child.dirty for child in children)
            node._touched = node._touched_self or any(child.touched for child in children)
            node = node._parent

    # --- value ---------------------------------------------------------------------------------------------------

    @property
    def raw_value(self) -> Any:
        """The value including disabled descendants. Same as `value` for leaf controls."""
        return self.value

    @abstractmethod
    def set_value(self, value: Any, only_self: bool = False) -> None:
        """Sets the value and recomputes this control and its ancestors"""

    def patch_value(self, value: Any, only_self: bool = False) -> None:
        """Like `set_value`, but composites accept partial values"""
        self.set_value(value, only_self=only_self)

    def reset(self, value: Any = UNSET) -> None:
        """
        Clears dirty and touched on this control and all its descendants, restores the given value (or the initial
        value if none is given) and recomputes the whole subtree and the ancestors.
        """
        self._reset_state(value)
        self._recompute_subtree()
        if self._parent is not None:
            self._parent._refresh_interaction_state()
            self._parent.update_value_and_validity()

    @abstractmethod
    def _reset_state(self, value: Any) -> None:
        """Restores the value and clears the interaction state top-down, without recomputing anything"""

    def _adopt_engine(self) -> None:
        """
        Restarts async runs in this subtree which were started by another engine, e.g. before this control got
        attached to its current parent.
        """
        for _, child in self.iter_children():
            child._adopt_engine()
        run = self._async_run
        if run is not None and run.engine is not self.engine:
            self._recompute()

    def __repr__(self):
        return f"{type(self).__name__}(path={'.'.join(str(segment) for segment in self.path) or '<root>'})"
