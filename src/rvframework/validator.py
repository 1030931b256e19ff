"""
Contains the Validator and AsyncValidator classes which wrap the validator functions, and the functions which compose
a sequence of validators into a single result.
"""
import inspect
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterable, Optional, TypeVar

from .errors import ValidatorError
from .result import ValidationResult
from .types import AsyncValidatorFunction, AsyncValidatorLike, SyncValidatorFunction, ValidatorLike

if TYPE_CHECKING:
    from .view import ControlView

FunctionT = TypeVar("FunctionT", SyncValidatorFunction, AsyncValidatorFunction)
Guard = Callable[["ControlView"], bool]


class _BaseValidator(Generic[FunctionT]):
    """
    Wraps a validator function. The function receives a read-only `ControlView` of the control under validation.
    An optional `guard` may exclude a control from validation: if it returns False, the validator is not executed
    and counts as valid.
    """

    def __init__(self, validator_func: FunctionT, name: Optional[str] = None, guard: Optional[Guard] = None):
        if not callable(validator_func):
            raise TypeError(f"{validator_func!r} is not callable")
        self.validator_func: FunctionT = validator_func
        self.name: str = name if name is not None else getattr(validator_func, "__name__", repr(validator_func))
        self.guard = guard

    @property
    def signature(self) -> inspect.Signature:
        """The signature of the wrapped function"""
        return inspect.signature(self.validator_func)

    def applies_to(self, view: "ControlView") -> bool:
        """Returns False if the guard excludes the control from this validator"""
        return self.guard is None or bool(self.guard(view))

    def __eq__(self, other):
        return (
            type(self) is type(other)
            and self.validator_func == other.validator_func
            and self.name == other.name
            and self.guard == other.guard
        )

    def __hash__(self):
        return hash((type(self), self.validator_func, self.name, self.guard))

    def __repr__(self):
        return f"{type(self).__name__}({self.name})"


class Validator(_BaseValidator[SyncValidatorFunction]):
    """
    A synchronous validator. The wrapped function must be pure: it must not have observable side effects and must not
    mutate the control it validates.
    """

    def __init__(self, validator_func: SyncValidatorFunction, name: Optional[str] = None, guard: Optional[Guard] = None):
        if inspect.iscoroutinefunction(validator_func) or inspect.isasyncgenfunction(validator_func):
            raise TypeError(f"{validator_func!r} is asynchronous - use AsyncValidator instead")
        super().__init__(validator_func, name, guard)

    def __call__(self, view: "ControlView") -> ValidationResult:
        if not self.applies_to(view):
            return ValidationResult.valid()
        return ValidationResult.of(self.validator_func(view))


class AsyncValidator(_BaseValidator[AsyncValidatorFunction]):
    """
    An asynchronous validator. Calling the wrapped function must return either an awaitable or an async iterator.
    An async iterator is settled at its first emission; if it ends without emitting anything the validator has no
    opinion (i.e. valid). If it never emits, the control stays pending.
    """

    async def __call__(self, view: "ControlView") -> ValidationResult:
        """
        Calls the validator function and awaits its outcome. The outcome is normalized into a ValidationResult.
        """
        if not self.applies_to(view):
            return ValidationResult.valid()
        outcome: Any = self.validator_func(view)
        if inspect.isawaitable(outcome):
            return ValidationResult.of(await outcome)
        if hasattr(outcome, "__anext__"):
            try:
                return ValidationResult.of(await anext(outcome))
            except StopAsyncIteration:
                return ValidationResult.valid()
            finally:
                aclose = getattr(outcome, "aclose", None)
                if aclose is not None:
                    await aclose()
        raise TypeError(f"Async validator {self.name} returned {type(outcome).__name__}, not an awaitable")


def to_validator(validator: ValidatorLike) -> Validator:
    """Wraps plain functions into Validator instances"""
    if isinstance(validator, Validator):
        return validator
    if isinstance(validator, AsyncValidator):
        raise TypeError(f"{validator!r} is asynchronous and can't be used as synchronous validator")
    return Validator(validator)


def to_async_validator(validator: AsyncValidatorLike) -> AsyncValidator:
    """Wraps plain functions into AsyncValidator instances"""
    if isinstance(validator, AsyncValidator):
        return validator
    if isinstance(validator, Validator):
        raise TypeError(f"{validator!r} is synchronous and can't be used as asynchronous validator")
    return AsyncValidator(validator)


def compose(validators: Iterable[Validator]) -> Callable[["ControlView"], ValidationResult]:
    """
    Composes the validators into a single function. The validators are evaluated in order; the result is valid only
    if every validator returns valid. Otherwise it is the key-wise union of all invalid payloads where later
    validators win on key collisions.
    If a validator raises, a ValidatorError is raised instead.
    """
    validator_tuple = tuple(validators)

    def composed(view: "ControlView") -> ValidationResult:
        if view.disabled:
            return ValidationResult.valid()
        results = []
        for validator in validator_tuple:
            try:
                results.append(validator(view))
            except Exception as error:
                raise ValidatorError(validator.name, view.path) from error
        return ValidationResult.merge_all(results)

    return composed
