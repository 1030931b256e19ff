"""
Contains the types used in the validation framework
"""
from enum import Enum
from typing import TYPE_CHECKING, Any, AsyncIterator, Awaitable, Callable, Mapping, Optional, TypeAlias, TypeVar, Union

from frozendict import frozendict

if TYPE_CHECKING:
    from .result import ValidationResult
    from .validator import AsyncValidator, Validator
    from .view import ControlView


class Status(str, Enum):
    """
    The validation status of a control. `DISABLED` overrides all other states.
    """

    VALID = "VALID"
    INVALID = "INVALID"
    PENDING = "PENDING"
    DISABLED = "DISABLED"


class _Unset:
    """
    Sentinel type for "no value given". `None` is a legit control value, so it can't be used for this.
    """

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()

ValueT = TypeVar("ValueT")
ValidationErrors: TypeAlias = frozendict[str, Any]
RawValidationResult: TypeAlias = Union[Mapping[str, Any], "ValidationResult", None]
SyncValidatorFunction: TypeAlias = Callable[["ControlView"], RawValidationResult]
AsyncValidatorFunction: TypeAlias = Callable[
    ["ControlView"], Awaitable[RawValidationResult] | AsyncIterator[RawValidationResult]
]
ValidatorFunction: TypeAlias = SyncValidatorFunction | AsyncValidatorFunction
ValidatorLike: TypeAlias = Union["Validator", SyncValidatorFunction]
AsyncValidatorLike: TypeAlias = Union["AsyncValidator", AsyncValidatorFunction]
PathSegment: TypeAlias = str | int
ControlPath: TypeAlias = tuple[PathSegment, ...]
