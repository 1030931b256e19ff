"""
Contains the ValidationResult value type which is produced by validators and merged by the composition functions.
"""
import logging
from collections.abc import Mapping
from typing import Any, Iterable

from frozendict import frozendict

from .types import RawValidationResult, ValidationErrors

_logger = logging.getLogger(__name__)

_EMPTY_ERRORS: ValidationErrors = frozendict()


class ValidationResult:
    """
    Either VALID (no errors) or INVALID with a non-empty mapping from error key to an arbitrary error detail payload.
    Instances are immutable.
    """

    __slots__ = ("_errors",)

    def __init__(self, errors: Mapping[str, Any] | None = None):
        if errors is None or len(errors) == 0:
            self._errors: ValidationErrors = _EMPTY_ERRORS
        elif isinstance(errors, frozendict):
            self._errors = errors
        else:
            self._errors = frozendict(errors)

    @classmethod
    def valid(cls) -> "ValidationResult":
        """The result without any errors"""
        return _VALID

    @classmethod
    def invalid(cls, errors: Mapping[str, Any]) -> "ValidationResult":
        """
        Creates an INVALID result. Raises a ValueError if `errors` is empty because an invalid result without any error
        key could not be told apart from a valid one.
        """
        if len(errors) == 0:
            raise ValueError("An invalid result needs at least one error key")
        return cls(errors)

    @classmethod
    def of(cls, raw: RawValidationResult) -> "ValidationResult":
        """
        Normalizes the return value of a validator function. Validator functions may return `None` or an empty mapping
        if the value is valid, a mapping of errors otherwise, or a ValidationResult directly.
        """
        if raw is None:
            return _VALID
        if isinstance(raw, ValidationResult):
            return raw
        if isinstance(raw, Mapping):
            return cls(raw)
        raise TypeError(f"Validators must return a mapping, a ValidationResult or None - got {type(raw).__name__}")

    @property
    def errors(self) -> ValidationErrors:
        """The error mapping. It is empty iff the result is valid."""
        return self._errors

    @property
    def is_valid(self) -> bool:
        return len(self._errors) == 0

    @property
    def is_invalid(self) -> bool:
        return len(self._errors) > 0

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """
        Returns the key-wise union of both results. If both contain the same key, the payload of `other` wins.
        """
        if other.is_valid:
            return self
        if self.is_valid:
            return other
        collisions = self._errors.keys() & other.errors.keys()
        if len(collisions) > 0:
            _logger.warning("Error key(s) %s reported by more than one validator; the last one wins", sorted(collisions))
        merged = dict(self._errors)
        merged.update(other.errors)
        return ValidationResult(merged)

    @classmethod
    def merge_all(cls, results: Iterable["ValidationResult"]) -> "ValidationResult":
        """Merges the results in the given order (later results win on key collisions)"""
        merged = _VALID
        for result in results:
            merged = merged.merge(result)
        return merged

    def __eq__(self, other):
        if isinstance(other, ValidationResult):
            return self._errors == other.errors
        return NotImplemented

    def __hash__(self):
        return hash(self._errors)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        if self.is_valid:
            return "ValidationResult(VALID)"
        return f"ValidationResult(INVALID, {dict(self._errors)})"


_VALID = ValidationResult()
