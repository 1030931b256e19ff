"""
Contains the built-in validators. Each function either is a Validator or returns one.

Validators which check a property of the value (length, range, pattern) don't report anything for `None` - combine
them with `required` if a value is mandatory.
"""
import re
from collections.abc import Sized
from numbers import Real
from typing import Any, Optional

from .types import ControlPath
from .validator import Validator
from .view import ControlView

EMAIL_PATTERN = re.compile(
    r"^(?=.{1,254}$)(?=.{1,64}@)[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, Sized) and len(value) == 0)


def _required(view: ControlView) -> Optional[dict[str, Any]]:
    if _is_empty(view.value):
        return {"required": True}
    return None


def _required_true(view: ControlView) -> Optional[dict[str, Any]]:
    if view.value is not True:
        return {"required": True}
    return None


def _email(view: ControlView) -> Optional[dict[str, Any]]:
    value = view.value
    if _is_empty(value):
        return None
    if not isinstance(value, str) or EMAIL_PATTERN.match(value) is None:
        return {"email": True}
    return None


required = Validator(_required, name="required")
"""Reports `{"required": True}` if the value is None or empty (empty string, list, dict...)"""

required_true = Validator(_required_true, name="required_true")
"""Reports `{"required": True}` unless the value is exactly True, e.g. for a mandatory checkbox"""

email = Validator(_email, name="email")
"""Reports `{"email": True}` if a non-empty value is not an e-mail address"""


def min_length(length: int) -> Validator:
    """
    Reports `{"minlength": {"requiredLength": ..., "actualLength": ...}}` if the value is shorter than `length`.
    Note that the empty string is too short as well; values without a length are ignored.
    """

    def _min_length(view: ControlView) -> Optional[dict[str, Any]]:
        value = view.value
        if isinstance(value, Sized) and len(value) < length:
            return {"minlength": {"requiredLength": length, "actualLength": len(value)}}
        return None

    return Validator(_min_length, name=f"min_length({length})")


def max_length(length: int) -> Validator:
    """Reports `{"maxlength": {"requiredLength": ..., "actualLength": ...}}` if the value is longer than `length`"""

    def _max_length(view: ControlView) -> Optional[dict[str, Any]]:
        value = view.value
        if isinstance(value, Sized) and len(value) > length:
            return {"maxlength": {"requiredLength": length, "actualLength": len(value)}}
        return None

    return Validator(_max_length, name=f"max_length({length})")


def min_value(minimum: Real) -> Validator:
    """Reports `{"min": {"min": ..., "actual": ...}}` if a numeric value is less than `minimum`"""

    def _min_value(view: ControlView) -> Optional[dict[str, Any]]:
        value = view.value
        if isinstance(value, Real) and not isinstance(value, bool) and value < minimum:
            return {"min": {"min": minimum, "actual": value}}
        return None

    return Validator(_min_value, name=f"min_value({minimum})")


def max_value(maximum: Real) -> Validator:
    """Reports `{"max": {"max": ..., "actual": ...}}` if a numeric value is greater than `maximum`"""

    def _max_value(view: ControlView) -> Optional[dict[str, Any]]:
        value = view.value
        if isinstance(value, Real) and not isinstance(value, bool) and value > maximum:
            return {"max": {"max": maximum, "actual": value}}
        return None

    return Validator(_max_value, name=f"max_value({maximum})")


def pattern(regex: str | re.Pattern[str]) -> Validator:
    """
    Reports `{"pattern": {"requiredPattern": ..., "actualValue": ...}}` if a non-empty string value doesn't match the
    regular expression as a whole.
    """
    compiled = re.compile(regex)

    def _pattern(view: ControlView) -> Optional[dict[str, Any]]:
        value = view.value
        if _is_empty(value):
            return None
        if not isinstance(value, str) or compiled.fullmatch(value) is None:
            return {"pattern": {"requiredPattern": compiled.pattern, "actualValue": value}}
        return None

    return Validator(_pattern, name=f"pattern({compiled.pattern!r})")


def forbidden_name(regex: str | re.Pattern[str]) -> Validator:
    """
    Reports `{"forbiddenName": {"value": ...}}` if the regular expression is found anywhere in a string value.
    Pass a compiled pattern to use flags, e.g. `forbidden_name(re.compile("bob", re.IGNORECASE))`.
    """
    compiled = re.compile(regex)

    def _forbidden_name(view: ControlView) -> Optional[dict[str, Any]]:
        value = view.value
        if isinstance(value, str) and compiled.search(value) is not None:
            return {"forbiddenName": {"value": value}}
        return None

    return Validator(_forbidden_name, name=f"forbidden_name({compiled.pattern!r})")


def fields_differ(first: str | ControlPath, second: str | ControlPath, error_key: str) -> Validator:
    """
    A cross-field validator for composites. Reports `{error_key: True}` if the values of the two descendants are set
    and equal. If one of them doesn't exist, it has no opinion.
    """

    def _fields_differ(view: ControlView) -> Optional[dict[str, Any]]:
        first_view = view.get(first)
        second_view = view.get(second)
        if first_view is None or second_view is None:
            return None
        if _is_empty(first_view.value) or _is_empty(second_view.value):
            return None
        if first_view.value == second_view.value:
            return {error_key: True}
        return None

    return Validator(_fields_differ, name=f"fields_differ({first}, {second})")
