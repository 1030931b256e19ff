"""
Contains functions to look up controls in a control tree by their path.
"""
from typing import TYPE_CHECKING, Optional, TypeVar, overload

from rvframework.errors import ControlNotFoundError, format_path
from rvframework.types import ControlPath, PathSegment

if TYPE_CHECKING:
    from rvframework.controls.base import AbstractControl

ControlT = TypeVar("ControlT", bound="AbstractControl")


def split_path(path: str | PathSegment | ControlPath) -> ControlPath:
    """
    Converts a path into a tuple of segments. Strings are split at dots, purely numeric string segments become
    indices: `"items.0.name"` -> `("items", 0, "name")`. The empty string is the path of the control itself.
    Lookups compare segments and keys as strings, so a group child named `"0"` is found by `"0"` as well.
    """
    if isinstance(path, tuple):
        return path
    if isinstance(path, int):
        return (path,)
    if path == "":
        return ()
    return tuple(int(segment) if segment.isdigit() else segment for segment in path.split("."))


def _child(control: "AbstractControl", segment: PathSegment) -> Optional["AbstractControl"]:
    for key, child in control.iter_children():
        if key == segment or str(key) == str(segment):
            return child
    return None


def resolve_control(control: "AbstractControl", path: str | PathSegment | ControlPath) -> Optional["AbstractControl"]:
    """
    Walks down from `control` along `path`. Returns None if any segment doesn't exist.
    """
    current: Optional["AbstractControl"] = control
    for segment in split_path(path):
        assert current is not None
        current = _child(current, segment)
        if current is None:
            return None
    return current


@overload
def required_control(
    control: "AbstractControl", path: str | PathSegment | ControlPath, control_type: type[ControlT]
) -> ControlT:
    ...


@overload
def required_control(control: "AbstractControl", path: str | PathSegment | ControlPath) -> "AbstractControl":
    ...


def required_control(control, path, control_type=None):
    """
    Tries to look up the control under `path`. If it is not existent, a ControlNotFoundError will be raised.
    If `control_type` is given and the found control is not an instance of it, a TypeError will be raised.
    """
    current = control
    segments = split_path(path)
    for index, segment in enumerate(segments):
        child = _child(current, segment)
        if child is None:
            current_path = format_path(control.path + segments[0 : index + 1])
            raise ControlNotFoundError(current_path)
        current = child
    if control_type is not None and not isinstance(current, control_type):
        raise TypeError(
            f"{format_path(current.path)}: expected {control_type.__name__}, got {type(current).__name__}"
        )
    return current


def optional_control(
    control: "AbstractControl", path: str | PathSegment | ControlPath, control_type: Optional[type[ControlT]] = None
) -> Optional[ControlT]:
    """
    Tries to look up the control under `path`. If it is not existent or doesn't match `control_type`, `None` will be
    returned.
    """
    try:
        return required_control(control, path, control_type)  # type: ignore[call-overload]
    except (ControlNotFoundError, TypeError):
        return None
