"""
Contains the projection of the control state onto class names, as used by rendering layers to style controls.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rvframework.controls.base import AbstractControl


def status_classes(control: "AbstractControl", prefix: str = "rv") -> frozenset[str]:
    """
    Derives the class names of a control from its status and interaction state, e.g.
    `{"rv-invalid", "rv-dirty", "rv-touched"}`. Disabled controls get `rv-disabled` instead of a validity class.
    """
    return frozenset(
        (
            f"{prefix}-{control.status.value.lower()}",
            f"{prefix}-dirty" if control.dirty else f"{prefix}-pristine",
            f"{prefix}-touched" if control.touched else f"{prefix}-untouched",
        )
    )
