"""
Contains functionality to analyze the validation state of a whole control tree
"""
import itertools
from typing import TYPE_CHECKING, Any, Iterator, Optional

from .errors import format_path
from .types import Status

if TYPE_CHECKING:
    from .controls.base import AbstractControl


def _walk(control: "AbstractControl") -> Iterator["AbstractControl"]:
    yield control
    for _, child in control.iter_children():
        yield from _walk(child)


def _extract_error_key(error: tuple[str, str, Any]) -> str:
    return error[1]


class FormAnalysis:
    """
    A snapshot of the state of a control tree, e.g. to render a summary of everything which is wrong with a form.
    Note that the values are calculated only if you use them and are not updated if the tree changes afterwards -
    create a new instance instead.
    """

    def __init__(self, root: "AbstractControl"):
        self._root = root
        self._controls: list["AbstractControl"] = list(_walk(root))

        self._control_errors: Optional[dict[str, dict[str, Any]]] = None
        self._pending_paths: Optional[list[str]] = None
        self._errors: Optional[list[tuple[str, str, Any]]] = None
        self._num_errors_per_key: Optional[dict[str, int]] = None

    def _collect(self):
        """Groups the errors per control and collects the pending controls"""
        self._control_errors = {}
        self._pending_paths = []
        for control in self._controls:
            if len(control.own_errors) > 0:
                self._control_errors[format_path(control.path)] = dict(control.own_errors)
            if control.status == Status.PENDING:
                self._pending_paths.append(format_path(control.path))

    @property
    def total(self) -> int:
        """Number of all controls in the tree, including the root"""
        return len(self._controls)

    @property
    def control_errors(self) -> dict[str, dict[str, Any]]:
        """Maps the paths of the controls which report errors themselves to their errors"""
        if self._control_errors is None:
            self._collect()
            assert self._control_errors is not None
        return self._control_errors

    @property
    def pending_paths(self) -> list[str]:
        """Paths of all controls which are waiting for async validation (directly or because of a child)"""
        if self._pending_paths is None:
            self._collect()
            assert self._pending_paths is not None
        return self._pending_paths

    @property
    def num_invalid(self) -> int:
        """Number of controls which report errors themselves (equivalent to `len(self.control_errors)`)"""
        return len(self.control_errors)

    @property
    def all_errors(self) -> list[tuple[str, str, Any]]:
        """
        This is a complete list of (control path, error key, error payload) of all controls.
        It is sorted by the error key to enable grouping by it using itertools.
        """
        if self._errors is None:
            self._errors = sorted(
                (
                    (path, error_key, payload)
                    for path, errors in self.control_errors.items()
                    for error_key, payload in errors.items()
                ),
                key=_extract_error_key,
            )
        return self._errors

    @property
    def num_errors_total(self) -> int:
        """Number of errors of all controls in total"""
        return len(self.all_errors)

    @property
    def num_errors_per_key(self) -> dict[str, int]:
        """
        This is a dictionary which maps the error key to the number of controls reporting it.
        """
        if self._num_errors_per_key is None:
            self._num_errors_per_key = {
                key: sum(1 for _ in values_iter)
                for key, values_iter in itertools.groupby(self.all_errors, key=_extract_error_key)
            }
        return self._num_errors_per_key
