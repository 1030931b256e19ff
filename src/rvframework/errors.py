"""
Contains the exceptions raised by the framework. Note that failing validations are *not* exceptions - they are stored
as error mapping on the respective control. The exceptions below indicate programming errors of validator authors or
misuse of the control tree.
"""
from typing import Optional

from .types import ControlPath


def format_path(path: ControlPath) -> str:
    """
    Returns a dotted representation of a control path, e.g. `address.lines.0`. The root is represented by `<root>`.
    """
    if len(path) == 0:
        return "<root>"
    return ".".join(str(segment) for segment in path)


class FormError(Exception):
    """
    Base class of all exceptions raised by the framework
    """


class StructuralError(FormError):
    """
    Raised if the control tree is used in a way which would break it, e.g. attaching a control which already has a
    parent or setting a value on a group which doesn't match its children.
    """


class ControlNotFoundError(FormError, LookupError):
    """
    Raised by strict lookups if no control exists under the requested path.
    """

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        message = f"{path}: Not found"
        if reason is not None:
            message = f"{message} ({reason})"
        super().__init__(message)


class ValidatorError(FormError):
    """
    Raised if a validator function itself raised an exception. The original exception is available as `__cause__`.
    The recompute pass of the affected control is aborted, i.e. the control keeps its previous status.
    """

    def __init__(self, validator_name: str, path: ControlPath):
        self.validator_name = validator_name
        self.path = path
        super().__init__(f"Validator '{validator_name}' failed on control {format_path(path)}")


class AsyncValidatorError(ValidatorError):
    """
    Raised by `ValidationEngine.settle` if an async validator task failed. The affected control stays pending for the
    faulted generation.
    """
