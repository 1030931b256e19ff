"""
Contains the PathMappedValidator which feeds the values of several descendants of a composite into the keyword
parameters of a validator function. It is the convenient way to write cross-field validators.
"""
import inspect
from typing import Any, Callable, Optional

from frozendict import frozendict

from rvframework.types import RawValidationResult
from rvframework.utils.query_object import split_path
from rvframework.validator import Guard, Validator
from rvframework.view import ControlView

MappedFunction = Callable[..., RawValidationResult]


class PathMappedValidator(Validator):
    """
    Wraps a function with keyword parameters and a map from parameter name to the path of a descendant, e.g.

    ```
    def passwords_match(password: str, confirmation: str):
        if password != confirmation:
            return {"passwordMismatch": True}
        return None

    group.add_validators(PathMappedValidator(passwords_match, {"password": "password", "confirmation": "repeat"}))
    ```

    If the control of a required parameter (one without default) doesn't exist or is disabled, the validator has no
    opinion. Optional parameters receive their default in this case.
    """

    def __init__(
        self,
        mapped_func: MappedFunction,
        param_map: dict[str, str] | frozendict[str, str],
        name: Optional[str] = None,
        guard: Optional[Guard] = None,
    ):
        self.mapped_func = mapped_func
        self.param_map: frozendict[str, str] = param_map if isinstance(param_map, frozendict) else frozendict(param_map)
        super().__init__(self._evaluate, name or getattr(mapped_func, "__name__", repr(mapped_func)), guard)
        self._validate_param_map()

    @property
    def signature(self) -> inspect.Signature:
        return inspect.signature(self.mapped_func)

    @property
    def param_names(self) -> set[str]:
        return set(self.signature.parameters)

    @property
    def required_param_names(self) -> set[str]:
        return {
            param.name for param in self.signature.parameters.values() if param.default is inspect.Parameter.empty
        }

    def _validate_param_map(self):
        """
        Checks if the parameter map matches the function signature.
        """
        mapped_params = set(self.param_map.keys())
        if not mapped_params <= self.param_names:
            raise ValueError(f"{self.name} has no parameter(s) {mapped_params - self.param_names}")
        if not self.required_param_names <= mapped_params:
            raise ValueError(f"{self.name} misses parameter(s) {self.required_param_names - mapped_params}")

    def _evaluate(self, view: ControlView) -> RawValidationResult:
        arguments: dict[str, Any] = {}
        for param_name, path in self.param_map.items():
            child = view.get(split_path(path))
            if child is not None and not child.disabled:
                arguments[param_name] = child.value
            elif param_name in self.required_param_names:
                return None
        return self.mapped_func(**arguments)

    def __eq__(self, other):
        return (
            isinstance(other, PathMappedValidator)
            and self.mapped_func == other.mapped_func
            and self.param_map == other.param_map
            and self.guard == other.guard
        )

    def __hash__(self):
        return hash(self.param_map) + hash(self.mapped_func)

    def __str__(self):
        return f"PathMappedValidator({self.name}, {dict(self.param_map)})"
