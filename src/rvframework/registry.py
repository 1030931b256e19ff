"""
Contains the ValidatorRegistry which maps declarative validator markers (e.g. `{"required": True, "minlength": 4}`
taken from the attributes of an input element) to validator factories. The markers are resolved once, when the control
is built; no lookup happens at validation time.
"""
import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from . import validators
from .controls.control import FormControl
from .validator import AsyncValidator, Validator

_logger = logging.getLogger(__name__)

ValidatorFactory = Callable[[Any], Validator | AsyncValidator]


class ValidatorRegistry:
    """
    Maps declarative markers to factories which turn the marker argument into a validator.
    """

    def __init__(self, factories: Optional[Mapping[str, ValidatorFactory]] = None) -> None:
        self._factories: dict[str, ValidatorFactory] = dict(factories or {})

    @property
    def markers(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, marker: object) -> bool:
        return marker in self._factories

    def register(self, marker: str, factory: Optional[ValidatorFactory] = None) -> Any:
        """
        Registers a factory for `marker`. Without `factory` this returns a decorator.
        A ValueError is raised if the marker is registered already.
        """

        def _register(func: ValidatorFactory) -> ValidatorFactory:
            if marker in self._factories:
                raise ValueError(f"Validator marker '{marker}' is registered already")
            self._factories[marker] = func
            return func

        if factory is None:
            return _register
        return _register(factory)

    def copy(self) -> "ValidatorRegistry":
        """Returns an independent registry with the same factories, e.g. to extend the default one."""
        return ValidatorRegistry(self._factories)

    def resolve(self, markers: Mapping[str, Any]) -> tuple[list[Validator], list[AsyncValidator]]:
        """
        Turns markers into sync and async validators, keeping the order of `markers`. Markers whose argument is None
        or False are switched off and skipped. Unknown markers raise a KeyError.
        """
        sync_validators: list[Validator] = []
        async_validators: list[AsyncValidator] = []
        for marker, argument in markers.items():
            if argument is None or argument is False:
                continue
            if marker not in self._factories:
                raise KeyError(f"Unknown validator marker '{marker}'. Known markers: {', '.join(self.markers)}")
            validator = self._factories[marker](argument)
            if isinstance(validator, AsyncValidator):
                async_validators.append(validator)
            else:
                sync_validators.append(validator)
        _logger.debug("Resolved markers %s", list(markers))
        return sync_validators, async_validators


default_registry = ValidatorRegistry(
    {
        "required": lambda _: validators.required,
        "requiredTrue": lambda _: validators.required_true,
        "email": lambda _: validators.email,
        "minlength": validators.min_length,
        "maxlength": validators.max_length,
        "min": validators.min_value,
        "max": validators.max_value,
        "pattern": validators.pattern,
        "forbiddenName": validators.forbidden_name,
    }
)


def build_control(
    value: Any = None,
    markers: Optional[Mapping[str, Any]] = None,
    *,
    registry: Optional[ValidatorRegistry] = None,
    extra_validators: Iterable[Validator] = (),
    **kwargs: Any,
) -> FormControl:
    """
    Builds a FormControl whose validators are resolved from `markers` (e.g. `{"required": True, "minlength": 4}`)
    with the given `registry` (default: `default_registry`). `extra_validators` are appended after the resolved ones,
    the remaining keyword arguments are passed on to FormControl.
    """
    registry = registry if registry is not None else default_registry
    sync_validators, async_validators = registry.resolve(markers or {})
    return FormControl(value, [*sync_validators, *extra_validators], async_validators, **kwargs)
