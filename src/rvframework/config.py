"""
Contains the configuration of the validation engine.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """
    Settings for the async validator lifecycle. `debounce` is the number of seconds the value of a control has to be
    stable before its async validators are started; every superseding change restarts the timer. 0 starts them
    immediately.
    """

    debounce: float = 0.0

    def __post_init__(self) -> None:
        if self.debounce < 0:
            raise ValueError(f"debounce must not be negative, got {self.debounce}")
