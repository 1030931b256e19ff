"""
This package provides a reactive validation engine for trees of input controls. Controls hold a value, synchronous
and asynchronous validators and their interaction state (dirty/touched). Every change is propagated from the changed
control up to the root, async validators are debounced and superseded results get discarded.
"""

from .analysis import FormAnalysis
from .config import EngineConfig
from .controls import AbstractControl, CompositeControl, FormArray, FormControl, FormGroup
from .errors import (
    AsyncValidatorError,
    ControlNotFoundError,
    FormError,
    StructuralError,
    ValidatorError,
)
from .execution import ValidationEngine
from .mapped_validators import PathMappedValidator
from .registry import ValidatorRegistry, build_control, default_registry
from .result import ValidationResult
from .types import UNSET, Status
from .validator import AsyncValidator, Validator, compose
from .view import ControlView
