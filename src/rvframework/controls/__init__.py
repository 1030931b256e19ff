"""
Contains the controls which form the control tree
"""
from .array import FormArray
from .base import AbstractControl
from .composite import CompositeControl
from .control import FormControl
from .group import FormGroup
