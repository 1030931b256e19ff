"""
Contains some useful utility functions to look up controls and to present their state.
"""
from .projection import status_classes
from .query_object import optional_control, required_control, resolve_control, split_path
