"""
Contains validators which map values of several controls onto the parameters of a validator function
"""
from .path_map import PathMappedValidator
