"""
Base classes and common utilities for pattern segment transform methods.
"""

from .base_method import BaseMethod
from .common_config import CommonConfig
from .utils import validate_input_data, standardize_output, create_empty_metadata

__all__ = ['BaseMethod', 'CommonConfig', 'validate_input_data', 'standardize_output',
           'create_empty_metadata']
