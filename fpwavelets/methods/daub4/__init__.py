"""
Daub4 method for pattern segment transforms.

Pyramidal Daubechies-4 discrete wavelet transform with periodic boundary
handling, its exact inverse, and the segment working-length policy.
"""

from .daub4_method import Daub4Method
from .config import (
    FILTER_NAME, N_TAPS, MIN_BLOCK_LENGTH, SELF_CHECK, ROUNDTRIP_TOLERANCE,
    validate_config
)
from .filters import Daub4Filter, DAUB4
from .sizing import padded_length, pad_segment
from .transform import (
    daub4_transform, daub4_transform_inverse, validate_transform_input,
    transform_levels, is_power_of_two
)

__all__ = [
    'Daub4Method',
    'FILTER_NAME', 'N_TAPS', 'MIN_BLOCK_LENGTH', 'SELF_CHECK', 'ROUNDTRIP_TOLERANCE',
    'validate_config',
    'Daub4Filter', 'DAUB4',
    'padded_length', 'pad_segment',
    'daub4_transform', 'daub4_transform_inverse', 'validate_transform_input',
    'transform_levels', 'is_power_of_two'
]
