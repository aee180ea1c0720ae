"""
Configuration for the Daubechies-4 wavelet method.

The pyramidal transform recurses on the approximation band down to the
minimum block length of the 4-tap filter.
"""

from typing import Final

# Transform parameters
FILTER_NAME: Final[str] = "db2"          # PyWavelets name of the 4-tap Daubechies filter
N_TAPS: Final[int] = 4
MIN_BLOCK_LENGTH: Final[int] = 4         # smallest region the cascade operates on

# Inverse self-check
SELF_CHECK: Final[bool] = True
ROUNDTRIP_TOLERANCE: Final[float] = 1e-9  # relative to max(1, max |x|)

def validate_config() -> None:
    """Validate Daub4 configuration parameters."""
    if N_TAPS != 4:
        raise ValueError("N_TAPS must be 4 for the Daubechies-4 filter")
    if MIN_BLOCK_LENGTH < N_TAPS:
        raise ValueError("MIN_BLOCK_LENGTH must be at least N_TAPS")
    if MIN_BLOCK_LENGTH & (MIN_BLOCK_LENGTH - 1):
        raise ValueError("MIN_BLOCK_LENGTH must be a power of two")
    if ROUNDTRIP_TOLERANCE <= 0:
        raise ValueError("ROUNDTRIP_TOLERANCE must be positive")

# Validate configuration on import
validate_config()
