"""
Configuration module for fingerprint wavelet generation.

This module contains the constants describing the sensor datalog format and
the naming of the per-pattern coefficient files written by the pipeline.
"""

from typing import Final

# ==================== Datalog Format ====================

# Row shape: lineid;timestamp;meas;diff;curavg;isdetect;isalarm;iswait;patternid
FIELD_DELIMITER: Final[str] = ';'
FIELD_NAMES: Final[tuple] = (
    'line_id', 'timestamp', 'measurement', 'diff', 'running_average',
    'detect_flag', 'alarm_flag', 'wait_flag', 'pattern_id',
)
N_FIELDS: Final[int] = 9

# Any row containing this token is a header and is skipped
HEADER_TOKEN: Final[str] = 'lineid'

# patternid value meaning "no active pattern"
IDLE_PATTERN_ID: Final[int] = 0

# ==================== Output Naming ====================
OUTPUT_PREFIX: Final[str] = 'wavelet_'
OUTPUT_SUFFIX: Final[str] = '.txt'
FLOAT_FORMAT: Final[str] = '%.17g'   # lossless round-trip of a float64

# ==================== Validation Functions ====================

def validate_config() -> None:
    """Validate configuration parameters."""
    if len(FIELD_DELIMITER) != 1:
        raise ValueError("FIELD_DELIMITER must be a single character")
    if len(FIELD_NAMES) != N_FIELDS:
        raise ValueError("FIELD_NAMES must list exactly N_FIELDS names")
    if not HEADER_TOKEN:
        raise ValueError("HEADER_TOKEN must be non-empty")
    if IDLE_PATTERN_ID != 0:
        raise ValueError("IDLE_PATTERN_ID must be 0")
    if not OUTPUT_PREFIX and not OUTPUT_SUFFIX:
        raise ValueError("OUTPUT_PREFIX and OUTPUT_SUFFIX cannot both be empty")
    if '%' not in FLOAT_FORMAT:
        raise ValueError("FLOAT_FORMAT must be a printf-style format")

# Validate configuration on import
validate_config()
