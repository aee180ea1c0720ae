"""
Working-length policy for variable-length pattern segments.
"""

import numpy as np
from typing import Sequence

from ...errors import InvalidSegmentError


def padded_length(segment_length: int) -> int:
    """
    Return 2 ** (floor(log2(segment_length)) + 1).

    This is one power-of-two level above the floor of log2(n), so an exact
    power of two is doubled (8 -> 16) rather than kept.

    Raises:
        InvalidSegmentError: If segment_length < 1
    """
    n = int(segment_length)
    if n < 1:
        raise InvalidSegmentError(f"Segment length must be positive, got {n}", segment_length=n)
    return 1 << n.bit_length()


def pad_segment(values: Sequence[float], padded_n: int) -> np.ndarray:
    """Copy values into a zero-filled working buffer of length padded_n."""
    values = np.asarray(values, dtype=float)
    if values.ndim != 1:
        raise ValueError("Segment values must be one-dimensional")
    if len(values) > padded_n:
        raise ValueError(f"Cannot pad {len(values)} values into {padded_n} slots")
    buffer = np.zeros(padded_n, dtype=float)
    buffer[:len(values)] = values
    return buffer
