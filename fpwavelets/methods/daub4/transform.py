"""
Pyramidal Daubechies-4 discrete wavelet transform and its inverse.

At each level the first m entries of the working array are replaced by m/2
approximation coefficients followed by m/2 detail coefficients:

    approx[i] = c0 x[j] + c1 x[j+1] + c2 x[j+2] + c3 x[j+3]
    detail[i] = c3 x[j] - c2 x[j+1] + c1 x[j+2] - c0 x[j+3]      j = 2i

with indices taken modulo m, the length of the active region (periodic
extension of that region, not of the whole buffer). The step is repeated on
the approximation band for m = n, n/2, ..., MIN_BLOCK_LENGTH.

The inverse applies the transpose of each level from m = MIN_BLOCK_LENGTH up
to m = n. Both operators are orthogonal, so the transform preserves energy
and the inverse reconstructs the input up to rounding.
"""

from __future__ import annotations

import numpy as np
from typing import Sequence, Union

from .config import MIN_BLOCK_LENGTH, N_TAPS
from .filters import Daub4Filter, DAUB4

ArrayLike = Union[Sequence[float], np.ndarray]


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def validate_transform_input(x: ArrayLike) -> np.ndarray:
    """
    Check the transform preconditions and return x as a float array.

    Raises:
        ValueError: If x is not one-dimensional, or its length is not a power
            of two of at least MIN_BLOCK_LENGTH
    """
    a = np.asarray(x, dtype=float)
    if a.ndim != 1:
        raise ValueError(f"Transform input must be one-dimensional, got shape {a.shape}")
    n = a.shape[0]
    if n < MIN_BLOCK_LENGTH:
        raise ValueError(f"Transform length must be at least {MIN_BLOCK_LENGTH}, got {n}")
    if not is_power_of_two(n):
        raise ValueError(f"Transform length must be a power of two, got {n}")
    return a


def transform_levels(n: int) -> int:
    """Number of cascade levels applied to a buffer of length n."""
    levels = 0
    m = n
    while m >= MIN_BLOCK_LENGTH:
        levels += 1
        m //= 2
    return levels


def _forward_step(a: np.ndarray, m: int, dfilter: Daub4Filter) -> None:
    half = m // 2
    j = 2 * np.arange(half)
    taps = [a[(j + k) % m] for k in range(N_TAPS)]
    approx = sum(c * t for c, t in zip(dfilter.lowpass, taps))
    detail = sum(g * t for g, t in zip(dfilter.highpass, taps))
    a[:half] = approx
    a[half:m] = detail


def _inverse_step(a: np.ndarray, m: int, dfilter: Daub4Filter) -> None:
    half = m // 2
    approx = a[:half].copy()
    detail = a[half:m].copy()
    j = 2 * np.arange(half)
    out = np.zeros(m)
    # each output slot gets contributions from two neighbouring (approx, detail) pairs
    for k in range(N_TAPS):
        np.add.at(out, (j + k) % m, dfilter.lowpass[k] * approx + dfilter.highpass[k] * detail)
    a[:m] = out


def daub4_transform(x: ArrayLike, dfilter: Daub4Filter = DAUB4) -> np.ndarray:
    """
    Forward pyramidal Daubechies-4 transform.

    Args:
        x: Input of power-of-two length n >= MIN_BLOCK_LENGTH (not modified)
        dfilter: Filter coefficients

    Returns:
        Coefficient array of length n: coarsest approximation first, then
        detail bands from coarsest to finest
    """
    y = validate_transform_input(x).copy()
    m = y.shape[0]
    while m >= MIN_BLOCK_LENGTH:
        _forward_step(y, m, dfilter)
        m //= 2
    return y


def daub4_transform_inverse(y: ArrayLike, dfilter: Daub4Filter = DAUB4) -> np.ndarray:
    """
    Inverse of daub4_transform.

    Args:
        y: Coefficient array as produced by daub4_transform (not modified)
        dfilter: Filter coefficients; must match the forward transform

    Returns:
        Reconstructed signal of the same length
    """
    x = validate_transform_input(y).copy()
    n = x.shape[0]
    m = MIN_BLOCK_LENGTH
    while m <= n:
        _inverse_step(x, m, dfilter)
        m *= 2
    return x
