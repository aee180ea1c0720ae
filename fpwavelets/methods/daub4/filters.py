"""
Daubechies-4 coefficient table.

The four scaling coefficients are

    c0 = (1 + sqrt(3)) / (4 sqrt(2))    c1 = (3 + sqrt(3)) / (4 sqrt(2))
    c2 = (3 - sqrt(3)) / (4 sqrt(2))    c3 = (1 - sqrt(3)) / (4 sqrt(2))

and the wavelet (detail) filter is the quadrature mirror (c3, -c2, c1, -c0).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pywt

from .config import FILTER_NAME, N_TAPS


@dataclass(frozen=True)
class Daub4Filter:
    """Immutable 4-tap orthogonal filter injected into the transforms."""
    c0: float
    c1: float
    c2: float
    c3: float

    @property
    def lowpass(self) -> np.ndarray:
        return np.array([self.c0, self.c1, self.c2, self.c3])

    @property
    def highpass(self) -> np.ndarray:
        return np.array([self.c3, -self.c2, self.c1, -self.c0])

    @classmethod
    def from_pywt(cls, name: str = FILTER_NAME) -> "Daub4Filter":
        """
        Build the filter from a PyWavelets filter bank.

        Args:
            name: PyWavelets wavelet name; must have a 4-tap reconstruction lowpass

        Raises:
            ValueError: If the wavelet is unknown or is not a 4-tap filter
        """
        wavelet = pywt.Wavelet(name)
        taps = wavelet.rec_lo
        if len(taps) != N_TAPS:
            raise ValueError(f"Wavelet {name!r} has {len(taps)} taps, expected {N_TAPS}")
        return cls(*(float(t) for t in taps))

    def is_orthonormal(self, atol: float = 1e-12) -> bool:
        """Check unit norm, double-shift orthogonality and zero-mean highpass."""
        c = self.lowpass
        return (
            abs(float(np.dot(c, c)) - 1.0) < atol
            and abs(float(c[0] * c[2] + c[1] * c[3])) < atol
            and abs(float(np.sum(self.highpass))) < atol
        )


_S3 = math.sqrt(3.0)
_NORM = 4.0 * math.sqrt(2.0)

DAUB4 = Daub4Filter(
    c0=(1.0 + _S3) / _NORM,
    c1=(3.0 + _S3) / _NORM,
    c2=(3.0 - _S3) / _NORM,
    c3=(1.0 - _S3) / _NORM,
)
