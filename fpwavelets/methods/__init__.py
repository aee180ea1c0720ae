"""
Methods package for pattern segment transforms.

This package contains the transform methods applied to finalized pattern segments:
- daub4: Pyramidal Daubechies-4 discrete wavelet transform
"""

from .base import BaseMethod
from .daub4 import Daub4Method

__all__ = ['BaseMethod', 'Daub4Method']
