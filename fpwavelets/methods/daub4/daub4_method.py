"""
Daub4 method implementation for pattern segment transforms.

Sizes and zero-pads a segment to its power-of-two working length, applies the
pyramidal Daubechies-4 transform and verifies it with the inverse transform.
"""

import logging
import time
from typing import Dict, Any, Tuple, Optional, Sequence

import numpy as np
import pandas as pd

from ..base import BaseMethod, validate_input_data
from ...errors import InvalidSegmentError
from .config import MIN_BLOCK_LENGTH, SELF_CHECK, ROUNDTRIP_TOLERANCE, FILTER_NAME
from .filters import Daub4Filter, DAUB4
from .sizing import padded_length, pad_segment
from .transform import daub4_transform, daub4_transform_inverse, transform_levels

logger = logging.getLogger(__name__)


class Daub4Method(BaseMethod):
    """
    Daubechies-4 pyramidal wavelet transform of a pattern segment.
    """

    version = "1.0.0"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize Daub4 method.

        Args:
            config: Method-specific configuration dictionary. Recognised keys:
                'filter' (Daub4Filter), 'filter_name' (PyWavelets name used
                when 'filter' is absent), 'self_check', 'roundtrip_tolerance'
        """
        super().__init__(config)

        dfilter = self.config.get('filter')
        if dfilter is None and self.config.get('filter_name'):
            dfilter = Daub4Filter.from_pywt(self.config['filter_name'])
        self.filter: Daub4Filter = dfilter if dfilter is not None else DAUB4
        self.self_check = self.config.get('self_check', SELF_CHECK)
        self.roundtrip_tolerance = self.config.get('roundtrip_tolerance', ROUNDTRIP_TOLERANCE)

    def compute_coefficients(self, values: Sequence[float],
                             **kwargs) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Transform one pattern segment.

        Args:
            values: Segment diff values
            **kwargs: 'pattern_id' is used in log messages only

        Returns:
            Tuple of (coefficients of length padded_n, metadata_dict)

        Raises:
            InvalidSegmentError: If the segment is empty or its padded length
                is below the minimum block length
        """
        start_time = time.time()
        pattern_id = kwargs.get('pattern_id')

        x = self.preprocess_values(values)
        validate_input_data(x)
        n = len(x)
        padded_n = padded_length(n)
        if padded_n < MIN_BLOCK_LENGTH:
            raise InvalidSegmentError(
                f"Segment of length {n} pads to {padded_n}, below minimum block {MIN_BLOCK_LENGTH}",
                segment_length=n,
            )

        buffer = pad_segment(x, padded_n)
        coeffs = daub4_transform(buffer, self.filter)

        metadata = {
            'method': 'daub4',
            'status': 'success',
            'segment_length': n,
            'padded_n': padded_n,
            'levels': transform_levels(padded_n),
            'roundtrip_error': float('nan'),
            'roundtrip_ok': True,
            'energy_ratio': self._energy_ratio(buffer, coeffs),
        }

        if self.self_check:
            reconstructed = daub4_transform_inverse(coeffs, self.filter)
            scale = max(float(np.max(np.abs(buffer))), 1.0)
            error = float(np.max(np.abs(reconstructed - buffer))) / scale
            metadata['roundtrip_error'] = error
            metadata['roundtrip_ok'] = error <= self.roundtrip_tolerance
            if not metadata['roundtrip_ok']:
                logger.warning(
                    f"Pattern {pattern_id}: inverse transform mismatch {error:.3e} "
                    f"exceeds tolerance {self.roundtrip_tolerance:.1e}"
                )
            if logger.isEnabledFor(logging.DEBUG):
                table = pd.DataFrame({
                    'original': buffer[:n],
                    'coefficient': coeffs[:n],
                    'reconstructed': reconstructed[:n],
                })
                logger.debug(f"Pattern {pattern_id} coefficients:\n{table.to_string()}")

        metadata['processing_time'] = time.time() - start_time
        return coeffs, metadata

    @staticmethod
    def _energy_ratio(x: np.ndarray, y: np.ndarray) -> float:
        energy = float(np.dot(x, x))
        if energy == 0.0:
            return 1.0
        return float(np.dot(y, y)) / energy

    def validate_config(self) -> None:
        """
        Validate Daub4-specific configuration parameters.

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(self.filter, Daub4Filter):
            raise ValueError("filter must be a Daub4Filter")

        if not self.filter.is_orthonormal(atol=1e-9):
            raise ValueError("filter coefficients must form an orthonormal 4-tap filter")

        if self.roundtrip_tolerance <= 0:
            raise ValueError("roundtrip_tolerance must be positive")

        if not isinstance(self.self_check, bool):
            raise ValueError("self_check must be a boolean")

    def get_method_info(self) -> Dict[str, str]:
        """
        Get information about the Daub4 method.

        Returns:
            Dictionary with method information
        """
        info = super().get_method_info()
        info.update({
            'approach': 'Pyramidal periodic Daubechies-4 DWT',
            'filter_name': self.config.get('filter_name') or FILTER_NAME,
            'coefficients': ', '.join(f'{c:.10f}' for c in self.filter.lowpass),
            'min_block_length': str(MIN_BLOCK_LENGTH),
            'self_check': str(self.self_check),
        })
        return info
