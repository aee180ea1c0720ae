"""
Common utility functions for pattern segment transform methods.
"""

import numpy as np
from typing import Dict, Any, Optional, Sequence


def validate_input_data(values: Sequence[float]) -> None:
    """
    Validate segment values before transformation.

    Args:
        values: Segment values

    Raises:
        ValueError: If data is invalid
    """
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError("Segment values must be one-dimensional")

    if not np.all(np.isfinite(arr)):
        raise ValueError("Segment values must be finite")


def standardize_output(metadata: Dict[str, Any], pattern_id: Optional[int] = None,
                       occurrence: Optional[int] = None) -> Dict[str, Any]:
    """
    Standardize metadata format across methods.

    Args:
        metadata: Raw metadata dictionary
        pattern_id: Optional pattern identifier
        occurrence: Optional occurrence number of the pattern

    Returns:
        Standardized metadata dictionary
    """
    if pattern_id is not None:
        metadata['pattern_id'] = int(pattern_id)
    if occurrence is not None:
        metadata['occurrence'] = int(occurrence)

    if 'method' not in metadata:
        metadata['method'] = 'unknown'

    if 'status' not in metadata:
        metadata['status'] = 'success'

    for key in ('segment_length', 'padded_n', 'levels'):
        if key in metadata and metadata[key] is not None:
            metadata[key] = int(metadata[key])

    for key in ('roundtrip_error', 'energy_ratio', 'processing_time'):
        if key in metadata and metadata[key] is not None:
            metadata[key] = float(metadata[key])

    return metadata


def create_empty_metadata(method: str = 'unknown', status: str = 'failed',
                          error: str = '') -> Dict[str, Any]:
    """
    Create metadata dictionary for a segment that produced no coefficients.

    Args:
        method: Method name
        status: Segment status ('dropped' or 'failed')
        error: Error message

    Returns:
        Dictionary with default metadata values
    """
    metadata = {
        'method': method,
        'segment_length': 0,
        'padded_n': 0,
        'levels': 0,
        'roundtrip_error': float('nan'),
        'roundtrip_ok': False,
        'energy_ratio': float('nan'),
        'processing_time': 0.0,
        'status': status,
        'error': error,
    }

    return metadata
