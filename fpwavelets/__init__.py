"""
Fingerprint Wavelets Package

Isolates labeled pattern segments in a time-ordered sensor datalog and computes
a Daubechies-4 wavelet representation of each one, written to one coefficient
file per pattern occurrence.
"""

from .methods import BaseMethod, Daub4Method
from .methods.base import CommonConfig, validate_input_data, standardize_output
from .methods.daub4 import (
    Daub4Filter, DAUB4, daub4_transform, daub4_transform_inverse, padded_length
)
from .errors import ParseError, InvalidSegmentError
from .log_reader import LogRecord, parse_line, iter_records
from .segmenter import Segment, Segmenter
from .output_writer import CoefficientWriter, output_filename
from .batch_processor import run_batch, run_pipeline, process_segment, get_processing_summary

__version__ = "1.0.0"
__author__ = "Fingerprint Processing Team"
__description__ = "Daubechies-4 wavelet generation from datalog patterns"


def compute_coefficients_for_values(values, **kwargs) -> tuple:
    """
    Compute Daub4 coefficients for a single segment of values.

    Args:
        values: Segment values
        **kwargs: Daub4Method configuration ('filter', 'self_check', ...)

    Returns:
        Tuple of (coefficients, metadata_dict); coefficients cover the padded length
    """
    method = Daub4Method(kwargs)
    return method.compute_coefficients(values)


def validate_config() -> None:
    """
    Validate package and method configuration constants.
    """
    from .config import validate_config as package_validate
    from .methods.daub4.config import validate_config as daub4_validate
    package_validate()
    daub4_validate()


__all__ = [
    'BaseMethod', 'Daub4Method', 'CommonConfig', 'validate_input_data', 'standardize_output',
    'Daub4Filter', 'DAUB4', 'daub4_transform', 'daub4_transform_inverse', 'padded_length',
    'ParseError', 'InvalidSegmentError',
    'LogRecord', 'parse_line', 'iter_records',
    'Segment', 'Segmenter',
    'CoefficientWriter', 'output_filename',
    'run_batch', 'run_pipeline', 'process_segment', 'get_processing_summary',
    'compute_coefficients_for_values', 'validate_config'
]
