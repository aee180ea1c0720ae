"""
Coefficient file output for finalized pattern segments.

Each occurrence of a pattern is written to its own text file in the output
directory, one coefficient per line, in index order:

    wavelet_<pattern_id>.txt          first occurrence
    wavelet_<pattern_id>_<k>.txt      k-th occurrence, k >= 2

Only the first segment_length coefficients are written; the padding region
of the working buffer is never emitted.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence, Union

import numpy as np

from .config import OUTPUT_PREFIX, OUTPUT_SUFFIX, FLOAT_FORMAT

logger = logging.getLogger(__name__)


def output_filename(pattern_id: int, occurrence: int = 1) -> str:
    """Deterministic file name for one pattern occurrence."""
    if occurrence <= 1:
        return f"{OUTPUT_PREFIX}{pattern_id}{OUTPUT_SUFFIX}"
    return f"{OUTPUT_PREFIX}{pattern_id}_{occurrence}{OUTPUT_SUFFIX}"


class CoefficientWriter:
    """
    Writes coefficient vectors to per-pattern text files.

    Args:
        output_dir: Target directory, created on first write if missing
        float_format: printf-style format applied to each coefficient
    """

    def __init__(self, output_dir: Union[str, Path] = '.', float_format: str = FLOAT_FORMAT):
        self.output_dir = Path(output_dir)
        self.float_format = float_format

    def path_for(self, pattern_id: int, occurrence: int = 1) -> Path:
        return self.output_dir / output_filename(pattern_id, occurrence)

    def write(self, pattern_id: int, coefficients: Sequence[float], segment_length: int,
              occurrence: int = 1) -> Path:
        """
        Write the first segment_length coefficients.

        Returns:
            Path of the written file

        Raises:
            ValueError: If segment_length exceeds the number of coefficients or
                float_format cannot format them
            OSError: If the file cannot be created or written; a partially
                written file is removed
        """
        coeffs = np.asarray(coefficients, dtype=float)
        if segment_length < 0 or segment_length > len(coeffs):
            raise ValueError(
                f"segment_length {segment_length} out of range for {len(coeffs)} coefficients"
            )

        # formatting errors surface before the file is created
        buffer = io.StringIO()
        np.savetxt(buffer, coeffs[:segment_length], fmt=self.float_format, newline='\n')

        path = self.path_for(pattern_id, occurrence)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            path.write_text(buffer.getvalue(), encoding='utf-8')
        except OSError:
            if path.is_file():
                path.unlink()
            raise
        logger.debug(f"Wrote {segment_length} coefficients to {path}")
        return path
