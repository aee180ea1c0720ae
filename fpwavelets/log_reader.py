"""
Datalog reader for fingerprint wavelet generation.

Decodes the semicolon-delimited sensor log into typed records:

    lineid;timestamp;meas;diff;curavg;isdetect;isalarm;iswait;patternid
    1;10-03-2016 15:27:00.875012;68988;0;199.6;0;0;0;0

Rows containing the header token are skipped. Malformed rows raise
ParseError from parse_line; iter_records either skips them with a warning
or stops ingestion, so a partially decoded row never reaches the segmenter.
"""

from __future__ import annotations

import contextlib
import logging
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, TextIO, Union

from .config import FIELD_DELIMITER, N_FIELDS, HEADER_TOKEN
from .errors import ParseError

logger = logging.getLogger(__name__)

ON_ERROR_CHOICES = ('skip', 'abort')


@dataclass(frozen=True)
class LogRecord:
    """One decoded datalog row. pattern_id 0 means no active pattern."""
    line_id: int
    timestamp: str
    measurement: float
    diff: float
    running_average: float
    detect_flag: int
    alarm_flag: int
    wait_flag: int
    pattern_id: int


def is_header(line: str) -> bool:
    return HEADER_TOKEN in line


def _to_int(text: str, name: str, line_number: int, line: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ParseError(f"field '{name}' is not an integer: {text!r}", line_number, line) from None


def _to_float(text: str, name: str, line_number: int, line: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise ParseError(f"field '{name}' is not a number: {text!r}", line_number, line) from None
    if not math.isfinite(value):
        raise ParseError(f"field '{name}' is not finite: {text!r}", line_number, line)
    return value


def parse_line(line: str, line_number: int = 0) -> LogRecord:
    """
    Decode one datalog row.

    Args:
        line: Raw text row (trailing newline allowed)
        line_number: 1-based position in the input, used in error messages

    Returns:
        Decoded LogRecord

    Raises:
        ParseError: If the row does not have exactly N_FIELDS fields or a
            numeric field cannot be converted
    """
    text = line.rstrip('\r\n')
    fields = [f.strip() for f in text.split(FIELD_DELIMITER)]
    if len(fields) != N_FIELDS:
        raise ParseError(f"expected {N_FIELDS} fields, got {len(fields)}", line_number, text)

    pattern_id = _to_int(fields[8], 'pattern_id', line_number, text)
    if pattern_id < 0:
        raise ParseError(f"pattern_id must be non-negative, got {pattern_id}", line_number, text)

    return LogRecord(
        line_id=_to_int(fields[0], 'line_id', line_number, text),
        timestamp=fields[1],
        measurement=_to_float(fields[2], 'measurement', line_number, text),
        diff=_to_float(fields[3], 'diff', line_number, text),
        running_average=_to_float(fields[4], 'running_average', line_number, text),
        detect_flag=_to_int(fields[5], 'detect_flag', line_number, text),
        alarm_flag=_to_int(fields[6], 'alarm_flag', line_number, text),
        wait_flag=_to_int(fields[7], 'wait_flag', line_number, text),
        pattern_id=pattern_id,
    )


def iter_records(lines: Iterable[str], on_error: str = 'skip') -> Iterator[LogRecord]:
    """
    Yield decoded records in input order.

    Header rows and blank rows are skipped. Malformed rows are logged and
    skipped when on_error is 'skip'; with 'abort' the ParseError propagates.
    """
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")

    n_skipped = 0
    for line_number, line in enumerate(lines, start=1):
        if not line.strip() or is_header(line):
            continue
        try:
            record = parse_line(line, line_number)
        except ParseError as e:
            if on_error == 'abort':
                raise
            n_skipped += 1
            logger.warning(f"Skipping malformed row: {e}")
            continue
        yield record

    if n_skipped:
        logger.info(f"Skipped {n_skipped} malformed rows")


@contextlib.contextmanager
def open_log(source: Union[str, Path]) -> Iterator[TextIO]:
    """Open a datalog path for reading; '-' reads standard input."""
    if str(source) == '-':
        yield sys.stdin
        return
    with open(source, 'r', encoding='utf-8') as f:
        yield f
