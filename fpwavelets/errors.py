"""
Exceptions raised by the fingerprint wavelet pipeline.
"""

from typing import Optional


class ParseError(ValueError):
    """A datalog row cannot be decoded into the 9-field record shape."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class InvalidSegmentError(ValueError):
    """A pattern segment is too short to be transformed."""

    def __init__(self, message: str, segment_length: Optional[int] = None):
        self.segment_length = segment_length
        super().__init__(message)
