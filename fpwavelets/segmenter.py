"""
Pattern segmentation of the datalog record stream.

The segmenter is a two-state machine:

- idle: no pattern open. A record with a nonzero pattern_id opens a segment.
- accumulating(pattern_id, buffer): records with the same pattern_id append
  their diff value. The first record with a different pattern_id (including
  0) finalizes the segment; that record is not part of it, and when nonzero
  it opens the next segment.

The in-flight buffer lives inside the accumulating state and is handed over
to the finalized Segment, so no buffer is ever shared between segments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .config import IDLE_PATTERN_ID
from .log_reader import LogRecord

logger = logging.getLogger(__name__)


@dataclass
class Segment:
    """A maximal contiguous run of diff values sharing one nonzero pattern_id."""
    pattern_id: int
    values: List[float]
    occurrence: int = 1      # 1 for the first run of this pattern_id, 2 for the next, ...
    first_line: int = 0
    last_line: int = 0

    @property
    def length(self) -> int:
        return len(self.values)


@dataclass
class _Accumulating:
    pattern_id: int
    occurrence: int
    first_line: int
    last_line: int
    buffer: List[float] = field(default_factory=list)


class Segmenter:
    """
    Groups incoming LogRecords into pattern segments.

    Args:
        finalize_at_eof: Finalize the segment still open when input ends.
            When False the open segment is discarded with a warning.
    """

    def __init__(self, finalize_at_eof: bool = True):
        self.finalize_at_eof = finalize_at_eof
        self._state: Optional[_Accumulating] = None
        self._occurrences: Dict[int, int] = {}
        self.n_finalized = 0
        self.n_discarded = 0

    @property
    def is_idle(self) -> bool:
        return self._state is None

    @property
    def active_pattern_id(self) -> Optional[int]:
        return None if self._state is None else self._state.pattern_id

    def feed(self, record: LogRecord) -> Optional[Segment]:
        """
        Consume one record.

        Returns:
            The segment finalized by this record, or None
        """
        finalized = None
        if self._state is not None:
            if record.pattern_id == self._state.pattern_id:
                self._state.buffer.append(record.diff)
                self._state.last_line = record.line_id
                return None
            finalized = self._finalize()

        if record.pattern_id != IDLE_PATTERN_ID:
            self._open(record)
        return finalized

    def finish(self) -> Optional[Segment]:
        """Signal end of input; returns the open segment if it is finalized."""
        if self._state is None:
            return None
        if self.finalize_at_eof:
            return self._finalize()

        state, self._state = self._state, None
        self.n_discarded += 1
        logger.warning(
            f"Discarding pattern {state.pattern_id} ({len(state.buffer)} samples) "
            f"still open at end of input"
        )
        return None

    def segments(self, records: Iterable[LogRecord]) -> Iterator[Segment]:
        """Yield finalized segments in input order, including end-of-input handling."""
        for record in records:
            segment = self.feed(record)
            if segment is not None:
                yield segment
        segment = self.finish()
        if segment is not None:
            yield segment

    def _open(self, record: LogRecord) -> None:
        occurrence = self._occurrences.get(record.pattern_id, 0) + 1
        self._occurrences[record.pattern_id] = occurrence
        self._state = _Accumulating(
            pattern_id=record.pattern_id,
            occurrence=occurrence,
            first_line=record.line_id,
            last_line=record.line_id,
            buffer=[record.diff],
        )
        logger.debug(f"Pattern {record.pattern_id} opened at line {record.line_id}")

    def _finalize(self) -> Segment:
        state, self._state = self._state, None
        self.n_finalized += 1
        logger.debug(
            f"Pattern {state.pattern_id} finalized: {len(state.buffer)} samples, "
            f"lines {state.first_line}-{state.last_line}"
        )
        return Segment(
            pattern_id=state.pattern_id,
            values=state.buffer,
            occurrence=state.occurrence,
            first_line=state.first_line,
            last_line=state.last_line,
        )
