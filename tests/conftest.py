from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import pytest

HEADER = "lineid;timestamp;meas;diff;curavg;isdetect;isalarm;iswait;patternid"


def datalog_lines(diffs: Sequence[float], pattern_ids: Sequence[int], header: bool = True) -> List[str]:
    """Build datalog rows with the given diff and patternid columns."""
    assert len(diffs) == len(pattern_ids)
    lines = [HEADER] if header else []
    for i, (diff, pid) in enumerate(zip(diffs, pattern_ids), start=1):
        flag = 1 if pid else 0
        lines.append(f"{i};10-03-2016 15:27:00.{875000 + i:06d};{68988 + i};{diff};199.6;{flag};0;0;{pid}")
    return lines


def write_datalog(path: Path, diffs: Sequence[float], pattern_ids: Sequence[int],
                  extra_lines: Sequence[str] = ()) -> Path:
    lines = datalog_lines(diffs, pattern_ids) + list(extra_lines)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def mixed_sequence():
    """patternid sequence with two interior transitions and a pattern open at end of input."""
    pattern_ids = [0, 0, 1, 1, 1, 2, 2, 0, 3, 3]
    diffs = [0.0, -190.0, 5.0, 6.0, 7.0, 8.0, 9.0, 0.0, 10.0, 11.0]
    return diffs, pattern_ids


@pytest.fixture
def datalog_factory(tmp_path):
    def _make(diffs, pattern_ids, name="datalog.csv", extra_lines=()):
        return write_datalog(tmp_path / name, diffs, pattern_ids, extra_lines)
    return _make


@pytest.fixture
def make_lines():
    return datalog_lines
