"""
End-to-end tests: datalog in, coefficient files and metadata out.
"""

import logging
import threading

import numpy as np
import pandas as pd
import pytest

from fpwavelets.batch_processor import (
    run_batch, run_pipeline, process_segment, get_processing_summary, build_config,
    SUMMARY_COLUMNS,
)
from fpwavelets.errors import ParseError
from fpwavelets.log_reader import LogRecord
from fpwavelets.methods.daub4 import daub4_transform, daub4_transform_inverse
from fpwavelets.segmenter import Segment


def read_coefficients(path):
    return [float(line) for line in path.read_text().splitlines()]


class TestSegmentationPolicies:

    def test_discard_policy_loses_open_segment(self, mixed_sequence, datalog_factory, tmp_path):
        log = datalog_factory(*mixed_sequence)
        out = tmp_path / "out"
        meta = run_batch(log, output_dir=str(out), config={'finalize_at_eof': False})

        assert list(meta['pattern_id']) == [1, 2]
        assert list(meta['segment_length']) == [3, 2]
        assert sorted(p.name for p in out.iterdir()) == ["wavelet_1.txt", "wavelet_2.txt"]
        assert len(read_coefficients(out / "wavelet_1.txt")) == 3
        assert len(read_coefficients(out / "wavelet_2.txt")) == 2

    def test_default_policy_finalizes_open_segment(self, mixed_sequence, datalog_factory, tmp_path):
        log = datalog_factory(*mixed_sequence)
        out = tmp_path / "out"
        meta = run_batch(log, output_dir=str(out))

        assert list(meta['pattern_id']) == [1, 2, 3]
        assert (out / "wavelet_3.txt").exists()
        assert read_coefficients(out / "wavelet_3.txt") == pytest.approx(
            list(daub4_transform([10.0, 11.0, 0.0, 0.0])[:2]))


def test_seven_sample_pattern_end_to_end(datalog_factory, tmp_path):
    diffs = [0, 1, 2, 3, 4, 5, 6, 7, 9]
    pattern_ids = [0, 1, 1, 1, 1, 1, 1, 1, 2]
    log = datalog_factory(diffs, pattern_ids)
    meta = run_batch(log, output_dir=str(tmp_path), config={'finalize_at_eof': False})

    row = meta.iloc[0]
    assert row['pattern_id'] == 1
    assert row['segment_length'] == 7
    assert row['padded_n'] == 8
    assert row['first_line'] == 2 and row['last_line'] == 8
    assert bool(row['roundtrip_ok'])

    written = np.array(read_coefficients(tmp_path / "wavelet_1.txt"))
    padded = np.array([1, 2, 3, 4, 5, 6, 7, 0], dtype=float)
    full = daub4_transform(padded)
    assert written.shape == (7,)
    np.testing.assert_allclose(written, full[:7], rtol=1e-15)
    np.testing.assert_allclose(daub4_transform_inverse(full), padded, atol=1e-12)


def test_too_short_segment_dropped_and_processing_continues(datalog_factory, tmp_path, caplog):
    log = datalog_factory([0, 5, 0, 1, 2, 3, 0], [0, 1, 0, 2, 2, 2, 0])
    with caplog.at_level(logging.WARNING, logger="fpwavelets.batch_processor"):
        meta = run_batch(log, output_dir=str(tmp_path / "out"))

    assert list(meta['status']) == ['dropped', 'success']
    assert meta.iloc[0]['output_path'] == ''
    assert not (tmp_path / "out" / "wavelet_1.txt").exists()
    assert (tmp_path / "out" / "wavelet_2.txt").exists()
    assert "Dropping pattern 1" in caplog.text


def test_write_failure_is_isolated_to_segment(datalog_factory, tmp_path, caplog):
    out = tmp_path / "out"
    (out / "wavelet_1.txt").mkdir(parents=True)
    log = datalog_factory([1, 2, 3, 4, 5, 6], [1, 1, 1, 2, 2, 2])

    with caplog.at_level(logging.ERROR, logger="fpwavelets.batch_processor"):
        meta = run_batch(log, output_dir=str(out))

    assert list(meta['status']) == ['failed', 'success']
    assert meta.iloc[0]['error'] != ''
    assert (out / "wavelet_2.txt").is_file()
    assert "Error writing coefficients for pattern 1" in caplog.text


def test_repeated_pattern_written_to_separate_files(datalog_factory, tmp_path):
    log = datalog_factory([1, 2, 0, 3, 4, 5], [1, 1, 0, 1, 1, 1])
    meta = run_batch(log, output_dir=str(tmp_path))
    assert list(meta['occurrence']) == [1, 2]
    assert len(read_coefficients(tmp_path / "wavelet_1.txt")) == 2
    assert len(read_coefficients(tmp_path / "wavelet_1_2.txt")) == 3


class TestParseErrors:

    def test_skip_policy(self, datalog_factory, tmp_path):
        log = datalog_factory([1, 2, 3], [1, 1, 1], extra_lines=["garbage;row", "4;t;1;4;1;0;0;0;1"])
        meta = run_batch(log, output_dir=str(tmp_path))
        assert list(meta['segment_length']) == [4]

    def test_abort_policy(self, datalog_factory, tmp_path):
        log = datalog_factory([1, 2, 3], [1, 1, 1], extra_lines=["garbage;row"])
        with pytest.raises(ParseError):
            run_batch(log, output_dir=str(tmp_path), config={'on_parse_error': 'abort'})


class TestCancellation:

    def test_stop_before_start_processes_nothing(self, mixed_sequence, datalog_factory, tmp_path):
        stop = threading.Event()
        stop.set()
        meta = run_batch(datalog_factory(*mixed_sequence), output_dir=str(tmp_path / "out"),
                         stop_event=stop)
        assert len(meta) == 0
        assert list(meta.columns) == SUMMARY_COLUMNS
        assert not (tmp_path / "out").exists()

    def test_stop_checked_at_segment_boundary(self, tmp_path):
        stop = threading.Event()

        def records():
            rows = [(1, 1.0), (1, 2.0), (2, 3.0), (2, 4.0), (0, 0.0)]
            for i, (pid, diff) in enumerate(rows, start=1):
                if pid == 0:
                    stop.set()
                yield LogRecord(i, "t", 0.0, diff, 0.0, 0, 0, 0, pid)

        meta = run_pipeline(records(), {'output_dir': str(tmp_path)}, stop_event=stop)
        assert list(meta['pattern_id']) == [1]
        assert (tmp_path / "wavelet_1.txt").exists()
        assert not (tmp_path / "wavelet_2.txt").exists()

    def test_stop_checked_between_records(self, tmp_path):
        stop = threading.Event()
        consumed = []

        def records():
            # one long pattern with no boundary
            for i in range(1, 101):
                consumed.append(i)
                if i == 3:
                    stop.set()
                yield LogRecord(i, "t", 0.0, float(i), 0.0, 0, 0, 0, 1)

        meta = run_pipeline(records(), {'output_dir': str(tmp_path)}, stop_event=stop)
        assert consumed == [1, 2, 3]
        assert len(meta) == 0
        assert list(tmp_path.iterdir()) == []


def test_parallel_matches_sequential(datalog_factory, tmp_path):
    rng = np.random.default_rng(7)
    pattern_ids = [0] * 3 + [1] * 20 + [2] * 9 + [0] * 2 + [3] * 33 + [4] * 5
    diffs = list(np.round(rng.normal(scale=200.0, size=len(pattern_ids)), 3))
    log = datalog_factory(diffs, pattern_ids)

    seq = run_batch(log, output_dir=str(tmp_path / "seq"), n_jobs=1)
    par = run_batch(log, output_dir=str(tmp_path / "par"), n_jobs=2)

    assert list(par['pattern_id']) == list(seq['pattern_id']) == [1, 2, 3, 4]
    for pid in [1, 2, 3, 4]:
        name = f"wavelet_{pid}.txt"
        assert (tmp_path / "seq" / name).read_text() == (tmp_path / "par" / name).read_text()


def test_summary_table_saved(mixed_sequence, datalog_factory, tmp_path):
    summary_path = tmp_path / "reports" / "summary.csv"
    meta = run_batch(datalog_factory(*mixed_sequence), output_dir=str(tmp_path / "out"),
                     summary_path=str(summary_path))
    saved = pd.read_csv(summary_path)
    assert list(saved.columns) == SUMMARY_COLUMNS
    assert list(saved['pattern_id']) == list(meta['pattern_id'])


def test_processing_summary_counts(tmp_path):
    segments = [
        Segment(pattern_id=1, values=[1.0]),
        Segment(pattern_id=2, values=[1.0, 2.0, 3.0]),
    ]
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    cfg = build_config({'output_dir': str(blocker)})
    rows = [process_segment(s, cfg) for s in segments]
    meta = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    summary = get_processing_summary(meta)

    assert summary['n_segments'] == 2
    assert summary['n_dropped'] == 1
    assert summary['n_failed'] == 1
    assert summary['n_written'] == 0
    assert summary['patterns'] == [1, 2]


def test_processing_summary_empty():
    summary = get_processing_summary(pd.DataFrame(columns=SUMMARY_COLUMNS))
    assert summary['n_segments'] == 0
    assert summary['patterns'] == []


def test_invalid_config_rejected():
    with pytest.raises(ValueError):
        build_config({'n_jobs': 0})
    with pytest.raises(ValueError):
        build_config({'on_parse_error': 'ignore'})
    with pytest.raises(ValueError):
        build_config({'float_format': '%.3'})


def test_unformattable_coefficients_mark_segment_failed(tmp_path):
    segment = Segment(pattern_id=1, values=[1.0, 2.0, 3.0])
    row = process_segment(segment, {'output_dir': str(tmp_path), 'float_format': '%.3'})
    assert row['status'] == 'failed'
    assert row['output_path'] == ''
    assert list(tmp_path.iterdir()) == []
