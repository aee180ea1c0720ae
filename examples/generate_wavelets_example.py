#!/usr/bin/env python3
"""
Fingerprint wavelets example: synthetic datalog demo + run on a real datalog.

Run:
    python examples/generate_wavelets_example.py --datalog datalog.csv --out-dir out/

The synthetic step builds a short datalog with three labelled pulses, runs the
pipeline on it and prints the per-segment metadata. The second step processes
a real datalog if one is given.
"""

import argparse
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from fpwavelets.batch_processor import run_batch, get_processing_summary
from fpwavelets.config import FIELD_DELIMITER, FIELD_NAMES


# -----------------------------
# Synthetic datalog
# -----------------------------

def make_synthetic(
    pulse_lengths=(7, 12, 30),
    idle: int = 5,
    amplitude: float = 200.0,
    noise: float = 3.0,
    seed: int = 42,
) -> pd.DataFrame:
    """
    Idle stretches separated by damped sinusoid pulses, one pattern id per pulse.

    Returns:
        DataFrame with the datalog columns in file order
    """
    rng = np.random.default_rng(seed)
    diffs, pattern_ids = [], []
    for pid, n in enumerate(pulse_lengths, start=1):
        diffs.extend(rng.normal(scale=noise, size=idle))
        pattern_ids.extend([0] * idle)
        t = np.arange(n)
        pulse = amplitude * np.exp(-t / max(n / 3.0, 1.0)) * np.sin(2 * np.pi * t / max(n / 2.0, 2.0))
        diffs.extend(pulse + rng.normal(scale=noise, size=n))
        pattern_ids.extend([pid] * n)
    diffs.extend(rng.normal(scale=noise, size=idle))
    pattern_ids.extend([0] * idle)

    diffs = np.round(np.asarray(diffs), 3)
    n_rows = len(diffs)
    measurement = 69000.0 + np.cumsum(diffs)
    running_average = pd.Series(np.abs(diffs)).rolling(16, min_periods=1).mean().round(3)
    detect = (np.asarray(pattern_ids) > 0).astype(int)
    return pd.DataFrame({
        'lineid': np.arange(1, n_rows + 1),
        'timestamp': [f"10-03-2016 15:27:{i * 0.000064:09.6f}" for i in range(n_rows)],
        'meas': np.round(measurement, 3),
        'diff': diffs,
        'curavg': running_average,
        'isdetect': detect,
        'isalarm': 0,
        'iswait': 0,
        'patternid': pattern_ids,
    })


def run_synthetic_demo(out_dir: Path) -> None:
    print("\n[1/2] Synthetic demo: three pulses of 7, 12 and 30 samples ...")
    df = make_synthetic()
    assert len(df.columns) == len(FIELD_NAMES)
    with tempfile.TemporaryDirectory() as tmp:
        log_path = Path(tmp) / "synthetic_datalog.csv"
        df.to_csv(log_path, sep=FIELD_DELIMITER, index=False)
        meta = run_batch(log_path, output_dir=str(out_dir))

    cols = ['pattern_id', 'segment_length', 'padded_n', 'levels', 'roundtrip_error', 'energy_ratio', 'status']
    print(meta[cols].to_string(index=False))
    first = out_dir / "wavelet_1.txt"
    if first.exists():
        coeffs = np.loadtxt(first, ndmin=1)
        print(f"\n{first.name}: {len(coeffs)} coefficients, smooth part {coeffs[:2]}")


# -----------------------------
# Real datalog
# -----------------------------

def run_datalog(datalog: str, out_dir: Path, summary_path: Optional[str], n_jobs: int) -> None:
    print(f"\n[2/2] Processing {datalog} ...")
    meta = run_batch(datalog, output_dir=str(out_dir), summary_path=summary_path,
                     n_jobs=n_jobs, verbose=True)
    summary = get_processing_summary(meta)
    for key in ('n_segments', 'n_written', 'n_dropped', 'n_failed', 'max_roundtrip_error'):
        print(f"  {key:22s} = {summary[key]}")
    if summary_path:
        print(f"Saved {summary_path} with shape {meta.shape}")


# -----------------------------
# CLI
# -----------------------------

def main():
    ap = argparse.ArgumentParser(description="Fingerprint wavelets example: synthetic demo + datalog run")
    ap.add_argument("--datalog", default=None, help="Path to a semicolon-delimited datalog")
    ap.add_argument("--out-dir", default="wavelets_out", help="Directory for coefficient files")
    ap.add_argument("--summary", default=None, help="Optional metadata table path (.csv or .parquet)")
    ap.add_argument("--n_jobs", type=int, default=1, help="Parallel jobs for the datalog run")
    ap.add_argument("--skip_demo", action="store_true", help="Skip the synthetic demo step")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    if not args.skip_demo:
        run_synthetic_demo(out_dir / "synthetic")
    if args.datalog:
        run_datalog(args.datalog, out_dir, args.summary, args.n_jobs)


if __name__ == "__main__":
    main()
