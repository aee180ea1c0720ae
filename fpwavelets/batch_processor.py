"""
Batch processing for fingerprint wavelet generation.

Records are consumed in input order; each finalized pattern segment is sized,
transformed, self-checked and written to its own coefficient file. Segments
are either processed inline (n_jobs=1) or dispatched to a joblib worker pool
as they are finalized. A stop event is checked at every segment boundary.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm.auto import tqdm

from .config import FLOAT_FORMAT
from .errors import InvalidSegmentError
from .log_reader import LogRecord, iter_records, open_log
from .methods import Daub4Method
from .methods.base import CommonConfig, create_empty_metadata, standardize_output
from .output_writer import CoefficientWriter
from .segmenter import Segment, Segmenter

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    'pattern_id', 'occurrence', 'first_line', 'last_line', 'segment_length', 'padded_n',
    'levels', 'roundtrip_error', 'roundtrip_ok', 'energy_ratio', 'status', 'output_path',
    'error', 'processing_time',
]


def process_segment(segment: Segment, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Transform and write a single pattern segment.

    Args:
        segment: Finalized segment
        config: Pipeline configuration

    Returns:
        Metadata dictionary for the segment. Status is 'success', 'dropped'
        (segment too short to transform) or 'failed' (output not written).
    """
    if config is None:
        config = {}

    identity = {
        'pattern_id': segment.pattern_id,
        'occurrence': segment.occurrence,
        'first_line': segment.first_line,
        'last_line': segment.last_line,
    }

    method = Daub4Method(config)
    try:
        coeffs, metadata = method.compute_coefficients(segment.values, pattern_id=segment.pattern_id)
    except InvalidSegmentError as e:
        logger.warning(f"Dropping pattern {segment.pattern_id} (occurrence {segment.occurrence}): {e}")
        metadata = create_empty_metadata(method='daub4', status='dropped', error=str(e))
        metadata['segment_length'] = segment.length
        metadata['output_path'] = ''
        metadata.update(identity)
        return standardize_output(metadata, segment.pattern_id, segment.occurrence)

    writer = CoefficientWriter(
        config.get('output_dir', CommonConfig.DEFAULT_OUTPUT_DIR),
        float_format=config.get('float_format', FLOAT_FORMAT),
    )
    try:
        path = writer.write(segment.pattern_id, coeffs, segment.length, occurrence=segment.occurrence)
        metadata['output_path'] = str(path)
        metadata['error'] = ''
    except (OSError, ValueError) as e:
        logger.error(f"Error writing coefficients for pattern {segment.pattern_id}: {e}")
        metadata['status'] = 'failed'
        metadata['output_path'] = ''
        metadata['error'] = str(e)

    metadata.update(identity)
    return standardize_output(metadata, segment.pattern_id, segment.occurrence)


def iter_until_stopped(records: Iterable[LogRecord],
                       stop_event: Optional[threading.Event] = None) -> Iterator[LogRecord]:
    """Yield records until input ends; no record is pulled once stop_event is set."""
    iterator = iter(records)
    while stop_event is None or not stop_event.is_set():
        try:
            record = next(iterator)
        except StopIteration:
            return
        yield record


def iter_finalized_segments(records: Iterable[LogRecord], segmenter: Segmenter,
                            stop_event: Optional[threading.Event] = None) -> Iterator[Segment]:
    """Yield finalized segments until input ends or stop_event is set."""
    for segment in segmenter.segments(iter_until_stopped(records, stop_event)):
        if stop_event is not None and stop_event.is_set():
            logger.info(f"Stop requested; pattern {segment.pattern_id} and later segments not processed")
            return
        yield segment


def build_config(config: Optional[Dict[str, Any]] = None, **overrides) -> Dict[str, Any]:
    """
    Merge defaults, a configuration dictionary and keyword overrides.

    Keyword overrides set to None are ignored.

    Raises:
        ValueError: If the merged configuration is invalid
    """
    merged = CommonConfig.get_default_config()
    merged.update(config or {})
    merged.update({k: v for k, v in overrides.items() if v is not None})
    CommonConfig.validate_common_config(merged)
    Daub4Method(merged).validate_config()
    return merged


def run_pipeline(records: Iterable[LogRecord], config: Optional[Dict[str, Any]] = None,
                 n_jobs: Optional[int] = None, stop_event: Optional[threading.Event] = None,
                 verbose: bool = False) -> pd.DataFrame:
    """
    Segment a record stream and process every finalized segment.

    Args:
        records: Decoded datalog records in input order
        config: Pipeline configuration (see CommonConfig.get_default_config)
        n_jobs: Number of parallel jobs; overrides config['n_jobs']
        stop_event: Cooperative cancellation, checked at each segment boundary
        verbose: Whether to show progress

    Returns:
        Metadata DataFrame with one row per finalized segment, in finalize order
    """
    cfg = build_config(config, n_jobs=n_jobs)
    n_jobs = cfg['n_jobs']

    segmenter = Segmenter(finalize_at_eof=cfg['finalize_at_eof'])
    segments = iter_finalized_segments(records, segmenter, stop_event)
    iterator = tqdm(segments, desc='Transforming segments', unit='segment', disable=not verbose)

    if n_jobs == 1:
        results = [process_segment(segment, cfg) for segment in iterator]
    else:
        logger.info(f"Processing segments with {n_jobs} parallel jobs")
        results = Parallel(n_jobs=n_jobs, verbose=0, batch_size=1)(
            delayed(process_segment)(segment, cfg) for segment in iterator
        )

    meta_df = pd.DataFrame(results, columns=SUMMARY_COLUMNS)

    summary = get_processing_summary(meta_df)
    logger.info(
        f"Finalized {summary['n_segments']} segments: {summary['n_written']} written, "
        f"{summary['n_dropped']} dropped, {summary['n_failed']} failed"
    )
    if segmenter.n_discarded:
        logger.info(f"Discarded {segmenter.n_discarded} segment(s) open at end of input")
    return meta_df


def _save_df(df: pd.DataFrame, path: Union[str, Path]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == '.csv':
        df.to_csv(path, index=False)
    else:
        df.to_parquet(path, index=False)


def run_batch(input_path: Union[str, Path], output_dir: Optional[str] = None,
              summary_path: Optional[str] = None, config: Optional[Dict[str, Any]] = None,
              n_jobs: Optional[int] = None, stop_event: Optional[threading.Event] = None,
              verbose: bool = False) -> pd.DataFrame:
    """
    Generate coefficient files for every pattern in a datalog.

    Args:
        input_path: Datalog path, or '-' for standard input
        output_dir: Directory for wavelet_<p>.txt files; overrides config
        summary_path: Optional path for the metadata table (.csv or parquet)
        config: Pipeline configuration
        n_jobs: Number of parallel jobs
        stop_event: Cooperative cancellation event
        verbose: Whether to show progress

    Returns:
        Metadata DataFrame with one row per finalized segment

    Raises:
        ParseError: If on_parse_error is 'abort' and a malformed row is found
    """
    cfg = build_config(config, output_dir=output_dir, summary_path=summary_path, n_jobs=n_jobs)

    logger.info(f"Loading {input_path}")
    with open_log(input_path) as f:
        records = iter_records(f, on_error=cfg['on_parse_error'])
        meta_df = run_pipeline(records, cfg, stop_event=stop_event, verbose=verbose)

    if cfg.get('summary_path'):
        _save_df(meta_df, cfg['summary_path'])
        logger.info(f"Saved segment metadata to: {cfg['summary_path']}")

    return meta_df


def get_processing_summary(meta_df: pd.DataFrame) -> Dict[str, Any]:
    """
    Summarize a metadata table produced by run_pipeline.

    Returns:
        Dictionary with segment counts and self-check statistics
    """
    status = meta_df['status'] if len(meta_df) else pd.Series(dtype=object)
    written = meta_df[status == 'success'] if len(meta_df) else meta_df
    errors = written['roundtrip_error'].dropna() if len(written) else pd.Series(dtype=float)

    summary = {
        'n_segments': int(len(meta_df)),
        'n_written': int((status == 'success').sum()),
        'n_dropped': int((status == 'dropped').sum()),
        'n_failed': int((status == 'failed').sum()),
        'n_roundtrip_mismatch': int((~written['roundtrip_ok'].astype(bool)).sum()) if len(written) else 0,
        'n_samples': int(meta_df['segment_length'].sum()) if len(meta_df) else 0,
        'max_roundtrip_error': float(errors.max()) if len(errors) else float('nan'),
        'patterns': sorted(set(int(p) for p in meta_df['pattern_id'])) if len(meta_df) else [],
    }
    if len(written):
        summary['mean_padding_ratio'] = float(np.mean(written['padded_n'] / written['segment_length']))
    return summary
