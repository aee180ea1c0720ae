#!/usr/bin/env python3
"""
Main entry point for fingerprint wavelet generation.

Reads a semicolon-delimited sensor datalog and writes one Daubechies-4
coefficient file per pattern occurrence:

    fpwavelets datalog.csv --output-dir out/
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from .batch_processor import run_batch, get_processing_summary
from .errors import ParseError
from .methods import Daub4Method
from .methods.base import CommonConfig
from .methods.daub4 import FILTER_NAME, ROUNDTRIP_TOLERANCE
from .config import FLOAT_FORMAT


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Fingerprint wavelets - Daubechies-4 coefficients per datalog pattern")

    # Input/Output paths
    parser.add_argument('input', type=str,
                        help="Datalog file path ('-' for standard input)")
    parser.add_argument('--output-dir', '-o', type=str,
                        default=CommonConfig.DEFAULT_OUTPUT_DIR,
                        help='Directory for wavelet_<pattern>.txt files')
    parser.add_argument('--summary', '-s', type=str, default=None,
                        help='Write per-segment metadata to this path (.csv or .parquet)')

    # Pipeline parameters
    parser.add_argument('--n-jobs', '-j', type=int, default=CommonConfig.N_JOBS,
                        help='Number of parallel jobs (-1 for all cores)')
    parser.add_argument('--on-parse-error', type=str, default=CommonConfig.ON_PARSE_ERROR,
                        choices=list(CommonConfig.ON_PARSE_ERROR_CHOICES),
                        help='Skip malformed rows with a warning, or abort ingestion')
    parser.add_argument('--no-finalize-at-eof', dest='finalize_at_eof', action='store_false',
                        help='Discard the pattern still open at end of input')
    parser.add_argument('--float-format', type=str, default=FLOAT_FORMAT,
                        help='printf-style format for coefficients')

    # Daub4-specific parameters
    parser.add_argument('--filter-name', type=str, default=None,
                        help=f'PyWavelets name of a 4-tap filter, e.g. {FILTER_NAME} '
                             '(default: built-in Daubechies-4 coefficients)')
    parser.add_argument('--no-self-check', dest='self_check', action='store_false',
                        help='Skip the inverse-transform self-check')
    parser.add_argument('--roundtrip-tolerance', type=float, default=ROUNDTRIP_TOLERANCE,
                        help='Relative tolerance of the inverse-transform self-check')

    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose logging')
    parser.add_argument('--validate-only', action='store_true',
                        help='Validate config and exit')

    return parser.parse_args(argv)


def get_pipeline_config(args: argparse.Namespace) -> dict:
    """Get pipeline configuration from arguments."""
    config = CommonConfig.get_default_config()
    config.update({
        'output_dir': args.output_dir,
        'summary_path': args.summary or '',
        'n_jobs': args.n_jobs,
        'on_parse_error': args.on_parse_error,
        'finalize_at_eof': args.finalize_at_eof,
        'float_format': args.float_format,
        'filter_name': args.filter_name,
        'self_check': args.self_check,
        'roundtrip_tolerance': args.roundtrip_tolerance,
    })
    return config


def install_stop_handler(stop_event: threading.Event):
    """
    Route SIGTERM to stop_event.

    The first SIGTERM sets the event and puts back the previous handler, so a
    second SIGTERM terminates a process still blocked on input.

    Returns:
        The SIGTERM handler that was installed before
    """
    logger = logging.getLogger(__name__)
    previous = signal.getsignal(signal.SIGTERM)
    if previous is None:
        previous = signal.SIG_DFL

    def _handle(signum, frame):
        logger.warning("SIGTERM received - stopping at the next record; send again to terminate")
        stop_event.set()
        signal.signal(signal.SIGTERM, previous)

    signal.signal(signal.SIGTERM, _handle)
    return previous


def run_batch_processing(args: argparse.Namespace) -> int:
    """Run wavelet generation for the datalog named in args."""
    logger = logging.getLogger(__name__)

    config = get_pipeline_config(args)

    try:
        CommonConfig.validate_common_config(config)
        method = Daub4Method(config)
        method.validate_config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    logger.info(f"Method info: {method.get_method_info()}")
    if args.validate_only:
        logger.info("Validation only - exiting")
        return 0

    if args.input != '-' and not Path(args.input).exists():
        logger.error(f"Input file does not exist: {args.input}")
        return 1

    stop_event = threading.Event()
    previous_handler = None
    if threading.current_thread() is threading.main_thread():
        previous_handler = install_stop_handler(stop_event)

    logger.info(f"Running daub4 wavelet generation with config: {config}")
    try:
        meta_df = run_batch(args.input, config=config, stop_event=stop_event, verbose=args.verbose)
    except ParseError as e:
        logger.error(f"Aborted ingestion: {e}")
        return 1
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)

    summary = get_processing_summary(meta_df)
    logger.info(f"Processed {summary['n_segments']} pattern segments")
    logger.info(f"Written: {summary['n_written']}, Dropped: {summary['n_dropped']}, "
                f"Failed: {summary['n_failed']}")
    if summary['n_roundtrip_mismatch']:
        logger.warning(f"{summary['n_roundtrip_mismatch']} segments failed the inverse self-check")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"Starting wavelet generation for {args.input}")
        return run_batch_processing(args)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
