"""
Common runtime configuration shared by the pipeline and all methods.
"""

from typing import Final, Dict, Any


class CommonConfig:
    """
    Runtime defaults for fingerprint wavelet generation.
    """

    # Parallel processing (1 keeps the pipeline single-threaded)
    N_JOBS: Final[int] = 1

    # File paths (can be overridden)
    DEFAULT_OUTPUT_DIR: Final[str] = '.'
    DEFAULT_SUMMARY_PATH: Final[str] = ''  # empty: do not save the metadata table

    # Segment policy
    FINALIZE_AT_EOF: Final[bool] = True
    ON_PARSE_ERROR: Final[str] = 'skip'
    ON_PARSE_ERROR_CHOICES: Final[tuple] = ('skip', 'abort')

    @classmethod
    def get_default_config(cls) -> Dict[str, Any]:
        """
        Get default configuration dictionary.

        Returns:
            Dictionary with default configuration values
        """
        return {
            'n_jobs': cls.N_JOBS,
            'output_dir': cls.DEFAULT_OUTPUT_DIR,
            'summary_path': cls.DEFAULT_SUMMARY_PATH,
            'finalize_at_eof': cls.FINALIZE_AT_EOF,
            'on_parse_error': cls.ON_PARSE_ERROR,
        }

    @classmethod
    def validate_common_config(cls, config: Dict[str, Any]) -> None:
        """
        Validate common configuration parameters.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If configuration is invalid
        """
        if 'n_jobs' in config and (config['n_jobs'] == 0 or config['n_jobs'] < -1):
            raise ValueError("Number of jobs must be positive or -1 (all cores)")

        if 'on_parse_error' in config and config['on_parse_error'] not in cls.ON_PARSE_ERROR_CHOICES:
            raise ValueError(f"on_parse_error must be one of {cls.ON_PARSE_ERROR_CHOICES}")

        if 'output_dir' in config and not config['output_dir']:
            raise ValueError("Output directory must be non-empty")

        if 'float_format' in config:
            fmt = config['float_format']
            try:
                fmt % 1.0
            except (TypeError, ValueError) as e:
                raise ValueError(f"float_format {fmt!r} cannot format a float: {e}") from e

        if 'finalize_at_eof' in config and not isinstance(config['finalize_at_eof'], bool):
            raise ValueError("finalize_at_eof must be a boolean")
