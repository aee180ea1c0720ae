"""
Abstract base class for pattern segment transform methods.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Tuple, Optional, Sequence
import numpy as np


class BaseMethod(ABC):
    """
    Abstract base class for pattern segment transform methods.

    All methods must implement the core interface methods to ensure
    compatibility with the batch processing pipeline.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the method with optional configuration.

        Args:
            config: Method-specific configuration dictionary
        """
        self.config = config or {}
        self.method_name = self.__class__.__name__

    @abstractmethod
    def compute_coefficients(self, values: Sequence[float],
                             **kwargs) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Transform the diff values of a single pattern segment.

        Args:
            values: Segment values in arrival order
            **kwargs: Additional method-specific parameters

        Returns:
            Tuple of (coefficients, metadata_dict)
        """
        pass

    @abstractmethod
    def validate_config(self) -> None:
        """
        Validate method-specific configuration parameters.

        Raises:
            ValueError: If configuration is invalid
        """
        pass

    def get_method_info(self) -> Dict[str, str]:
        """
        Get information about the method.

        Returns:
            Dictionary with method information
        """
        return {
            'name': self.method_name,
            'description': (self.__doc__ or 'No description available').strip(),
            'version': getattr(self, 'version', '1.0.0')
        }

    def preprocess_values(self, values: Sequence[float]) -> np.ndarray:
        """
        Preprocess segment values (can be overridden by subclasses).

        Args:
            values: Raw segment values

        Returns:
            Values as a float array
        """
        return np.asarray(values, dtype=float)
