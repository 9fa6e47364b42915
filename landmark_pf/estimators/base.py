"""
Base classes for state estimators.

This module defines the abstract interface shared by sequential estimators:
a one-time initialization, a prediction step, and a measurement update,
with a fail-fast guard for calls made before initialization.
"""

from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np


class StateEstimator(ABC):
    """Abstract base class for sequential state estimators."""

    def __init__(self, state_dim: int):
        """
        Initialize state estimator.

        Args:
            state_dim: Dimension of the state vector.
        """
        self.state_dim = state_dim
        self.is_initialized = False

    def _require_initialized(self, operation: str) -> None:
        """
        Reject calls made before initialization.

        Raises:
            RuntimeError: If init() has not completed.
        """
        if not self.is_initialized:
            raise RuntimeError(
                f"{type(self).__name__}.{operation}() called before init(). "
                "Initialize the estimator first."
            )

    @abstractmethod
    def init(self, *args, **kwargs) -> None:
        """Create the initial belief. Must be called exactly once."""
        pass

    @abstractmethod
    def prediction(self, *args, **kwargs) -> None:
        """Perform prediction step (time update)."""
        pass

    @abstractmethod
    def update_weights(self, *args, **kwargs) -> None:
        """Perform measurement update (correction step)."""
        pass

    @abstractmethod
    def get_state(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get current state estimate and its covariance.

        Returns:
            Tuple of (state_vector, covariance_matrix).
        """
        pass
