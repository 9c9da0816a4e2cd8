"""
Base class for weight-update strategies.
"""
from abc import ABC, abstractmethod

from ..weights import SparseWeightVector


class UpdateStrategy(ABC):
    """
    Abstract base class for update strategies.

    A strategy decides what the trainer keeps as the model once a training
    run is over. The trainer calls, in order:

        init(weights, iterations)   once per run
        update(weights)             once per processed instance
        finalize(weights)           once, after the stream is exhausted

    and installs whatever finalize() returns as its live weights.
    """

    name = "base"

    @abstractmethod
    def init(self, weights: SparseWeightVector, iterations: int) -> None:
        """
        Reset per-run state.

        Args:
            weights: The live weight vector at the start of the run
            iterations: Number of passes the caller intends to make
        """
        pass

    @abstractmethod
    def update(self, weights: SparseWeightVector) -> None:
        """Observe the live weights after one instance was processed."""
        pass

    @abstractmethod
    def finalize(self, weights: SparseWeightVector) -> SparseWeightVector:
        """Return the vector that becomes the model's live weights."""
        pass

    def reset(self) -> None:
        """Clear per-run state (optional)."""
        pass
