"""
Update strategies: keep the last weights, or average every snapshot.
"""
from loguru import logger

from .base import UpdateStrategy
from ..weights import SparseWeightVector


class TrivialStrategy(UpdateStrategy):
    """
    Keeps the final weight snapshot as the model.

    Every hook is a no-op and finalize() hands back its input unchanged.
    """

    name = "trivial"

    def init(self, weights: SparseWeightVector, iterations: int) -> None:
        pass

    def update(self, weights: SparseWeightVector) -> None:
        pass

    def finalize(self, weights: SparseWeightVector) -> SparseWeightVector:
        return weights


class AveragedStrategy(UpdateStrategy):
    """
    Averaged perceptron (Collins, 2002).

    Sums the live weights after every processed instance, mistake or not,
    and returns that sum divided by iterations * number_of_snapshots. The
    average is far less sensitive to the order of the last few instances
    than the final snapshot.
    """

    name = "averaged"

    def __init__(self):
        self.iterations = 0.0
        self.num_updates = 0.0
        self.accumulated = SparseWeightVector()

    def reset(self) -> None:
        self.iterations = 0.0
        self.num_updates = 0.0
        self.accumulated = SparseWeightVector()

    def init(self, weights: SparseWeightVector, iterations: int) -> None:
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        # State must not carry over between runs, even on a fresh object.
        self.reset()
        self.iterations = float(iterations)

    def update(self, weights: SparseWeightVector) -> None:
        self.accumulated.add(weights)
        self.num_updates += 1

    def finalize(self, weights: SparseWeightVector) -> SparseWeightVector:
        if self.num_updates == 0:
            logger.warning("Averaged strategy saw no instances; returning an empty model")
            averaged = SparseWeightVector()
        else:
            averaged = self.accumulated.scalar_divide(self.iterations * self.num_updates)
            logger.debug(
                "Averaged {} snapshots over {} iteration(s), {} features",
                int(self.num_updates), int(self.iterations), len(averaged),
            )
        # The accumulator now belongs to the caller.
        self.reset()
        return averaged
