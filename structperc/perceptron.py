"""
Linear structured perceptron: online trainer and scorer.

The model owns one live SparseWeightVector. Training walks a stream of gold
decoded instances once, in arrival order; for each one the decoder predicts
an output under the current weights and, when the prediction is wrong, the
weights move towards the gold features and away from the predicted ones.
"""
import os
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Sequence, Union

from loguru import logger
from tqdm import tqdm

from .config import DEFAULT_ITERATIONS, SHOW_PROGRESS
from .errors import ModelNotInitializedError, PersistenceError
from .persistence import dump_weights, load_weights
from .strategies import UpdateStrategy
from .types import Decoded, Decoder, EarlyUpdateDecoder, Feature, FeatureExtractor
from .weights import SparseWeightVector


class ModelState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    TRAINING = "training"
    READY = "ready"


@dataclass(frozen=True)
class TrainResult:
    """Counters for one call to train()."""
    instances: int
    mistakes: int
    early_updates: int = 0
    stopped: bool = False

    @property
    def accuracy(self) -> float:
        if self.instances == 0:
            return 0.0
        return 1.0 - self.mistakes / self.instances


class LinearPerceptron:
    """
    Online linear perceptron for structured prediction.

    Usage:
        model = LinearPerceptron(decoder, iterations=1)
        model.init(extractor, AveragedStrategy())
        model.train(gold_instances)
        best = decoder.decode(sentence, model)

    score() may be called from the decoder while train() runs; it must not be
    called from another thread during training since nothing locks the
    weights.
    """

    def __init__(self, decoder: Optional[Decoder] = None, iterations: int = DEFAULT_ITERATIONS):
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        self.decoder = decoder
        self.iterations = iterations
        self.extractor: Optional[FeatureExtractor] = None
        self.strategy: Optional[UpdateStrategy] = None
        self.weights: Optional[SparseWeightVector] = None
        self.state = ModelState.UNINITIALIZED

    def init(self, extractor: FeatureExtractor, strategy: UpdateStrategy) -> None:
        """
        Bind the feature extractor and update strategy and allocate fresh
        weights. Must be called before score() or train(); calling it again
        starts over with empty weights.
        """
        self.extractor = extractor
        self.strategy = strategy
        estimated = extractor.estimated_feature_count()
        if estimated < 0:
            raise ValueError(f"estimated feature count must be >= 0, got {estimated}")
        self.weights = SparseWeightVector()
        self.state = ModelState.INITIALIZED
        logger.debug(
            "Initialized perceptron (strategy={}, estimated features={})",
            getattr(strategy, "name", type(strategy).__name__), estimated,
        )

    def _require_init(self, operation: str) -> None:
        if self.weights is None or self.extractor is None:
            logger.error("{}() called on an uninitialized model", operation)
            raise ModelNotInitializedError(f"Model not initialized: call init() before {operation}()")

    def score(self, instance: Decoded) -> float:
        """Dot product of the instance's features with the current weights."""
        self._require_init("score")
        return self.weights.dot_product(self.extractor.features(instance))

    def train(
        self,
        instances: Iterable[Decoded],
        stop: Optional[threading.Event] = None,
        show_progress: bool = SHOW_PROGRESS,
    ) -> TrainResult:
        """
        Make one pass over gold instances and finalize the weights.

        Args:
            instances: Gold decoded instances, consumed in order. May be a
                list, a generator or a channel fed by another thread.
            stop: Optional event; when set, training stops before the next
                instance and the weights seen so far are finalized.
            show_progress: Show a tqdm progress bar.

        Returns:
            Counters for the pass.

        If the stream or a collaborator raises, the exception propagates and
        the model is rolled back to its weights and state from before the
        call; the strategy is reset.
        """
        self._require_init("train")
        if self.decoder is None:
            raise ModelNotInitializedError("Model has no decoder: pass one to LinearPerceptron()")

        previous_state = self.state
        snapshot = self.weights.copy()
        self.strategy.init(self.weights, self.iterations)
        self.state = ModelState.TRAINING
        early = isinstance(self.decoder, EarlyUpdateDecoder)
        logger.info(
            "Training perceptron (iterations={}, early update={})", self.iterations, early,
        )

        seen = mistakes = early_updates = 0
        stopped = False
        pbar = tqdm(instances, desc="Training", unit="inst", disable=not show_progress)
        try:
            for gold in pbar:
                if stop is not None and stop.is_set():
                    stopped = True
                    logger.warning("Training stopped after {} instances", seen)
                    break

                if early:
                    early_result = self.decoder.decode_early_update(gold, self)
                    decoded = early_result.decoded
                    if gold != decoded:
                        if early_result.early_updated_at >= 0:
                            early_updates += 1
                        self._correct(early_result.gold_features, early_result.decoded_features)
                        mistakes += 1
                else:
                    decoded = self.decoder.decode(gold.instance, self)
                    if gold != decoded:
                        self._correct(self.extractor.features(gold), self.extractor.features(decoded))
                        mistakes += 1

                self.strategy.update(self.weights)
                seen += 1
                if show_progress:
                    pbar.set_postfix({"mistakes": mistakes})
        except BaseException:
            logger.error("Training failed after {} instances; restoring previous weights", seen)
            self.weights = snapshot
            self.strategy.reset()
            self.state = previous_state
            raise
        finally:
            pbar.close()

        self.weights = self.strategy.finalize(self.weights)
        self.state = ModelState.READY

        result = TrainResult(seen, mistakes, early_updates, stopped)
        logger.info(
            "Trained on {} instances: {} mistakes, accuracy {:.4f}, {} features",
            seen, mistakes, result.accuracy, len(self.weights),
        )
        return result

    def _correct(self, gold_features: Sequence[Feature], decoded_features: Sequence[Feature]) -> None:
        """Perceptron step: +1 per gold feature, -1 per predicted feature."""
        self.weights.add(SparseWeightVector.from_features(gold_features)).subtract(
            SparseWeightVector.from_features(decoded_features)
        )

    def write(self, sink: BinaryIO) -> None:
        """Serialize the current weights (and nothing else) to a binary sink."""
        if self.weights is None:
            raise ModelNotInitializedError("Model not initialized: nothing to write")
        dump_weights(self.weights, sink)

    def read(self, source: BinaryIO) -> None:
        """
        Replace the live weights with ones read from a binary source.

        Call after init(), which would otherwise discard them. On failure a
        PersistenceError is raised and the current weights are kept.
        """
        weights = load_weights(source)
        self.weights = weights
        if self.state is not ModelState.UNINITIALIZED:
            self.state = ModelState.READY

    def save(self, path: Union[str, Path]) -> None:
        """
        Write the weights to a file.

        The weights go to a temporary file next to path which replaces path
        only once fully written; on failure path is left as it was.
        """
        path = Path(path)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with open(tmp_path, "wb") as f:
                self.write(f)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write {path}: {e}") from e
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.info("Saved {} weights to {}", len(self.weights), path)

    def load(self, path: Union[str, Path]) -> None:
        """Read the weights from a file."""
        try:
            with open(path, "rb") as f:
                self.read(f)
        except OSError as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e
        logger.info("Loaded {} weights from {}", len(self.weights), path)
