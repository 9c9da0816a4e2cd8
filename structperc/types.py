"""
Contracts between the engine and the pipeline that embeds it.

The engine never looks inside instances or decoded outputs. It only needs
structural equality on them (to detect mistakes), a feature extractor (to
turn them into features), and a decoder (to find the best-scoring output
under the current weights).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence

from .weights import Feature


@dataclass(frozen=True, eq=False)
class Decoded:
    """An instance paired with a predicted (or gold) structured output."""
    instance: Any
    decoded: Any

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Decoded):
            return NotImplemented
        return self.instance == other.instance and self.decoded == other.decoded

    def __hash__(self) -> int:
        return hash((self.instance, self.decoded))


@dataclass
class EarlyUpdate:
    """
    Result of a decoder that stopped searching once the gold output fell
    out of its beam. The feature sequences cover only the decoded prefix.
    """
    decoded: Decoded
    decoded_features: Sequence[Feature]
    gold_features: Sequence[Feature]
    early_updated_at: int = -1
    gold_size: int = 0
    score: float = 0.0


class FeatureExtractor(ABC):
    """Turns a decoded instance into the features it fires."""

    @abstractmethod
    def features(self, instance: Decoded) -> Sequence[Feature]:
        pass

    def estimated_feature_count(self) -> int:
        """Sizing hint for the weight vector."""
        return 0


class Decoder(ABC):
    """
    Structured search over outputs for an instance.

    Must be deterministic for a fixed weight vector. Implementations may call
    scorer.score() as often as they need.
    """

    @abstractmethod
    def decode(self, instance: Any, scorer) -> Decoded:
        pass


class EarlyUpdateDecoder(Decoder):
    """Decoder that can also report an early-update correction."""

    @abstractmethod
    def decode_early_update(self, gold: Decoded, scorer) -> EarlyUpdate:
        pass
