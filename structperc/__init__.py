"""
Online linear (structured) perceptron engine.
"""
from .errors import PerceptronError, ModelNotInitializedError, PersistenceError
from .weights import SparseWeightVector
from .types import Decoded, Decoder, EarlyUpdate, EarlyUpdateDecoder, FeatureExtractor
from .strategies import UpdateStrategy, TrivialStrategy, AveragedStrategy, strategy_for
from .perceptron import LinearPerceptron, ModelState, TrainResult
from .channel import InstanceChannel

__all__ = [
    "PerceptronError", "ModelNotInitializedError", "PersistenceError",
    "SparseWeightVector",
    "Decoded", "Decoder", "EarlyUpdate", "EarlyUpdateDecoder", "FeatureExtractor",
    "UpdateStrategy", "TrivialStrategy", "AveragedStrategy", "strategy_for",
    "LinearPerceptron", "ModelState", "TrainResult",
    "InstanceChannel",
]

__version__ = "0.1.0"
