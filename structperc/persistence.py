"""
Binary persistence for weight vectors.

Only the weights are stored. The payload is a pickled dict carrying a
format name and version next to the weights so that a stream written by
something else, or by an incompatible release, is rejected up front.
"""
import pickle
from typing import BinaryIO

from loguru import logger

from .config import PERSIST_FORMAT, PERSIST_VERSION, PICKLE_PROTOCOL
from .errors import PersistenceError
from .weights import SparseWeightVector


def dump_weights(weights: SparseWeightVector, sink: BinaryIO) -> None:
    """Write the weights to a binary sink."""
    payload = {
        "format": PERSIST_FORMAT,
        "version": PERSIST_VERSION,
        "weights": dict(weights),
    }
    try:
        pickle.dump(payload, sink, protocol=PICKLE_PROTOCOL)
    except (OSError, pickle.PicklingError, TypeError, AttributeError) as e:
        raise PersistenceError(f"Failed to write weights: {e}") from e
    logger.debug("Wrote {} weights", len(weights))


def load_weights(source: BinaryIO) -> SparseWeightVector:
    """
    Read weights from a binary source.

    The whole payload is decoded and validated before a vector is built, so
    callers either get a complete vector or a PersistenceError.
    """
    try:
        payload = pickle.load(source)
    except (OSError, EOFError, pickle.UnpicklingError, AttributeError,
            ImportError, IndexError, KeyError, TypeError, ValueError) as e:
        raise PersistenceError(f"Failed to read weights: {e}") from e

    if not isinstance(payload, dict) or payload.get("format") != PERSIST_FORMAT:
        raise PersistenceError("Not a weight vector stream")
    version = payload.get("version")
    if version != PERSIST_VERSION:
        raise PersistenceError(f"Unsupported weight format version: {version!r}")

    raw = payload.get("weights")
    if not isinstance(raw, dict):
        raise PersistenceError("Weight payload is not a mapping")
    for feature, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PersistenceError(f"Invalid weight for {feature!r}: {value!r}")
    weights = SparseWeightVector((feature, float(value)) for feature, value in raw.items())

    logger.debug("Read {} weights (format version {})", len(weights), version)
    return weights
