# tests/conftest.py
from typing import Dict, Sequence

import pytest
from loguru import logger

from structperc import Decoded, Decoder, FeatureExtractor


@pytest.fixture(autouse=True)
def disable_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


class TableFeatures(FeatureExtractor):
    """Features looked up by decoded output label."""

    def __init__(self, table: Dict[str, Sequence[str]]):
        self.table = table

    def features(self, instance: Decoded):
        return list(self.table[instance.decoded])

    def estimated_feature_count(self) -> int:
        return len({f for feats in self.table.values() for f in feats})


class FixedDecoder(Decoder):
    """Always predicts the same output."""

    def __init__(self, output: str):
        self.output = output
        self.calls = 0

    def decode(self, instance, scorer) -> Decoded:
        self.calls += 1
        return Decoded(instance, self.output)


class ArgmaxDecoder(Decoder):
    """Best-scoring candidate; ties go to the first candidate."""

    def __init__(self, candidates: Sequence[str]):
        self.candidates = list(candidates)

    def decode(self, instance, scorer) -> Decoded:
        return max(
            (Decoded(instance, c) for c in self.candidates),
            key=scorer.score,
        )


@pytest.fixture
def table() -> Dict[str, Sequence[str]]:
    return {
        "gold": ["f1", "f3"],
        "wrong": ["f2"],
    }


@pytest.fixture
def extractor(table) -> TableFeatures:
    return TableFeatures(table)
