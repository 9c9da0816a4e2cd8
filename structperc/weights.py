"""
Sparse weight vector for linear models.

A weight vector maps feature identifiers to real-valued weights. Features
that were never written have weight 0.0, and reading them does not create
an entry, so the vector only ever grows along dimensions touched by an
update.
"""
import numpy as np
from typing import Hashable, Iterable, Mapping

Feature = Hashable


class SparseWeightVector(dict):
    """
    Mapping from feature to weight with in-place vector arithmetic.

    Usage:
        w = SparseWeightVector({"f1": 1.0})
        w.add(gold).subtract(predicted)
        score = w.dot_product(["f1", "f2"])
    """

    def __missing__(self, feature: Feature) -> float:
        return 0.0

    @classmethod
    def from_features(cls, features: Iterable[Feature], amount: float = 1.0) -> "SparseWeightVector":
        """
        Count vector of a feature sequence.

        A feature listed twice gets twice the amount, matching how
        dot_product() scores the same sequence.
        """
        vector = cls()
        for feature in features:
            vector[feature] = vector[feature] + amount
        return vector

    def dot_product(self, features: Iterable[Feature]) -> float:
        """Sum of the weights of the given features (missing ones add 0)."""
        return float(np.fromiter((self[f] for f in features), dtype=np.float64).sum())

    def dot(self, other: Mapping[Feature, float]) -> float:
        """Vector dot product, iterating over the smaller operand."""
        small, large = (self, other) if len(self) <= len(other) else (other, self)
        return float(sum(value * large.get(key, 0.0) for key, value in small.items()))

    def weights_of(self, features: Iterable[Feature]) -> "SparseWeightVector":
        """Sub-vector restricted to the given features that carry a weight."""
        return SparseWeightVector(
            (feature, self[feature]) for feature in features if feature in self
        )

    def add(self, other: Mapping[Feature, float]) -> "SparseWeightVector":
        for feature, value in other.items():
            self[feature] = self[feature] + value
        return self

    def subtract(self, other: Mapping[Feature, float]) -> "SparseWeightVector":
        for feature, value in other.items():
            self[feature] = self[feature] - value
        return self

    def scalar_divide(self, k: float) -> "SparseWeightVector":
        """Divide every stored weight by k in place."""
        if k == 0:
            raise ZeroDivisionError("cannot divide weight vector by zero")
        for feature in self:
            self[feature] /= k
        return self

    def copy(self) -> "SparseWeightVector":
        return SparseWeightVector(self)

    def __repr__(self) -> str:
        return f"SparseWeightVector({dict.__repr__(self)})"
