import numpy as np
import pytest

from structperc import SparseWeightVector


def test_missing_feature_reads_zero_without_allocating():
    w = SparseWeightVector({"a": 1.5})
    assert w["missing"] == 0.0
    assert "missing" not in w
    assert len(w) == 1


def test_dot_product_ignores_unknown_features():
    w = SparseWeightVector({"a": 1.0, "b": 2.0})
    assert w.dot_product(["a", "b", "zzz"]) == pytest.approx(3.0)
    assert w.dot_product([]) == 0.0
    assert "zzz" not in w


def test_dot_product_counts_repeated_features():
    w = SparseWeightVector({"a": 2.0})
    assert w.dot_product(["a", "a"]) == pytest.approx(4.0)


def test_weights_of_restricts_to_known_keys():
    w = SparseWeightVector({"a": 1.0, "b": 2.0, "c": 3.0})
    sub = w.weights_of(["a", "c", "x"])
    assert isinstance(sub, SparseWeightVector)
    assert sub == {"a": 1.0, "c": 3.0}


def test_add_and_subtract_mutate_and_chain():
    w = SparseWeightVector({"a": 1.0})
    returned = w.add({"a": 1.0, "b": 2.0}).subtract({"b": 0.5})
    assert returned is w
    assert w == {"a": 2.0, "b": 1.5}


def test_add_then_subtract_is_identity():
    w = SparseWeightVector({"a": 0.1, "b": -3.2})
    v = {"a": 7.7, "c": 0.3}
    before = w.copy()
    w.add(v).subtract(v)
    for key in set(before) | set(w):
        assert np.isclose(w[key], before[key])


def test_scalar_divide_scales_self_dot_by_k_squared():
    w = SparseWeightVector({"a": 3.0, "b": -4.0})
    original = w.dot(w)
    w.scalar_divide(2.0)
    assert w == {"a": 1.5, "b": -2.0}
    assert np.isclose(w.dot(w), original / 4.0)


def test_scalar_divide_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        SparseWeightVector({"a": 1.0}).scalar_divide(0)


def test_from_features_builds_count_vector():
    v = SparseWeightVector.from_features(["a", "b", "a"])
    assert v == {"a": 2.0, "b": 1.0}
    assert SparseWeightVector.from_features(["a"], amount=-1.0) == {"a": -1.0}


def test_copy_is_independent():
    w = SparseWeightVector({"a": 1.0})
    c = w.copy()
    c.add({"a": 1.0})
    assert w["a"] == 1.0
    assert isinstance(c, SparseWeightVector)
