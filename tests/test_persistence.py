import io
import pickle

import numpy as np
import pytest

from structperc import (
    LinearPerceptron,
    ModelNotInitializedError,
    PersistenceError,
    SparseWeightVector,
    TrivialStrategy,
)
from structperc.config import PERSIST_FORMAT, PERSIST_VERSION
from structperc.persistence import dump_weights, load_weights

from conftest import FixedDecoder


@pytest.fixture
def model(extractor):
    m = LinearPerceptron(FixedDecoder("gold"))
    m.init(extractor, TrivialStrategy())
    m.weights.add({"f1": 0.1, ("w", "dog", "NN"): -2.5, 7: 1e-9})
    return m


@pytest.fixture
def fresh(extractor):
    m = LinearPerceptron(FixedDecoder("gold"))
    m.init(extractor, TrivialStrategy())
    return m


def test_round_trip_reproduces_weights(model, fresh):
    buf = io.BytesIO()
    model.write(buf)
    buf.seek(0)
    fresh.read(buf)

    assert set(fresh.weights) == set(model.weights)
    for key, value in model.weights.items():
        assert np.isclose(fresh.weights[key], value)
    assert isinstance(fresh.weights, SparseWeightVector)


def test_save_and_load_file(model, fresh, tmp_path):
    path = tmp_path / "weights.bin"
    model.save(path)
    fresh.load(str(path))
    assert fresh.weights == model.weights


def test_truncated_stream_leaves_weights_untouched(model, fresh):
    buf = io.BytesIO()
    model.write(buf)
    data = buf.getvalue()

    fresh.weights.add({"keep": 1.0})
    with pytest.raises(PersistenceError):
        fresh.read(io.BytesIO(data[: len(data) // 2]))
    assert fresh.weights == {"keep": 1.0}


def test_empty_stream_is_rejected(fresh):
    with pytest.raises(PersistenceError):
        fresh.read(io.BytesIO(b""))


def test_garbage_stream_is_rejected(fresh):
    with pytest.raises(PersistenceError):
        fresh.read(io.BytesIO(b"not a pickle at all"))


def test_foreign_payload_is_rejected():
    buf = io.BytesIO(pickle.dumps({"f1": 1.0}))
    with pytest.raises(PersistenceError, match="Not a weight vector"):
        load_weights(buf)


def test_unknown_version_is_rejected():
    payload = {"format": PERSIST_FORMAT, "version": PERSIST_VERSION + 1, "weights": {}}
    with pytest.raises(PersistenceError, match="version"):
        load_weights(io.BytesIO(pickle.dumps(payload)))


def test_non_numeric_weight_is_rejected():
    payload = {"format": PERSIST_FORMAT, "version": PERSIST_VERSION, "weights": {"f1": "heavy"}}
    with pytest.raises(PersistenceError):
        load_weights(io.BytesIO(pickle.dumps(payload)))


def test_write_failure_is_surfaced(model):
    class BrokenSink(io.RawIOBase):
        def writable(self):
            return True

        def write(self, b):
            raise OSError("disk full")

    with pytest.raises(PersistenceError) as info:
        model.write(BrokenSink())
    assert isinstance(info.value.__cause__, OSError)


def test_load_missing_file_raises(fresh, tmp_path):
    with pytest.raises(PersistenceError):
        fresh.load(tmp_path / "missing.bin")


def test_write_before_init_raises():
    with pytest.raises(ModelNotInitializedError):
        LinearPerceptron().write(io.BytesIO())


def test_only_weights_are_persisted(model):
    buf = io.BytesIO()
    dump_weights(model.weights, buf)
    payload = pickle.loads(buf.getvalue())
    assert set(payload) == {"format", "version", "weights"}
    assert payload["weights"] == dict(model.weights)


@pytest.mark.parametrize("value", ["1.5", True, None, [1.0]])
def test_non_float_weight_is_rejected(value):
    payload = {"format": PERSIST_FORMAT, "version": PERSIST_VERSION, "weights": {"f1": value}}
    with pytest.raises(PersistenceError):
        load_weights(io.BytesIO(pickle.dumps(payload)))


def test_integer_weight_is_accepted():
    payload = {"format": PERSIST_FORMAT, "version": PERSIST_VERSION, "weights": {"f1": 2}}
    weights = load_weights(io.BytesIO(pickle.dumps(payload)))
    assert weights == {"f1": 2.0}
    assert isinstance(weights["f1"], float)


def test_failed_save_keeps_previous_file(model, fresh, tmp_path):
    path = tmp_path / "weights.bin"
    model.save(path)

    # A local function can be hashed but not pickled.
    model.weights.add({lambda: None: 1.0})
    with pytest.raises(PersistenceError):
        model.save(path)

    assert [p.name for p in tmp_path.iterdir()] == ["weights.bin"]
    fresh.load(path)
    assert set(fresh.weights) == {"f1", ("w", "dog", "NN"), 7}


def test_failed_save_leaves_no_file(model, tmp_path):
    path = tmp_path / "weights.bin"
    model.weights.add({lambda: None: 1.0})
    with pytest.raises(PersistenceError):
        model.save(path)
    assert list(tmp_path.iterdir()) == []
