#!filepath: tests/analysis/engines/test_split_engine.py
import numpy as np
import pandas as pd
import pytest

from weavefit.analysis.engines.split_engine import SplitEngine
from weavefit.utils.errors import ConfigurationError


@pytest.fixture
def frame() -> pd.DataFrame:
    return pd.DataFrame({"x": np.arange(1000, dtype=float)})


def test_split_is_a_partition(frame):
    s = SplitEngine().split(frame, 0.75, seed=1)

    assert len(np.intersect1d(s.train, s.test)) == 0
    assert np.array_equal(np.sort(np.concatenate([s.train, s.test])), np.arange(1000))
    assert len(s.train) == 750
    assert len(s.test) == 250


def test_train_size_rounds():
    assert SplitEngine.train_size(10, 0.75) == 8
    assert SplitEngine.train_size(1000, 0.75) == 750


def test_split_is_deterministic_per_seed(frame):
    engine = SplitEngine()
    a = engine.split(frame, 0.75, seed=1)
    b = engine.split(frame, 0.75, seed=1)
    c = engine.split(frame, 0.75, seed=2)

    assert np.array_equal(a.train, b.train)
    assert not np.array_equal(a.train, c.train)


def test_split_does_not_touch_global_random_state(frame):
    np.random.seed(123)
    expected = np.random.rand()

    np.random.seed(123)
    SplitEngine().split(frame, 0.75, seed=1)
    assert np.random.rand() == expected


def test_take_returns_fresh_index(frame):
    s = SplitEngine().split(frame, 0.5, seed=3)
    train, test = s.take(frame)

    assert list(train.index) == list(range(len(s.train)))
    assert np.array_equal(train["x"].to_numpy(), s.train.astype(float))


@pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5])
def test_invalid_fraction(frame, fraction):
    with pytest.raises(ConfigurationError):
        SplitEngine().split(frame, fraction, seed=1)


def test_fraction_leaving_empty_partition():
    with pytest.raises(ConfigurationError):
        SplitEngine.train_size(3, 0.9)


def test_kfold_partitions_training_positions():
    train = np.arange(0, 750)
    folds = SplitEngine().kfold(train, 10, seed=5)

    assert len(folds) == 10
    joined = np.concatenate(folds)
    assert np.array_equal(np.sort(joined), train)
    sizes = [len(f) for f in folds]
    assert max(sizes) - min(sizes) <= 1


def test_kfold_is_deterministic():
    train = np.arange(100)
    a = SplitEngine().kfold(train, 10, seed=5)
    b = SplitEngine().kfold(train, 10, seed=5)

    assert all(np.array_equal(x, y) for x, y in zip(a, b))


@pytest.mark.parametrize("k", [0, 1, 11])
def test_kfold_invalid_count(k):
    with pytest.raises(ConfigurationError):
        SplitEngine().kfold(np.arange(10), k, seed=1)


def test_derive_seed_separates_targets_and_purposes():
    s00 = SplitEngine.derive_seed(1, 0, 0)
    s10 = SplitEngine.derive_seed(1, 1, 0)
    s01 = SplitEngine.derive_seed(1, 0, 1)

    assert len({s00, s10, s01}) == 3
    assert SplitEngine.derive_seed(1, 0, 0) == s00
