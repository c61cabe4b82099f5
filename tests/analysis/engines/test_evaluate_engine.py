#!filepath: tests/analysis/engines/test_evaluate_engine.py
import numpy as np
import pandas as pd
import pytest

from weavefit.analysis.engines.evaluate_engine import EvaluateEngine, rmse
from weavefit.analysis.engines.model_fit_engine import FittedModel
from weavefit.config.analysis_config import ModelMethod
from weavefit.utils.errors import DataIntegrityError


@pytest.fixture
def model() -> FittedModel:
    # ŷ = 2x + 1
    return FittedModel(
        method=ModelMethod.RIDGE,
        target="y",
        feature_names=("x",),
        coefficients=np.array([2.0]),
        intercept=1.0,
        penalty=0.5,
    )


def test_rmse():
    assert rmse(np.array([1.0, 2.0, 3.0]), np.array([1.0, 2.0, 5.0])) == pytest.approx(
        np.sqrt(4.0 / 3.0)
    )


def test_metrics_by_definition(model):
    frame = pd.DataFrame({"x": [0.0, 1.0, 2.0, 3.0], "y": [1.5, 2.5, 5.5, 7.0]})
    res = EvaluateEngine().evaluate(model=model, frame=frame)

    y = frame["y"].to_numpy()
    pred = 2.0 * frame["x"].to_numpy() + 1.0
    expected_rmse = np.sqrt(np.mean((y - pred) ** 2))
    sd = np.std(y, ddof=1)

    assert res.rmse == pytest.approx(expected_rmse)
    assert res.standardized_rmse == res.rmse / sd
    assert res.r_squared == pytest.approx(
        1 - np.sum((y - pred) ** 2) / np.sum((y - y.mean()) ** 2)
    )
    assert res.n_test == 4
    assert res.penalty == 0.5
    assert res.method is ModelMethod.RIDGE


def test_perfect_fit(model):
    frame = pd.DataFrame({"x": [0.0, 1.0, 2.0]})
    frame["y"] = 2.0 * frame["x"] + 1.0
    res = EvaluateEngine().evaluate(model=model, frame=frame)

    assert res.rmse == pytest.approx(0.0)
    assert res.r_squared == pytest.approx(1.0)


def test_constant_test_target_is_rejected(model):
    frame = pd.DataFrame({"x": [0.0, 1.0, 2.0], "y": [3.0, 3.0, 3.0]})

    with pytest.raises(DataIntegrityError, match="zero standard deviation") as ei:
        EvaluateEngine().evaluate(model=model, frame=frame)
    assert ei.value.method == "ridge"
    assert ei.value.penalty == 0.5


def test_single_row_test_set(model):
    with pytest.raises(DataIntegrityError):
        EvaluateEngine().evaluate(model=model, frame=pd.DataFrame({"x": [1.0], "y": [2.0]}))


def test_missing_target(model):
    with pytest.raises(DataIntegrityError):
        EvaluateEngine().evaluate(model=model, frame=pd.DataFrame({"x": [1.0, 2.0]}))


def test_to_record_uses_method_value(model):
    frame = pd.DataFrame({"x": [0.0, 1.0, 2.0], "y": [1.0, 3.5, 4.0]})
    rec = EvaluateEngine().evaluate(model=model, frame=frame).to_record()

    assert rec["method"] == "ridge"
    assert rec["target"] == "y"
