#!filepath: tests/analysis/engines/test_model_fit_engine.py
import warnings

import numpy as np
import pytest
from sklearn.exceptions import ConvergenceWarning

from weavefit.analysis.engines.registry import resolve_model_fit_engine
from weavefit.analysis.engines.standardize_engine import StandardizeEngine
from weavefit.config.analysis_config import AnalysisConfig, ModelMethod
from weavefit.utils.errors import (
    ConfigurationError,
    DataIntegrityError,
    NumericalInstabilityError,
)

TARGET = "Total_Pdn_yds"


@pytest.fixture
def scaled(weaving_frame, predictors):
    frame, _ = StandardizeEngine().fit_transform(weaving_frame, predictors)
    return frame


def test_ols_recovers_true_coefficients(weaving_frame, predictors, true_coef):
    model = resolve_model_fit_engine("ols").fit(
        frame=weaving_frame, target=TARGET, predictors=predictors
    )

    assert model.method is ModelMethod.OLS
    assert model.penalty is None
    assert np.allclose(model.coefficients, true_coef, atol=0.1)
    assert abs(model.intercept - 10.0) < 1.0


def test_ridge_norm_shrinks_with_lambda(scaled, predictors):
    engine = resolve_model_fit_engine(ModelMethod.RIDGE)
    norms = [
        engine.fit(frame=scaled, target=TARGET, predictors=predictors, penalty=lam).l2_norm
        for lam in [0.01, 1.0, 100.0, 1e4, 1e6]
    ]

    assert all(a > b for a, b in zip(norms, norms[1:]))


def test_lasso_large_lambda_zeros_everything(scaled, predictors):
    model = resolve_model_fit_engine(ModelMethod.LASSO).fit(
        frame=scaled, target=TARGET, predictors=predictors, penalty=1e6
    )

    assert model.n_nonzero == 0
    # intercept is unpenalized: mean of the target
    assert model.intercept == pytest.approx(scaled[TARGET].mean())


def test_lasso_sets_irrelevant_predictors_to_zero(scaled, predictors, true_coef):
    model = resolve_model_fit_engine(ModelMethod.LASSO).fit(
        frame=scaled, target=TARGET, predictors=predictors, penalty=200.0
    )

    coef = model.coef_
    for name, beta in zip(predictors, true_coef):
        if beta == 0.0:
            assert coef[name] == 0.0
        elif abs(beta) >= 1.0:
            assert coef[name] != 0.0


@pytest.mark.parametrize("method", [ModelMethod.RIDGE, ModelMethod.LASSO])
def test_zero_penalty_equals_ols(scaled, predictors, method):
    ols = resolve_model_fit_engine(ModelMethod.OLS).fit(
        frame=scaled, target=TARGET, predictors=predictors
    )
    pen = resolve_model_fit_engine(method).fit(
        frame=scaled, target=TARGET, predictors=predictors, penalty=0.0
    )

    assert np.allclose(pen.coefficients, ols.coefficients)
    assert pen.intercept == pytest.approx(ols.intercept)
    assert pen.penalty == 0.0


def test_ols_rank_deficient_raises(weaving_frame, predictors):
    frame = weaving_frame.copy()
    frame["EPI_copy"] = frame["EPI"] * 2.0

    with pytest.raises(NumericalInstabilityError) as ei:
        resolve_model_fit_engine("ols").fit(
            frame=frame, target=TARGET, predictors=[*predictors, "EPI_copy"]
        )

    assert ei.value.method == "ols"
    assert ei.value.target == TARGET


def test_ridge_handles_collinearity(weaving_frame, predictors):
    frame = weaving_frame.copy()
    frame["EPI_copy"] = frame["EPI"] * 2.0

    model = resolve_model_fit_engine("ridge").fit(
        frame=frame, target=TARGET, predictors=[*predictors, "EPI_copy"], penalty=1.0
    )
    assert np.all(np.isfinite(model.coefficients))


def test_ols_needs_more_rows_than_coefficients(weaving_frame, predictors):
    with pytest.raises(NumericalInstabilityError):
        resolve_model_fit_engine("ols").fit(
            frame=weaving_frame.head(5), target=TARGET, predictors=predictors
        )


class _NeverConverges:
    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def fit(self, X, y):
        warnings.warn("Objective did not converge", ConvergenceWarning)
        self.coef_ = np.zeros(X.shape[1])
        self.intercept_ = 0.0
        return self


def test_lasso_non_convergence_is_reported(scaled, predictors, monkeypatch):
    import weavefit.analysis.engines.model.lasso_fit_engine as lasso_mod

    monkeypatch.setattr(lasso_mod, "Lasso", _NeverConverges)

    engine = resolve_model_fit_engine("lasso", AnalysisConfig(lasso_max_iter=5))
    with pytest.raises(NumericalInstabilityError) as ei:
        engine.fit(frame=scaled, target=TARGET, predictors=predictors, penalty=0.01)

    assert ei.value.penalty == 0.01
    assert ei.value.method == "lasso"
    assert "max_iter=5" in ei.value.message


def test_lasso_alpha_scales_with_rows(scaled, predictors, monkeypatch):
    import weavefit.analysis.engines.model.lasso_fit_engine as lasso_mod

    seen = {}

    class _Capture(_NeverConverges):
        def fit(self, X, y):
            seen.update(self.kwargs)
            self.coef_ = np.zeros(X.shape[1])
            self.intercept_ = 0.0
            return self

    monkeypatch.setattr(lasso_mod, "Lasso", _Capture)
    resolve_model_fit_engine("lasso").fit(
        frame=scaled, target=TARGET, predictors=predictors, penalty=50.0
    )

    assert seen["alpha"] == pytest.approx(50.0 / (2 * len(scaled)))


def test_penalty_contract(scaled, predictors):
    with pytest.raises(ConfigurationError):
        resolve_model_fit_engine("ols").fit(
            frame=scaled, target=TARGET, predictors=predictors, penalty=1.0
        )
    with pytest.raises(ConfigurationError):
        resolve_model_fit_engine("ridge").fit(
            frame=scaled, target=TARGET, predictors=predictors
        )
    with pytest.raises(ConfigurationError):
        resolve_model_fit_engine("lasso").fit(
            frame=scaled, target=TARGET, predictors=predictors, penalty=-1.0
        )


def test_target_cannot_be_its_own_predictor(scaled, predictors):
    with pytest.raises(ConfigurationError):
        resolve_model_fit_engine("ols").fit(
            frame=scaled, target=TARGET, predictors=[*predictors, TARGET]
        )


def test_nan_in_training_frame(scaled, predictors):
    frame = scaled.copy()
    frame.loc[3, "PPI"] = np.nan

    with pytest.raises(DataIntegrityError):
        resolve_model_fit_engine("ols").fit(frame=frame, target=TARGET, predictors=predictors)


def test_predict_requires_fitted_features(scaled, predictors):
    model = resolve_model_fit_engine("ols").fit(
        frame=scaled, target=TARGET, predictors=predictors
    )

    with pytest.raises(DataIntegrityError):
        model.predict(scaled.drop(columns=["EPI"]))


def test_fitted_model_is_immutable(scaled, predictors):
    model = resolve_model_fit_engine("ols").fit(
        frame=scaled, target=TARGET, predictors=predictors
    )

    with pytest.raises(ValueError):
        model.coefficients[0] = 1.0


def test_unknown_method():
    with pytest.raises(ConfigurationError, match="Available"):
        resolve_model_fit_engine("elasticnet")
