# weavefit/analysis/engines/model/ols_fit_engine.py
from __future__ import annotations

import numpy as np
from sklearn.linear_model import LinearRegression

from weavefit.analysis.engines.model_fit_engine import ModelFitEngine
from weavefit.config.analysis_config import ModelMethod
from weavefit.utils.errors import ConfigurationError, NumericalInstabilityError


def ols_solve(X: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, float]:
    """
    Unpenalized least squares with intercept.

    Rank is checked on the centered design: a rank-deficient predictor
    matrix has no unique solution and is reported, not silently solved
    by the pseudo-inverse.
    """
    n, p = X.shape
    if n <= p:
        raise NumericalInstabilityError(
            f"{n} rows cannot identify {p} coefficients + intercept"
        )

    rank = np.linalg.matrix_rank(X - X.mean(axis=0))
    if rank < p:
        raise NumericalInstabilityError(
            f"rank-deficient predictor matrix (rank={rank} < {p})"
        )

    model = LinearRegression(fit_intercept=True)
    model.fit(X, y)
    return model.coef_, float(model.intercept_)


class OLSFitEngine(ModelFitEngine):
    """
    Ordinary least squares（FINAL）
    """

    method = ModelMethod.OLS

    def _check_penalty(self, penalty: float | None, target: str) -> None:
        if penalty not in (None, 0, 0.0):
            raise ConfigurationError(
                f"OLS takes no penalty, got {penalty}",
                method=self.method.value,
                target=target,
                penalty=penalty,
            )

    def _solve(self, X, y, penalty):
        return ols_solve(X, y)
