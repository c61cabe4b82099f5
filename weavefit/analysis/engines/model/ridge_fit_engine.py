# weavefit/analysis/engines/model/ridge_fit_engine.py
from __future__ import annotations

from sklearn.linear_model import Ridge

from weavefit.analysis.engines.model_fit_engine import ModelFitEngine
from weavefit.analysis.engines.model.ols_fit_engine import ols_solve
from weavefit.config.analysis_config import ModelMethod


class RidgeFitEngine(ModelFitEngine):
    """
    Ridge（FINAL）

    Objective:  ||y - Xb - b0||² + λ·||b||²   (intercept unpenalized)

    sklearn's Ridge uses exactly this objective, so alpha = λ.
    λ = 0 is the OLS solve.
    """

    method = ModelMethod.RIDGE

    def _solve(self, X, y, penalty):
        if penalty == 0:
            return ols_solve(X, y)

        model = Ridge(alpha=penalty, fit_intercept=True)
        model.fit(X, y)
        return model.coef_, float(model.intercept_)
