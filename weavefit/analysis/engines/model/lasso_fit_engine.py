# weavefit/analysis/engines/model/lasso_fit_engine.py
from __future__ import annotations

import warnings

from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import Lasso

from weavefit.analysis.engines.model_fit_engine import ModelFitEngine
from weavefit.analysis.engines.model.ols_fit_engine import ols_solve
from weavefit.config.analysis_config import ModelMethod
from weavefit.utils.errors import NumericalInstabilityError


class LassoFitEngine(ModelFitEngine):
    """
    LASSO（FINAL）

    Objective:  ||y - Xb - b0||² + λ·||b||₁   (intercept unpenalized)

    sklearn's Lasso minimizes (1 / 2n)·||y - Xb - b0||² + alpha·||b||₁,
    the same minimizer when alpha = λ / (2n).
    λ = 0 is the OLS solve.
    Coordinate descent that does not converge within lasso_max_iter is a
    NumericalInstabilityError, never a silently returned estimate.
    """

    method = ModelMethod.LASSO

    def _solve(self, X, y, penalty):
        if penalty == 0:
            return ols_solve(X, y)

        alpha = penalty / (2.0 * X.shape[0])
        model = Lasso(
            alpha=alpha,
            fit_intercept=True,
            max_iter=self.cfg.lasso_max_iter,
        )

        with warnings.catch_warnings():
            warnings.simplefilter("error", ConvergenceWarning)
            try:
                model.fit(X, y)
            except ConvergenceWarning as w:
                raise NumericalInstabilityError(
                    f"coordinate descent did not converge "
                    f"(max_iter={self.cfg.lasso_max_iter}): {w}"
                ) from w

        return model.coef_, float(model.intercept_)
