"""
Model Fit Engines (FINAL / FROZEN)

Concrete ModelFitEngine implementations, one file per method.

- OLS   : unpenalized least squares, rank-checked
- Ridge : L2 penalty, alpha = λ
- LASSO : L1 penalty, alpha = λ / (2n)

Do NOT import these engines directly outside the registry and tests.
"""

from .lasso_fit_engine import LassoFitEngine
from .ols_fit_engine import OLSFitEngine
from .ridge_fit_engine import RidgeFitEngine

__all__ = [
    "LassoFitEngine",
    "OLSFitEngine",
    "RidgeFitEngine",
]
