from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from weavefit.config.analysis_config import AnalysisConfig, ModelMethod
from weavefit.utils.errors import (
    ConfigurationError,
    DataIntegrityError,
    NumericalInstabilityError,
)


@dataclass(frozen=True)
class FittedModel:
    """
    FittedModel（FINAL / FROZEN）

    Semantics:
    - one (method, target) fit, immutable once built
    - predicts from any frame carrying the same predictor columns
    """

    method: ModelMethod
    target: str
    feature_names: tuple[str, ...]
    coefficients: np.ndarray
    intercept: float
    penalty: Optional[float] = None

    def __post_init__(self):
        coef = np.array(self.coefficients, dtype=float)
        coef.setflags(write=False)
        object.__setattr__(self, "coefficients", coef)

    @property
    def coef_(self) -> pd.Series:
        return pd.Series(self.coefficients, index=list(self.feature_names), name=self.target)

    @property
    def l2_norm(self) -> float:
        return float(np.linalg.norm(self.coefficients))

    @property
    def n_nonzero(self) -> int:
        return int(np.count_nonzero(self.coefficients))

    def predict(self, frame: pd.DataFrame) -> np.ndarray:
        missing = [c for c in self.feature_names if c not in frame.columns]
        if missing:
            raise DataIntegrityError(
                f"predict-time frame lacks fitted feature(s) {missing}",
                method=self.method.value,
                target=self.target,
                penalty=self.penalty,
            )
        X = frame[list(self.feature_names)].to_numpy(dtype=float)
        return X @ self.coefficients + self.intercept


class ModelFitEngine(ABC):
    """
    Abstract ModelFitEngine (FINAL)

    Template:
        fit() → design matrix checks → _solve() → finite-result check

    Subclasses only implement _solve(); penalty semantics are per method.
    """

    method: ModelMethod

    def __init__(self, cfg: AnalysisConfig | None = None):
        self.cfg = cfg if cfg is not None else AnalysisConfig()

    def fit(
        self,
        *,
        frame: pd.DataFrame,
        target: str,
        predictors: Sequence[str],
        penalty: float | None = None,
    ) -> FittedModel:
        predictors = list(predictors)
        if target in predictors:
            raise ConfigurationError(
                f"target '{target}' listed among its own predictors",
                method=self.method.value,
                target=target,
            )

        X, y = self._design(frame, target, predictors)
        self._check_penalty(penalty, target)

        try:
            coef, intercept = self._solve(X, y, penalty)
        except NumericalInstabilityError as e:
            raise e.with_context(
                method=self.method.value,
                target=target,
                penalty=penalty,
            )
        except np.linalg.LinAlgError as e:
            raise NumericalInstabilityError(
                f"linear solve failed: {e}",
                method=self.method.value,
                target=target,
                penalty=penalty,
            ) from e

        coef = np.asarray(coef, dtype=float).ravel()
        if not (np.all(np.isfinite(coef)) and np.isfinite(intercept)):
            raise NumericalInstabilityError(
                "non-finite coefficients",
                method=self.method.value,
                target=target,
                penalty=penalty,
            )

        return FittedModel(
            method=self.method,
            target=target,
            feature_names=tuple(predictors),
            coefficients=coef,
            intercept=float(intercept),
            penalty=penalty if self.method.penalized else None,
        )

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _solve(
        self,
        X: np.ndarray,
        y: np.ndarray,
        penalty: float | None,
    ) -> tuple[np.ndarray, float]:
        """
        Returns (coefficients, intercept)
        """
        raise NotImplementedError

    def _check_penalty(self, penalty: float | None, target: str) -> None:
        if penalty is None:
            raise ConfigurationError(
                "penalty is required",
                method=self.method.value,
                target=target,
            )
        if not np.isfinite(penalty) or penalty < 0:
            raise ConfigurationError(
                f"penalty must be a finite value >= 0, got {penalty}",
                method=self.method.value,
                target=target,
                penalty=penalty,
            )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _design(
        self,
        frame: pd.DataFrame,
        target: str,
        predictors: list[str],
    ) -> tuple[np.ndarray, np.ndarray]:
        missing = [c for c in [*predictors, target] if c not in frame.columns]
        if missing:
            raise DataIntegrityError(
                f"training frame lacks column(s) {missing}",
                method=self.method.value,
                target=target,
            )

        X = frame[predictors].to_numpy(dtype=float)
        y = frame[target].to_numpy(dtype=float)

        if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
            raise DataIntegrityError(
                "training frame contains NaN / inf",
                method=self.method.value,
                target=target,
            )

        return X, y
