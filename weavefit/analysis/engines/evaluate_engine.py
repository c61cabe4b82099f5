# weavefit/analysis/engines/evaluate_engine.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import mean_squared_error, r2_score

from weavefit.analysis.engines.model_fit_engine import FittedModel
from weavefit.config.analysis_config import ModelMethod
from weavefit.utils.errors import DataIntegrityError


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


@dataclass(frozen=True)
class EvaluationResult:
    method: ModelMethod
    target: str
    rmse: float
    standardized_rmse: float
    r_squared: float
    n_test: int
    penalty: Optional[float] = None

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        record["method"] = self.method.value
        return record


class EvaluateEngine:
    """
    EvaluateEngine（FINAL / FROZEN）

    Responsibility:
    - held-out accuracy of one fitted model
    - return a pure result record (no side effects)

    Definitions (frozen):
    - rmse              = sqrt(mean((y - ŷ)²))
    - standardized_rmse = rmse / sd(y_test), sd with ddof=1
    - r_squared         = 1 - SSR / SST on the test set
    """

    def evaluate(
        self,
        *,
        model: FittedModel,
        frame: pd.DataFrame,
    ) -> EvaluationResult:
        target = model.target
        context = dict(method=model.method.value, target=target, penalty=model.penalty)

        if target not in frame.columns:
            raise DataIntegrityError(f"test frame lacks target '{target}'", **context)

        y_true = frame[target].to_numpy(dtype=float)
        if len(y_true) < 2:
            raise DataIntegrityError(
                f"test set has {len(y_true)} row(s); need at least 2", **context
            )

        sd = float(np.std(y_true, ddof=1))
        if not np.isfinite(sd) or sd == 0.0:
            raise DataIntegrityError(
                "test target has zero standard deviation; "
                "standardized RMSE is undefined",
                **context,
            )

        y_pred = model.predict(frame)
        err = rmse(y_true, y_pred)

        return EvaluationResult(
            method=model.method,
            target=target,
            rmse=err,
            standardized_rmse=err / sd,
            r_squared=float(r2_score(y_true, y_pred)),
            n_test=len(y_true),
            penalty=model.penalty,
        )
