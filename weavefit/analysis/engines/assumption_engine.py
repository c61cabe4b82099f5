# weavefit/analysis/engines/assumption_engine.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional

import numpy as np
from scipy import stats


@dataclass(frozen=True)
class AssumptionResult:
    kind: Literal["target", "residual"]
    target: str
    method: Optional[str]
    n: int
    mean: float
    std: float
    skewness: float
    kurtosis: float
    shapiro_stat: float
    shapiro_p: float
    normal: bool

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)


class AssumptionCheckEngine:
    """
    AssumptionCheckEngine（FINAL / FROZEN）

    Responsibility:
    - distributional summary of a target column or of model residuals
    - Shapiro-Wilk normality test at level alpha

    Contract:
    - kurtosis is EXCESS kurtosis (normal → 0)
    - fewer than 3 finite values → test statistics are NaN and
      normal=False
    - pure, no side effects
    """

    def __init__(self, alpha: float = 0.05):
        self.alpha = alpha

    def check(
        self,
        values,
        *,
        kind: Literal["target", "residual"],
        target: str,
        method: Optional[str] = None,
    ) -> AssumptionResult:
        x = np.asarray(values, dtype=float)
        x = x[np.isfinite(x)]
        n = int(x.size)

        if n < 3:
            nan = float("nan")
            return AssumptionResult(
                kind=kind,
                target=target,
                method=method,
                n=n,
                mean=float(x.mean()) if n else nan,
                std=float(x.std(ddof=1)) if n > 1 else nan,
                skewness=nan,
                kurtosis=nan,
                shapiro_stat=nan,
                shapiro_p=nan,
                normal=False,
            )

        w, p = stats.shapiro(x)

        return AssumptionResult(
            kind=kind,
            target=target,
            method=method,
            n=n,
            mean=float(x.mean()),
            std=float(x.std(ddof=1)),
            skewness=float(stats.skew(x)),
            kurtosis=float(stats.kurtosis(x, fisher=True)),
            shapiro_stat=float(w),
            shapiro_p=float(p),
            normal=bool(p >= self.alpha),
        )
