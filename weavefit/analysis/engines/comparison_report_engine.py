# weavefit/analysis/engines/comparison_report_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd

from weavefit.analysis.engines.evaluate_engine import EvaluationResult
from weavefit.analysis.engines.tune_engine import TuneResult
from weavefit.config.analysis_config import ModelMethod

METRICS = ("rmse", "standardized_rmse", "r_squared")
FAILED = "FAILED"


@dataclass(frozen=True)
class ComparisonReport:
    """
    table       rows=method, columns=(target, metric), numeric
    formatted   rows=method, columns=target, "RMSE | stdRMSE" (3 dp)
    lambdas     rows=penalized method, columns=(target, selected_lambda|cv_rmse)
    evaluations long format, one row per EvaluationResult
    failures    one row per recorded failure
    """

    table: pd.DataFrame
    formatted: pd.DataFrame
    lambdas: pd.DataFrame
    evaluations: pd.DataFrame
    failures: pd.DataFrame

    def to_summary(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"results": {}, "lambdas": {}, "failures": []}

        for method, row in self.table.iterrows():
            out["results"][method] = {}
            for (target, metric), value in row.items():
                out["results"][method].setdefault(target, {})[metric] = _json_num(value)

        for method, row in self.lambdas.iterrows():
            out["lambdas"][method] = {}
            for (target, key), value in row.items():
                out["lambdas"][method].setdefault(target, {})[key] = _json_num(value)

        out["failures"] = [
            {k: _json_num(v) for k, v in rec.items()}
            for rec in self.failures.to_dict(orient="records")
        ]
        return out


def _json_num(value):
    if isinstance(value, (float, np.floating)):
        return None if not np.isfinite(value) else float(value)
    return value


def format_pair(rmse: float, standardized_rmse: float, decimals: int = 3) -> str:
    return f"{rmse:.{decimals}f} | {standardized_rmse:.{decimals}f}"


class ComparisonReportEngine:
    """
    ComparisonReportEngine（FINAL / FROZEN）

    Responsibility:
    - group evaluation results by method × target
    - expose structured numeric tables + one formatted view

    Contract:
    - row order follows `methods`, column order follows `targets`
    - a (method, target) without evaluation is NaN in numeric tables and
      "FAILED" in the formatted table
    - pure, no I/O
    """

    def __init__(self, decimals: int = 3):
        self.decimals = decimals

    def build(
        self,
        *,
        evaluations: Sequence[EvaluationResult],
        tunings: Mapping[Tuple[str, str], TuneResult],
        failures: Sequence[Any] = (),
        methods: Sequence[ModelMethod],
        targets: Sequence[str],
    ) -> ComparisonReport:
        methods = [ModelMethod(m) for m in methods]
        labels = [m.label for m in methods]
        by_key = {(e.method, e.target): e for e in evaluations}

        # --------------------------------------------------
        # Numeric comparison table
        # --------------------------------------------------
        columns = pd.MultiIndex.from_product([list(targets), list(METRICS)], names=["target", "metric"])
        table = pd.DataFrame(np.nan, index=labels, columns=columns, dtype=float)
        table.index.name = "method"

        formatted = pd.DataFrame(FAILED, index=labels, columns=list(targets), dtype=object)
        formatted.index.name = "method"

        for method in methods:
            for target in targets:
                res = by_key.get((method, target))
                if res is None:
                    continue
                for metric in METRICS:
                    table.loc[method.label, (target, metric)] = getattr(res, metric)
                formatted.loc[method.label, target] = format_pair(
                    res.rmse, res.standardized_rmse, self.decimals
                )

        # --------------------------------------------------
        # Selected λ (penalized methods only)
        # --------------------------------------------------
        penalized = [m for m in methods if m.penalized]
        lam_columns = pd.MultiIndex.from_product(
            [list(targets), ["selected_lambda", "cv_rmse"]], names=["target", "metric"]
        )
        lambdas = pd.DataFrame(
            np.nan, index=[m.label for m in penalized], columns=lam_columns, dtype=float
        )
        lambdas.index.name = "method"

        for method in penalized:
            for target in targets:
                tune = tunings.get((method.value, target))
                if tune is None:
                    continue
                lambdas.loc[method.label, (target, "selected_lambda")] = tune.selected_lambda
                lambdas.loc[method.label, (target, "cv_rmse")] = tune.cv_rmse

        # --------------------------------------------------
        # Long formats
        # --------------------------------------------------
        evaluations_df = pd.DataFrame(
            [e.to_record() for e in evaluations],
            columns=["method", "target", "rmse", "standardized_rmse", "r_squared", "n_test", "penalty"],
        )
        failures_df = pd.DataFrame(
            [f.to_record() for f in failures],
            columns=["method", "target", "kind", "message", "penalty", "stage"],
        )

        return ComparisonReport(
            table=table,
            formatted=formatted,
            lambdas=lambdas,
            evaluations=evaluations_df,
            failures=failures_df,
        )
