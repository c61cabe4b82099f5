# weavefit/analysis/engines/tune_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from weavefit.analysis.engines.evaluate_engine import rmse
from weavefit.analysis.engines.registry import resolve_model_fit_engine
from weavefit.config.analysis_config import AnalysisConfig, ModelMethod
from weavefit.config.log_config import LogConfig
from weavefit.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)
from weavefit.pipeline.parallel.executor import ParallelExecutor
from weavefit.pipeline.parallel.types import ParallelKind
from weavefit.utils.errors import (
    ConfigurationError,
    NumericalInstabilityError,
    WeavefitError,
)
from weavefit.utils.logger import init_logging, logs


# -----------------------------------------------------------------------------
# Cell (λ × fold): small and picklable. The training frame and the
# analysis config reach each process once, through _CV_STATE.
# -----------------------------------------------------------------------------
_CV_STATE: dict = {}


def bind_cv_state(frame: pd.DataFrame, cfg: AnalysisConfig) -> None:
    _CV_STATE["frame"] = frame
    _CV_STATE["cfg"] = cfg


def init_cv_worker(
    frame: pd.DataFrame,
    cfg: AnalysisConfig,
    log_cfg: LogConfig | None = None,
) -> None:
    """Pool initializer: one copy of the frame per worker process."""
    if log_cfg is not None:
        init_logging(log_cfg)
    bind_cv_state(frame, cfg)


@dataclass(frozen=True)
class CVCellTask:
    method: ModelMethod
    target: str
    predictors: tuple[str, ...]
    penalty: float
    lambda_index: int
    fold_index: int
    holdout: np.ndarray


@dataclass(frozen=True)
class CVCellResult:
    lambda_index: int
    fold_index: int
    penalty: float
    rmse: Optional[float] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_cv_cell(task: CVCellTask) -> CVCellResult:
    """
    Fit on every fold but one, score RMSE on the held-out fold.

    Reads the training frame bound in _CV_STATE, writes only its own result.
    Fit failures come back as an error record so one bad λ never aborts
    the grid.
    """
    frame = _CV_STATE["frame"]
    mask = np.zeros(len(frame), dtype=bool)
    mask[task.holdout] = True

    fit_frame = frame.loc[~mask]
    holdout_frame = frame.loc[mask]

    engine = resolve_model_fit_engine(task.method, _CV_STATE["cfg"])
    try:
        model = engine.fit(
            frame=fit_frame,
            target=task.target,
            predictors=task.predictors,
            penalty=task.penalty,
        )
        score = rmse(
            holdout_frame[task.target].to_numpy(dtype=float),
            model.predict(holdout_frame),
        )
    except WeavefitError as e:
        return CVCellResult(
            lambda_index=task.lambda_index,
            fold_index=task.fold_index,
            penalty=task.penalty,
            error=str(e),
            error_kind=e.kind,
        )

    return CVCellResult(
        lambda_index=task.lambda_index,
        fold_index=task.fold_index,
        penalty=task.penalty,
        rmse=score,
    )


# -----------------------------------------------------------------------------
# Result
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TuneResult:
    """
    cv_table columns:
        penalty, mean_rmse, std_rmse, n_ok, n_failed, error
    one row per candidate, in grid order
    """

    method: ModelMethod
    target: str
    selected_lambda: float
    cv_rmse: float
    cv_table: pd.DataFrame

    @property
    def excluded(self) -> list[float]:
        return self.cv_table.loc[self.cv_table["n_failed"] > 0, "penalty"].tolist()


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------
class TuneEngine:
    """
    TuneEngine（FINAL / FROZEN）

    Algorithm:
    - for each λ, for each fold: fit on the other folds, RMSE on the fold
    - mean RMSE per λ over folds
    - a λ with ANY failed cell is excluded (warning)
    - argmin mean RMSE; exact ties → LARGEST λ
    - every λ excluded → NumericalInstabilityError

    Folds are supplied by the caller and shared by all candidates, so
    candidates are compared on identical resamples.
    """

    def __init__(
        self,
        cfg: AnalysisConfig | None = None,
        *,
        max_workers: int | None = 1,
        inst: Instrumentation | None = None,
        log_cfg: LogConfig | None = None,
    ):
        self.cfg = cfg if cfg is not None else AnalysisConfig()
        self.max_workers = max_workers
        self.inst = inst if inst is not None else NoOpInstrumentation()
        self.log_cfg = log_cfg

    # ------------------------------------------------------------------
    # Validation (setup time)
    # ------------------------------------------------------------------
    @staticmethod
    def validate_grid(candidate_lambdas: Sequence[float]) -> np.ndarray:
        grid = np.asarray(candidate_lambdas, dtype=float).ravel()
        if grid.size == 0:
            raise ConfigurationError("candidate lambda grid is empty")
        if not np.all(np.isfinite(grid)) or np.any(grid < 0):
            raise ConfigurationError(
                "candidate lambdas must be finite and >= 0"
            )
        return grid

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def tune(
        self,
        *,
        frame: pd.DataFrame,
        target: str,
        predictors: Sequence[str],
        method: ModelMethod,
        candidate_lambdas: Sequence[float],
        folds: Sequence[np.ndarray],
    ) -> TuneResult:
        method = ModelMethod(method)
        if not method.penalized:
            raise ConfigurationError(
                "OLS has no penalty to tune", method=method.value, target=target
            )
        grid = self.validate_grid(candidate_lambdas)
        if len(folds) < 2:
            raise ConfigurationError(
                f"need at least 2 folds, got {len(folds)}",
                method=method.value,
                target=target,
            )

        frame = frame.reset_index(drop=True)
        tasks = [
            CVCellTask(
                method=method,
                target=target,
                predictors=tuple(predictors),
                penalty=float(lam),
                lambda_index=i,
                fold_index=j,
                holdout=np.asarray(fold),
            )
            for i, lam in enumerate(grid)
            for j, fold in enumerate(folds)
        ]

        tag = f"{method.value}/{target}"
        self.inst.progress.start(f"tune {tag}", len(tasks), "cells")

        # barrier: every cell finishes before reduction
        bind_cv_state(frame, self.cfg)
        try:
            cells = ParallelExecutor.run(
                kind=ParallelKind.CV_CELL,
                items=tasks,
                handler=run_cv_cell,
                max_workers=self.max_workers,
                initializer=init_cv_worker,
                initargs=(frame, self.cfg, self.log_cfg),
            )
        finally:
            _CV_STATE.clear()

        self.inst.progress.done(f"tune {tag}")

        cv_table = self._reduce(grid, cells)

        for row in cv_table.itertuples():
            if row.n_failed > 0:
                logs.warning(
                    f"[TuneEngine] {tag} lambda={row.penalty:.6g} excluded: "
                    f"{row.n_failed}/{row.n_failed + row.n_ok} fold(s) failed "
                    f"({row.error})"
                )

        try:
            selected, best = self.select_lambda(cv_table)
        except NumericalInstabilityError as e:
            raise e.with_context(method=method.value, target=target)

        logs.info(
            f"[TuneEngine] {tag} selected lambda={selected:.6g} "
            f"cv_rmse={best:.6f} candidates={len(grid)} folds={len(folds)}"
        )

        return TuneResult(
            method=method,
            target=target,
            selected_lambda=selected,
            cv_rmse=best,
            cv_table=cv_table,
        )

    # ------------------------------------------------------------------
    # Reduction / selection
    # ------------------------------------------------------------------
    @staticmethod
    def _reduce(grid: np.ndarray, cells: list[CVCellResult]) -> pd.DataFrame:
        rows = []
        by_lambda: dict[int, list[CVCellResult]] = {i: [] for i in range(len(grid))}
        for cell in cells:
            by_lambda[cell.lambda_index].append(cell)

        for i, lam in enumerate(grid):
            group = sorted(by_lambda[i], key=lambda c: c.fold_index)
            scores = np.array([c.rmse for c in group if c.ok], dtype=float)
            errors = [c.error for c in group if not c.ok]
            rows.append(
                {
                    "penalty": float(lam),
                    "mean_rmse": float(scores.mean()) if scores.size else np.nan,
                    "std_rmse": float(scores.std(ddof=1)) if scores.size > 1 else np.nan,
                    "n_ok": int(scores.size),
                    "n_failed": len(errors),
                    "error": errors[0] if errors else None,
                }
            )

        return pd.DataFrame(rows)

    @staticmethod
    def select_lambda(cv_table: pd.DataFrame) -> tuple[float, float]:
        """
        Returns (selected_lambda, its mean CV RMSE).

        Only candidates with every fold scored compete. Among those with
        the exact minimum mean RMSE the largest λ wins.
        """
        valid = cv_table[(cv_table["n_failed"] == 0) & cv_table["mean_rmse"].notna()]
        if valid.empty:
            raise NumericalInstabilityError(
                "every lambda candidate failed during cross-validation"
            )

        best = valid["mean_rmse"].min()
        tied = valid[valid["mean_rmse"] == best]
        return float(tied["penalty"].max()), float(best)
