# weavefit/analysis/steps/report_persist_step.py
from __future__ import annotations

import json
from datetime import datetime, timezone

import pandas as pd

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.pipeline.step import PipelineStep
from weavefit.utils.filesystem import FileSystem


class ReportPersistStep(PipelineStep):
    """
    ReportPersistStep（FINAL / FROZEN）

    Writes under ctx.output_dir:
    - comparison.csv            numeric method × (target, metric)
    - comparison_formatted.csv  "RMSE | stdRMSE"
    - lambdas.csv               selected λ + CV RMSE
    - evaluations.csv / assumptions.csv / coefficients.csv / failures.csv
    - scaling.csv               per-target feature mean / std
    - summary.json

    Does NOT persist models.
    """

    stage = "report_persist"

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        report = ctx.report
        if report is None:
            raise RuntimeError("No ComparisonReport to persist")

        out_dir = FileSystem.ensure_dir(ctx.output_dir)

        frames = {
            "comparison": report.table,
            "comparison_formatted": report.formatted,
            "lambdas": report.lambdas,
        }
        for name, df in frames.items():
            path = out_dir / f"{name}.csv"
            df.to_csv(path)
            ctx.artifacts[name] = path

        long_frames = {
            "evaluations": report.evaluations,
            "failures": report.failures,
            "assumptions": pd.DataFrame([a.to_record() for a in ctx.assumptions]),
            "coefficients": self._coefficients(ctx),
            "scaling": self._scaling(ctx),
        }
        for name, df in long_frames.items():
            path = out_dir / f"{name}.csv"
            df.to_csv(path, index=False)
            ctx.artifacts[name] = path

        summary = {
            "run_id": ctx.run_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "seed": ctx.cfg.analysis.seed,
            "train_fraction": ctx.cfg.analysis.train_fraction,
            "n_folds": ctx.cfg.analysis.n_folds,
            "scaling_scope": ctx.cfg.analysis.scaling_scope,
            "predictors": list(ctx.schema.predictors),
            "targets": list(ctx.schema.targets),
            "split_seeds": {t: s.split_seed for t, s in ctx.targets.items()},
            "metrics": ctx.inst.metrics.snapshot(),
            **report.to_summary(),
        }
        summary_path = FileSystem.safe_write_text(
            out_dir / "summary.json",
            json.dumps(summary, indent=2, ensure_ascii=False),
        )
        ctx.artifacts["summary"] = summary_path

        logs.info(f"[ReportPersistStep] {len(ctx.artifacts)} artifact(s) in {out_dir}")
        return ctx

    @staticmethod
    def _coefficients(ctx: AnalysisContext) -> pd.DataFrame:
        rows = []
        for (method, target), model in ctx.models.items():
            rows.append(
                {"method": method, "target": target, "feature": "(Intercept)",
                 "coefficient": model.intercept, "penalty": model.penalty}
            )
            for feature, coef in model.coef_.items():
                rows.append(
                    {"method": method, "target": target, "feature": feature,
                     "coefficient": float(coef), "penalty": model.penalty}
                )
        return pd.DataFrame(rows, columns=["method", "target", "feature", "coefficient", "penalty"])

    @staticmethod
    def _scaling(ctx: AnalysisContext) -> pd.DataFrame:
        frames = []
        for target, state in ctx.targets.items():
            if state.scaling is None:
                continue
            df = state.scaling.to_frame().rename_axis("feature").reset_index()
            df.insert(0, "target", target)
            frames.append(df)
        if not frames:
            return pd.DataFrame(columns=["target", "feature", "mean", "std"])
        return pd.concat(frames, ignore_index=True)
