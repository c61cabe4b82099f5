# weavefit/analysis/steps/cv_curve_report_step.py
from __future__ import annotations

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.pipeline.step import PipelineStep
from weavefit.utils.filesystem import FileSystem


class CVCurveReportStep(PipelineStep):
    """
    CVCurveReportStep（FINAL）

    Outputs per tuned (method, target):
    - cv_<method>_<target>.csv
    - cv_<method>_<target>.png   (mean CV RMSE ± 1 sd vs log10 λ)

    Contract:
    - consumes ctx.tunings
    - excluded λ are dropped from the curve, kept in the csv
    """

    stage = "cv_curve_report"

    def __init__(self, *, plots: bool = True, inst=None):
        super().__init__(inst)
        self.plots = plots

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        if not ctx.tunings:
            logs.warning("[CVCurveReport] no tuning results, skipped")
            return ctx

        out_dir = FileSystem.ensure_dir(ctx.output_dir / "cv")

        for (method, target), tune in ctx.tunings.items():
            stem = f"cv_{method}_{target}"

            csv_path = out_dir / f"{stem}.csv"
            tune.cv_table.to_csv(csv_path, index=False)
            ctx.artifacts[stem] = csv_path
            logs.info(f"[CVCurveReport] saved {csv_path}")

            if not self.plots:
                continue

            df = tune.cv_table[tune.cv_table["n_failed"] == 0]
            x = np.log10(df["penalty"].clip(lower=np.finfo(float).tiny))
            mean = df["mean_rmse"]
            sd = df["std_rmse"].fillna(0.0)

            fig = plt.figure(figsize=(8, 4))
            plt.plot(x, mean, marker="o", markersize=3, linewidth=1)
            plt.fill_between(x, mean - sd, mean + sd, alpha=0.25, label="±1 Std")
            plt.axvline(
                np.log10(max(tune.selected_lambda, np.finfo(float).tiny)),
                linestyle="--",
                linewidth=1,
                label=f"selected λ={tune.selected_lambda:.3g}",
            )
            plt.title(f"{tune.method.label} CV RMSE: {target}")
            plt.xlabel("log10(λ)")
            plt.ylabel("CV RMSE")
            plt.legend()
            plt.grid(True)
            plt.tight_layout()

            png_path = out_dir / f"{stem}.png"
            fig.savefig(png_path)
            plt.close(fig)
            ctx.artifacts[f"{stem}_png"] = png_path
            logs.info(f"[CVCurveReport] saved {png_path}")

        return ctx
