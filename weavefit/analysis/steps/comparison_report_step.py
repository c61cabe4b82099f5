# weavefit/analysis/steps/comparison_report_step.py
from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.comparison_report_engine import ComparisonReportEngine
from weavefit.pipeline.step import PipelineStep


class ComparisonReportStep(PipelineStep):
    """
    ComparisonReportStep（FINAL）

    Contract:
    - consumes ctx.evaluations / ctx.tunings / ctx.failures
    - produces ctx.report (structured, not pre-rendered)
    """

    stage = "comparison_report"

    def __init__(self, engine: ComparisonReportEngine | None = None, *, inst=None):
        super().__init__(inst)
        self.engine = engine if engine is not None else ComparisonReportEngine()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        ctx.report = self.engine.build(
            evaluations=ctx.evaluations,
            tunings=ctx.tunings,
            failures=ctx.failures,
            methods=ctx.cfg.analysis.methods,
            targets=list(ctx.schema.targets),
        )

        logs.info(
            "[ComparisonReport] RMSE | standardized RMSE\n"
            f"{ctx.report.formatted.to_string()}"
        )
        if not ctx.report.lambdas.empty:
            logs.info(f"[ComparisonReport] selected lambda\n{ctx.report.lambdas.to_string()}")
        nonzero = self.inst.metrics.with_prefix("nonzero")
        if nonzero:
            logs.info(f"[ComparisonReport] nonzero coefficients {nonzero}")
        if ctx.failures:
            logs.warning(f"[ComparisonReport] {len(ctx.failures)} failure(s) recorded")

        return ctx
