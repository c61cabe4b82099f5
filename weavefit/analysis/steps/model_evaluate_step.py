# weavefit/analysis/steps/model_evaluate_step.py
from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.evaluate_engine import EvaluateEngine
from weavefit.pipeline.step import PipelineStep
from weavefit.utils.errors import WeavefitError


class ModelEvaluateStep(PipelineStep):
    """
    ModelEvaluateStep（FINAL / FROZEN）

    Responsibility:
    - held-out evaluation of every model fitted for ctx.current
    - appends EvaluationResult to ctx.evaluations
    - does NOT modify models
    """

    stage = "model_evaluate"

    def __init__(self, engine: EvaluateEngine | None = None, *, inst=None):
        super().__init__(inst)
        self.engine = engine if engine is not None else EvaluateEngine()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        state = ctx.current

        for (method, target), model in ctx.models.items():
            if target != state.target:
                continue

            try:
                res = self.engine.evaluate(model=model, frame=state.test_frame)
            except WeavefitError as e:
                e.with_context(method=method, target=target)
                ctx.record_failure(e, stage=self.stage)
                logs.error(f"[ModelEvaluateStep] {e}")
                continue

            ctx.evaluations.append(res)
            self.inst.metrics.record(f"std_rmse@{method}/{target}", round(res.standardized_rmse, 6))

            logs.info(
                f"[ModelEvaluateStep] {res.method.label}/{target} "
                f"rmse={res.rmse:.6f} std_rmse={res.standardized_rmse:.6f} "
                f"r2={res.r_squared:.6f} n_test={res.n_test}"
            )

        return ctx
