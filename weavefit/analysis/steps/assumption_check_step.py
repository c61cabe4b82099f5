# weavefit/analysis/steps/assumption_check_step.py
from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.assumption_engine import AssumptionCheckEngine
from weavefit.pipeline.step import PipelineStep


def _log_result(prefix: str, res) -> None:
    logs.info(
        f"[{prefix}] {res.kind} target={res.target} method={res.method} "
        f"n={res.n} skew={res.skewness:.3f} kurt={res.kurtosis:.3f} "
        f"shapiro_p={res.shapiro_p:.4g} normal={res.normal}"
    )


class TargetAssumptionStep(PipelineStep):
    """
    TargetAssumptionStep（FINAL）

    Distribution of every target column over the full table.
    Diagnostic only: a non-normal target is logged, never fatal.
    """

    stage = "target_assumption"

    def __init__(self, engine: AssumptionCheckEngine, *, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        for target in ctx.schema.targets:
            res = self.engine.check(ctx.data[target], kind="target", target=target)
            ctx.assumptions.append(res)
            _log_result(self.step_name, res)
        return ctx


class ResidualCheckStep(PipelineStep):
    """
    ResidualCheckStep（FINAL）

    Test-set residuals (y - ŷ) of every model fitted for ctx.current.
    """

    stage = "residual_check"

    def __init__(self, engine: AssumptionCheckEngine, *, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        state = ctx.current
        test = state.test_frame

        for (method, target), model in ctx.models.items():
            if target != state.target:
                continue
            residuals = test[target].to_numpy(dtype=float) - model.predict(test)
            res = self.engine.check(
                residuals, kind="residual", target=target, method=method
            )
            ctx.assumptions.append(res)
            _log_result(self.step_name, res)

        return ctx
