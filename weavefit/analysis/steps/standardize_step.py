from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.standardize_engine import StandardizeEngine
from weavefit.pipeline.step import PipelineStep


class StandardizeStep(PipelineStep):
    """
    StandardizeStep（FINAL / FROZEN）

    Reference frame (analysis.scaling_scope):
    - "full"  : ctx.data before splitting; params computed once per run
                and cached per predictor set
    - "train" : the target's training partition only

    The same params scale train AND test. Targets are never scaled.
    """

    stage = "standardize"

    def __init__(self, engine: StandardizeEngine | None = None, *, inst=None):
        super().__init__(inst)
        self.engine = engine if engine is not None else StandardizeEngine()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        state = ctx.current
        scope = ctx.cfg.analysis.scaling_scope
        features = tuple(state.predictors)

        if scope == "full":
            params = ctx.scaling_cache.get(features)
            if params is None:
                params = self.engine.fit(ctx.data, features)
                ctx.scaling_cache[features] = params
        else:
            params = self.engine.fit(state.train_frame, features)

        state.scaling = params
        state.train_frame = self.engine.transform(state.train_frame, params)
        state.test_frame = self.engine.transform(state.test_frame, params)

        logs.info(
            f"[StandardizeStep] target={state.target} scope={scope} "
            f"features={len(features)}"
        )
        return ctx
