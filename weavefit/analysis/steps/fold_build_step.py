from __future__ import annotations

import numpy as np

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.split_engine import SplitEngine
from weavefit.pipeline.step import PipelineStep


class FoldBuildStep(PipelineStep):
    """
    FoldBuildStep（FINAL / FROZEN）

    - k folds over positions of ctx.current.train_frame (test rows never
      enter)
    - built ONCE per target; every λ of every penalized method reuses them
    - skipped when no configured method needs tuning
    """

    stage = "fold_build"

    def __init__(self, engine: SplitEngine | None = None, *, inst=None):
        super().__init__(inst)
        self.engine = engine if engine is not None else SplitEngine()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        cfg = ctx.cfg.analysis
        state = ctx.current

        if not any(m.penalized for m in cfg.methods):
            return ctx

        state.folds = self.engine.kfold(
            np.arange(len(state.train_frame)),
            cfg.n_folds,
            state.fold_seed,
        )

        logs.info(
            f"[FoldBuildStep] target={state.target} k={cfg.n_folds} "
            f"sizes={[len(f) for f in state.folds]}"
        )
        return ctx
