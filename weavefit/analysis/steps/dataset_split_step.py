from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.split_engine import SplitEngine
from weavefit.pipeline.step import PipelineStep

# derive_seed purpose keys
SPLIT_KEY = 0
FOLD_KEY = 1


class DatasetSplitStep(PipelineStep):
    """
    DatasetSplitStep（FINAL / FROZEN）

    Semantics:
    - one train/test split PER TARGET, seeded by
      derive_seed(run_seed, target_index, SPLIT_KEY)
    - Production and Rejection therefore see different partitions
      (targets are modeled independently)
    - every method of the target shares this split
    - splits the UNSCALED table; StandardizeStep runs afterwards
    """

    stage = "dataset_split"

    def __init__(self, engine: SplitEngine | None = None, *, inst=None):
        super().__init__(inst)
        self.engine = engine if engine is not None else SplitEngine()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        cfg = ctx.cfg.analysis
        state = ctx.current

        state.split_seed = SplitEngine.derive_seed(cfg.seed, state.index, SPLIT_KEY)
        state.fold_seed = SplitEngine.derive_seed(cfg.seed, state.index, FOLD_KEY)

        view = ctx.data[[*state.predictors, state.target]]
        state.split = self.engine.split(view, cfg.train_fraction, state.split_seed)
        state.train_frame, state.test_frame = state.split.take(view)

        logs.info(
            f"[DatasetSplitStep] target={state.target} "
            f"seed={state.split_seed} "
            f"train={len(state.split.train)} test={len(state.split.test)}"
        )
        return ctx
