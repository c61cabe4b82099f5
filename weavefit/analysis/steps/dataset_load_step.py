# weavefit/analysis/steps/dataset_load_step.py
from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.dataset_load_engine import DatasetLoadEngine
from weavefit.pipeline.step import PipelineStep
from weavefit.utils.path import PathManager


class DatasetLoadStep(PipelineStep):
    """
    DatasetLoadStep（FINAL / FROZEN）

    Contract:
    - reads cfg.data.path (relative paths resolve via PathManager.root())
    - produces ctx.data with normalized column names

    Forbidden:
    - cleaning beyond name normalization / rename
    """

    stage = "dataset_load"

    def __init__(self, engine: DatasetLoadEngine | None = None, *, inst=None):
        super().__init__(inst)
        self.engine = engine if engine is not None else DatasetLoadEngine()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        cfg = ctx.cfg.data
        path = PathManager.resolve(cfg.path)

        with self.inst.timer("dataset_load"):
            ctx.data = self.engine.load(path, rename=cfg.rename)

        logs.info(
            f"[DatasetLoadStep] loaded {path} "
            f"rows={len(ctx.data)} cols={len(ctx.data.columns)}"
        )
        return ctx
