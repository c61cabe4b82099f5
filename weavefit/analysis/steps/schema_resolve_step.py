from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.dataset_load_engine import DatasetLoadEngine
from weavefit.analysis.schema import FeatureSchema
from weavefit.pipeline.step import PipelineStep


class SchemaResolveStep(PipelineStep):
    """
    SchemaResolveStep（FINAL / FROZEN）

    Responsibility:
    - enumerate column roles from cfg.data against ctx.data
    - attach an immutable FeatureSchema to context
    - coerce / validate every schema column (numeric, complete)
    """

    stage = "schema_resolve"

    def __init__(self, engine: DatasetLoadEngine | None = None, *, inst=None):
        super().__init__(inst)
        self.engine = engine if engine is not None else DatasetLoadEngine()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        cfg = ctx.cfg.data

        schema = FeatureSchema.resolve(
            ctx.data,
            targets=cfg.targets,
            predictors=cfg.predictors,
            excluded=cfg.excluded,
        )
        ctx.data = self.engine.require(ctx.data, schema.columns)
        ctx.schema = schema

        logs.info(
            "[SchemaResolveStep] "
            f"predictors={list(schema.predictors)} "
            f"targets={list(schema.targets)} "
            f"excluded={list(schema.excluded)}"
        )
        return ctx
