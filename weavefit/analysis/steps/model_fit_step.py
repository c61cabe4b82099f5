# weavefit/analysis/steps/model_fit_step.py
from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.registry import resolve_model_fit_engine
from weavefit.analysis.engines.tune_engine import TuneEngine
from weavefit.pipeline.step import PipelineStep
from weavefit.utils.errors import WeavefitError


class ModelFitStep(PipelineStep):
    """
    ModelFitStep（FINAL / FROZEN）

    Contract:
    - consumes ctx.current.train_frame / folds
    - for every configured method:
        penalized → TuneEngine selects λ on the shared folds, then refit
                    on the whole training partition with that λ
        OLS       → single fit
    - produces ctx.models[(method, target)] and ctx.tunings[...]
    - a failing method is recorded in ctx.failures; siblings continue
    """

    stage = "model_fit"

    def __init__(self, tune_engine: TuneEngine, *, inst=None):
        super().__init__(inst)
        self.tune_engine = tune_engine

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        cfg = ctx.cfg.analysis
        state = ctx.current

        for method in cfg.methods:
            key = (method.value, state.target)
            try:
                with self.inst.timer(f"fit {method.value}/{state.target}"):
                    penalty = None
                    if method.penalized:
                        tune = self.tune_engine.tune(
                            frame=state.train_frame,
                            target=state.target,
                            predictors=state.predictors,
                            method=method,
                            candidate_lambdas=cfg.lambda_grid.values(),
                            folds=state.folds,
                        )
                        ctx.tunings[key] = tune
                        penalty = tune.selected_lambda

                    engine = resolve_model_fit_engine(method, cfg)
                    model = engine.fit(
                        frame=state.train_frame,
                        target=state.target,
                        predictors=state.predictors,
                        penalty=penalty,
                    )
            except WeavefitError as e:
                e.with_context(method=method.value, target=state.target)
                ctx.record_failure(e, stage=self.stage)
                logs.error(f"[ModelFitStep] {e}")
                continue

            ctx.models[key] = model
            self.inst.metrics.record(f"nonzero@{method.value}/{state.target}", model.n_nonzero)

            logs.info(
                f"[ModelFitStep] {method.label}/{state.target} "
                f"lambda={model.penalty} intercept={model.intercept:.6g} "
                f"nonzero={model.n_nonzero}/{len(model.feature_names)}"
            )

        return ctx
