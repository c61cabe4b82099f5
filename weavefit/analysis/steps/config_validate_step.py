from __future__ import annotations

from weavefit import logs
from weavefit.analysis.context import AnalysisContext
from weavefit.analysis.engines.registry import resolve_model_fit_engine
from weavefit.analysis.engines.split_engine import SplitEngine
from weavefit.analysis.engines.tune_engine import TuneEngine
from weavefit.pipeline.step import PipelineStep
from weavefit.utils.errors import ConfigurationError


class ConfigValidateStep(PipelineStep):
    """
    ConfigValidateStep（FINAL / FROZEN）

    Every ConfigurationError surfaces HERE, before any fit:
    - train_fraction in (0, 1) with both partitions non-empty
    - 2 <= n_folds <= n_train (only when a penalized method is configured)
    - non-empty, finite, non-negative lambda grid (penalized methods)
    - non-empty list of known, distinct methods
    """

    stage = "config_validate"

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        cfg = ctx.cfg.analysis

        if not cfg.methods:
            raise ConfigurationError("analysis.methods is empty")
        if len(set(cfg.methods)) != len(cfg.methods):
            raise ConfigurationError(f"analysis.methods has duplicates: {[m.value for m in cfg.methods]}")
        for method in cfg.methods:
            resolve_model_fit_engine(method, cfg)

        n_train = SplitEngine.train_size(len(ctx.data), cfg.train_fraction)

        if any(m.penalized for m in cfg.methods):
            SplitEngine.validate_folds(cfg.n_folds, n_train)
            TuneEngine.validate_grid(cfg.lambda_grid.values())

        logs.info(
            "[ConfigValidateStep] "
            f"rows={len(ctx.data)} n_train={n_train} folds={cfg.n_folds} "
            f"grid={cfg.lambda_grid.num} "
            f"[1e{cfg.lambda_grid.start_exp:g}, 1e{cfg.lambda_grid.stop_exp:g}] "
            f"scaling_scope={cfg.scaling_scope} seed={cfg.seed}"
        )
        return ctx
