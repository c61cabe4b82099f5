# weavefit/workflows/regression_comparison.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from weavefit.config.app_config import AppConfig
from weavefit.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)
from weavefit.analysis.pipeline import AnalysisPipeline

from weavefit.analysis.engines.assumption_engine import AssumptionCheckEngine
from weavefit.analysis.engines.tune_engine import TuneEngine

from weavefit.analysis.steps.dataset_load_step import DatasetLoadStep
from weavefit.analysis.steps.schema_resolve_step import SchemaResolveStep
from weavefit.analysis.steps.config_validate_step import ConfigValidateStep
from weavefit.analysis.steps.assumption_check_step import (
    ResidualCheckStep,
    TargetAssumptionStep,
)
from weavefit.analysis.steps.dataset_split_step import DatasetSplitStep
from weavefit.analysis.steps.standardize_step import StandardizeStep
from weavefit.analysis.steps.fold_build_step import FoldBuildStep
from weavefit.analysis.steps.model_fit_step import ModelFitStep
from weavefit.analysis.steps.model_evaluate_step import ModelEvaluateStep
from weavefit.analysis.steps.comparison_report_step import ComparisonReportStep
from weavefit.analysis.steps.cv_curve_report_step import CVCurveReportStep
from weavefit.analysis.steps.report_persist_step import ReportPersistStep


def build_regression_comparison(
    cfg: AppConfig | None = None,
    *,
    output_dir: Optional[Path] = None,
) -> AnalysisPipeline:
    """
    Regression Comparison Workflow (FINAL / FROZEN)

    load → schema → validate → target diagnostics
      per target: split → standardize → folds → fit/tune → evaluate → residuals
    compare → cv curves → persist
    """

    if cfg is None:
        cfg = AppConfig.load()

    inst = (
        Instrumentation(enabled=True)
        if cfg.pipeline.instrumentation
        else NoOpInstrumentation()
    )
    checker = AssumptionCheckEngine(alpha=cfg.analysis.normality_alpha)
    tuner = TuneEngine(
        cfg.analysis,
        max_workers=cfg.pipeline.max_workers,
        inst=inst,
        log_cfg=cfg.log,
    )

    return AnalysisPipeline(
        setup_steps=[
            DatasetLoadStep(inst=inst),
            SchemaResolveStep(inst=inst),
            ConfigValidateStep(inst=inst),
            TargetAssumptionStep(checker, inst=inst),
        ],
        target_steps=[
            DatasetSplitStep(inst=inst),
            StandardizeStep(inst=inst),
            FoldBuildStep(inst=inst),
            ModelFitStep(tuner, inst=inst),
            ModelEvaluateStep(inst=inst),
            ResidualCheckStep(checker, inst=inst),
        ],
        final_steps=[
            ComparisonReportStep(inst=inst),
            CVCurveReportStep(plots=cfg.pipeline.plots, inst=inst),
            ReportPersistStep(inst=inst),
        ],
        inst=inst,
        cfg=cfg,
        output_dir=output_dir,
    )
