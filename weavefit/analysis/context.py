# weavefit/analysis/context.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from weavefit.analysis.engines.assumption_engine import AssumptionResult
from weavefit.analysis.engines.evaluate_engine import EvaluationResult
from weavefit.analysis.engines.model_fit_engine import FittedModel
from weavefit.analysis.engines.split_engine import Split
from weavefit.analysis.engines.standardize_engine import StandardizationParams
from weavefit.analysis.engines.tune_engine import TuneResult
from weavefit.analysis.schema import FeatureSchema
from weavefit.utils.errors import WeavefitError

# (method value, target)
PairKey = Tuple[str, str]


@dataclass(frozen=True)
class PipelineFailure:
    method: Optional[str]
    target: Optional[str]
    kind: str
    message: str
    penalty: Optional[float] = None
    stage: str = ""

    @classmethod
    def from_error(cls, err: WeavefitError, *, stage: str = "") -> "PipelineFailure":
        return cls(
            method=err.method,
            target=err.target,
            kind=err.kind,
            message=err.message,
            penalty=err.penalty,
            stage=stage,
        )

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TargetState:
    """
    Per-target rolling state; rebuilt for every target.
    """

    target: str
    index: int
    predictors: List[str]

    split_seed: Optional[int] = None
    fold_seed: Optional[int] = None

    split: Optional[Split] = None
    train_frame: Optional[pd.DataFrame] = None
    test_frame: Optional[pd.DataFrame] = None
    scaling: Optional[StandardizationParams] = None
    folds: Optional[List[np.ndarray]] = None


@dataclass
class AnalysisContext:
    """
    AnalysisContext（FINAL / FROZEN）

    Semantics:
    - one context == one analysis run
    - run_id is immutable and mandatory
    - steps only append results; nothing is overwritten across targets
    """

    # -------------------------
    # Identity (FROZEN)
    # -------------------------
    run_id: str

    # -------------------------
    # Static bindings
    # -------------------------
    cfg: Any
    inst: Any
    output_dir: Path

    # -------------------------
    # Dataset layer
    # -------------------------
    data: Optional[pd.DataFrame] = None
    schema: Optional[FeatureSchema] = None
    scaling_cache: Dict[Tuple[str, ...], StandardizationParams] = field(default_factory=dict)

    # -------------------------
    # Rolling per-target state
    # -------------------------
    current: Optional[TargetState] = None
    targets: Dict[str, TargetState] = field(default_factory=dict)

    # -------------------------
    # Result layer
    # -------------------------
    models: Dict[PairKey, FittedModel] = field(default_factory=dict)
    tunings: Dict[PairKey, TuneResult] = field(default_factory=dict)
    evaluations: List[EvaluationResult] = field(default_factory=list)
    assumptions: List[AssumptionResult] = field(default_factory=list)
    failures: List[PipelineFailure] = field(default_factory=list)

    # -------------------------
    # Report layer
    # -------------------------
    report: Optional[Any] = None
    artifacts: Dict[str, Path] = field(default_factory=dict)

    # ------------------------------------------------------------------
    def record_failure(self, err: WeavefitError, *, stage: str) -> PipelineFailure:
        failure = PipelineFailure.from_error(err, stage=stage)
        self.failures.append(failure)
        return failure

    def failed(self, method: str, target: str) -> bool:
        return any(f.method == method and f.target == target for f in self.failures)
