# weavefit/config/analysis_config.py
from __future__ import annotations

from enum import Enum
from typing import List, Literal

import numpy as np
from pydantic import BaseModel, Field


class ModelMethod(str, Enum):
    OLS = "ols"
    RIDGE = "ridge"
    LASSO = "lasso"

    @property
    def penalized(self) -> bool:
        return self is not ModelMethod.OLS

    @property
    def label(self) -> str:
        return {"ols": "OLS", "ridge": "Ridge", "lasso": "LASSO"}[self.value]


class LambdaGridConfig(BaseModel):
    """
    Log-spaced penalty grid: 10**start_exp ... 10**stop_exp, num values.
    """

    start_exp: float = -2.0
    stop_exp: float = 10.0
    num: int = 100

    def values(self) -> np.ndarray:
        return np.logspace(self.start_exp, self.stop_exp, self.num)


class AnalysisConfig(BaseModel):
    """
    AnalysisConfig（FINAL）

    Semantic checks (fraction range, fold count, grid size) live in the
    engines and raise ConfigurationError at pipeline setup.
    """

    # reproducibility
    seed: int = 1

    # splitting
    train_fraction: float = 0.75
    n_folds: int = 10

    # models
    methods: List[ModelMethod] = Field(
        default_factory=lambda: [ModelMethod.OLS, ModelMethod.RIDGE, ModelMethod.LASSO]
    )
    lambda_grid: LambdaGridConfig = Field(default_factory=LambdaGridConfig)
    lasso_max_iter: int = 10_000

    # standardization reference: full dataset (reference behavior) or train only
    scaling_scope: Literal["full", "train"] = "full"

    # assumption checks
    normality_alpha: float = 0.05
