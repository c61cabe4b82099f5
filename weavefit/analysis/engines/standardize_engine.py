# weavefit/analysis/engines/standardize_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from weavefit.utils.errors import DataIntegrityError


@dataclass(frozen=True)
class StandardizationParams:
    """
    feature → (mean, std), computed once from a reference frame.
    """

    mean: pd.Series
    std: pd.Series

    @property
    def features(self) -> list[str]:
        return list(self.mean.index)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"mean": self.mean, "std": self.std})


class StandardizeEngine:
    """
    StandardizeEngine（FINAL / FROZEN）

    Contract:
    - std uses ddof=1 (sample standard deviation)
    - only the listed features are scaled; every other column
      (targets included) passes through untouched
    - never mutates the input frame
    - zero / non-finite std is a DataIntegrityError naming the feature
    """

    def fit(
        self,
        frame: pd.DataFrame,
        features: Sequence[str],
    ) -> StandardizationParams:
        features = list(features)
        self._require_columns(frame, features)

        values = frame[features].astype(float)
        mean = values.mean(axis=0)
        std = values.std(axis=0, ddof=1)

        for name in features:
            s = std[name]
            if not np.isfinite(s) or s == 0.0:
                raise DataIntegrityError(
                    f"feature '{name}' has zero or undefined standard "
                    f"deviation (std={s}); cannot standardize"
                )

        return StandardizationParams(mean=mean, std=std)

    def transform(
        self,
        frame: pd.DataFrame,
        params: StandardizationParams,
    ) -> pd.DataFrame:
        features = params.features
        self._require_columns(frame, features)

        out = frame.copy()
        out[features] = (frame[features].astype(float) - params.mean) / params.std
        return out

    def fit_transform(
        self,
        frame: pd.DataFrame,
        features: Sequence[str],
    ) -> tuple[pd.DataFrame, StandardizationParams]:
        params = self.fit(frame, features)
        return self.transform(frame, params), params

    # ------------------------------------------------------------------
    @staticmethod
    def _require_columns(frame: pd.DataFrame, features: list[str]) -> None:
        missing = [c for c in features if c not in frame.columns]
        if missing:
            raise DataIntegrityError(f"feature column(s) missing: {missing}")
