# weavefit/analysis/schema.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

import pandas as pd

from weavefit.utils.errors import ConfigurationError, DataIntegrityError


class ColumnRole(str, Enum):
    PREDICTOR = "predictor"
    EXCLUDED = "excluded"
    TARGET = "target"


@dataclass(frozen=True)
class FeatureSchema:
    """
    FeatureSchema（FINAL / FROZEN）

    Invariants:
    - every column has exactly one role
    - targets are never predictors, so every per-target view excludes
      the other target
    """

    predictors: tuple[str, ...]
    targets: tuple[str, ...]
    excluded: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.targets:
            raise ConfigurationError("FeatureSchema needs at least one target")
        if not self.predictors:
            raise ConfigurationError("FeatureSchema needs at least one predictor")

        seen: dict[str, ColumnRole] = {}
        for role, cols in (
            (ColumnRole.PREDICTOR, self.predictors),
            (ColumnRole.TARGET, self.targets),
            (ColumnRole.EXCLUDED, self.excluded),
        ):
            for col in cols:
                if col in seen:
                    raise ConfigurationError(
                        f"column '{col}' declared as both "
                        f"{seen[col].value} and {role.value}"
                    )
                seen[col] = role

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def role(self, column: str) -> ColumnRole:
        if column in self.predictors:
            return ColumnRole.PREDICTOR
        if column in self.targets:
            return ColumnRole.TARGET
        if column in self.excluded:
            return ColumnRole.EXCLUDED
        raise KeyError(column)

    def predictors_for(self, target: str) -> list[str]:
        """
        Ordered predictor set of the per-target training view.
        """
        if target not in self.targets:
            raise ConfigurationError(f"'{target}' is not a declared target")
        others = set(self.targets)
        return [c for c in self.predictors if c not in others]

    @property
    def columns(self) -> list[str]:
        return [*self.predictors, *self.targets]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def resolve(
        cls,
        frame: pd.DataFrame,
        *,
        targets: Sequence[str],
        predictors: Optional[Sequence[str]] = None,
        excluded: Iterable[str] = (),
    ) -> "FeatureSchema":
        """
        Enumerate column roles against an actual table.

        predictors=None → every numeric column that is neither a target
        nor explicitly excluded, in table order. Columns not named as a
        predictor or target end up excluded.
        """
        missing_targets = [t for t in targets if t not in frame.columns]
        if missing_targets:
            raise DataIntegrityError(f"target column(s) missing: {missing_targets}")

        excluded = [c for c in excluded if c in frame.columns]

        if predictors is None:
            numeric = frame.select_dtypes(include="number").columns
            predictors = [
                c for c in numeric
                if c not in targets and c not in excluded
            ]
        else:
            missing = [c for c in predictors if c not in frame.columns]
            if missing:
                raise DataIntegrityError(f"predictor column(s) missing: {missing}")

        named = set(predictors) | set(targets)
        rest = [c for c in frame.columns if c not in named and c not in excluded]

        return cls(
            predictors=tuple(predictors),
            targets=tuple(targets),
            excluded=tuple([*excluded, *rest]),
        )
