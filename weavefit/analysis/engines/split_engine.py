# weavefit/analysis/engines/split_engine.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from weavefit.utils.errors import ConfigurationError


@dataclass(frozen=True)
class Split:
    """
    Positional train / test partition of one frame.

    Invariants:
    - train ∪ test == range(n)
    - train ∩ test == ∅
    - both sorted ascending
    """

    train: np.ndarray
    test: np.ndarray

    @property
    def n_rows(self) -> int:
        return len(self.train) + len(self.test)

    def take(self, frame: pd.DataFrame) -> tuple[pd.DataFrame, pd.DataFrame]:
        if len(frame) != self.n_rows:
            raise ValueError(
                f"split covers {self.n_rows} rows, frame has {len(frame)}"
            )
        return (
            frame.iloc[self.train].reset_index(drop=True),
            frame.iloc[self.test].reset_index(drop=True),
        )


class SplitEngine:
    """
    SplitEngine（FINAL / FROZEN）

    Responsibility:
    - reproducible train / test partition from an explicit seed
    - k-fold partition of the TRAINING positions only

    Contract:
    - the engine never touches global random state
    - same (seed, n) → bit-identical partition
    - train size = round(train_fraction * n)
    """

    # ------------------------------------------------------------------
    # Validation (setup time)
    # ------------------------------------------------------------------
    @staticmethod
    def train_size(n_rows: int, train_fraction: float) -> int:
        SplitEngine.validate_fraction(train_fraction)
        n_train = int(round(train_fraction * n_rows))
        if n_train < 1 or n_train >= n_rows:
            raise ConfigurationError(
                f"train_fraction={train_fraction} leaves an empty partition "
                f"for n_rows={n_rows}"
            )
        return n_train

    @staticmethod
    def validate_fraction(train_fraction: float) -> None:
        if not (0.0 < train_fraction < 1.0):
            raise ConfigurationError(
                f"train_fraction must be in (0, 1), got {train_fraction}"
            )

    @staticmethod
    def validate_folds(k: int, n_train: int | None = None) -> None:
        if k < 2:
            raise ConfigurationError(f"fold count must be >= 2, got {k}")
        if n_train is not None and k > n_train:
            raise ConfigurationError(
                f"fold count {k} exceeds training size {n_train}"
            )

    # ------------------------------------------------------------------
    # Seeds
    # ------------------------------------------------------------------
    @staticmethod
    def derive_seed(seed: int, *keys: int) -> int:
        """
        Child seed for a sub-run, e.g. derive_seed(run_seed, target_idx, 0).
        """
        ss = np.random.SeedSequence([seed, *keys])
        return int(ss.generate_state(1)[0])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def split(
        self,
        frame: pd.DataFrame,
        train_fraction: float,
        seed: int,
    ) -> Split:
        n = len(frame)
        n_train = self.train_size(n, train_fraction)

        rng = np.random.default_rng(seed)
        perm = rng.permutation(n)

        return Split(
            train=np.sort(perm[:n_train]),
            test=np.sort(perm[n_train:]),
        )

    def kfold(
        self,
        train_index: np.ndarray,
        k: int,
        seed: int,
    ) -> list[np.ndarray]:
        """
        Partition train_index into k disjoint folds whose sizes differ by
        at most one. Fold order and membership depend only on
        (train_index, k, seed).
        """
        train_index = np.asarray(train_index)
        self.validate_folds(k, len(train_index))

        rng = np.random.default_rng(seed)
        shuffled = rng.permutation(train_index)

        return [np.sort(fold) for fold in np.array_split(shuffled, k)]
