from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Mapping, Sequence

import numpy as np
import pandas as pd

from weavefit.utils.errors import DataIntegrityError, UserInputError


def normalize_column_name(name) -> str:
    """
    "Req. Finish Fabric (yds)" → "Req_Finish_Fabric_yds"

    - every run of non [A-Za-z0-9_] characters → "_"
    - repeated / leading / trailing "_" removed
    - a leading digit gets an "X" prefix
    """
    s = re.sub(r"[^0-9A-Za-z_]+", "_", str(name).strip())
    s = re.sub(r"_+", "_", s).strip("_")
    if not s:
        return "X"
    if s[0].isdigit():
        s = f"X{s}"
    return s


def to_num(x):
    if pd.isna(x):
        return np.nan
    if isinstance(x, (int, float, np.number)):
        return float(x)
    s = str(x).strip().replace(",", "")
    if re.match(r"^\(.*\)$", s):
        s = "-" + s[1:-1]
    try:
        return float(s)
    except ValueError:
        return np.nan


class DatasetLoadEngine:
    """
    DatasetLoadEngine（FINAL / FROZEN）

    Responsibility:
    - read the input table (CSV / Parquet)
    - normalize column names, apply the configured rename map
    - guarantee every required column is present, numeric and complete

    Contract:
    - returned frame is a fresh object with a RangeIndex
    - any missing / non-numeric value in a required column is a
      DataIntegrityError (no silent row dropping)
    """

    SUPPORTED = {".csv", ".parquet", ".pq"}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(
        self,
        path: str | Path,
        *,
        rename: Mapping[str, str] | None = None,
    ) -> pd.DataFrame:
        frame = self.read(path)
        return self.normalize(frame, rename=rename)

    def read(self, path: str | Path) -> pd.DataFrame:
        path = Path(path)
        if not path.exists():
            raise UserInputError(f"input table not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in self.SUPPORTED:
            raise UserInputError(
                f"unsupported input format '{suffix}' "
                f"(expected one of {sorted(self.SUPPORTED)})"
            )

        if suffix == ".csv":
            return pd.read_csv(path)
        return pd.read_parquet(path)

    def normalize(
        self,
        frame: pd.DataFrame,
        *,
        rename: Mapping[str, str] | None = None,
    ) -> pd.DataFrame:
        out = frame.copy()
        out.columns = [normalize_column_name(c) for c in out.columns]

        dup = out.columns[out.columns.duplicated()].tolist()
        if dup:
            raise DataIntegrityError(
                f"column names collide after normalization: {sorted(set(dup))}"
            )

        if rename:
            out = out.rename(columns=dict(rename))

        return out.reset_index(drop=True)

    def require(
        self,
        frame: pd.DataFrame,
        columns: Sequence[str],
    ) -> pd.DataFrame:
        """
        Coerce required columns to float and reject incomplete data.
        """
        missing = [c for c in columns if c not in frame.columns]
        if missing:
            raise DataIntegrityError(f"required column(s) missing: {missing}")

        out = frame.copy()
        bad: Dict[str, int] = {}
        for col in columns:
            if not pd.api.types.is_numeric_dtype(out[col]):
                out[col] = out[col].apply(to_num)
            out[col] = out[col].astype(float)
            n_bad = int((~np.isfinite(out[col].to_numpy())).sum())
            if n_bad:
                bad[col] = n_bad

        if bad:
            raise DataIntegrityError(
                f"missing or non-numeric values in required column(s): {bad}"
            )

        return out
