# tests/conftest.py
from __future__ import annotations

import multiprocessing
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import yaml
from loguru import logger

from weavefit.config.app_config import AppConfig

PREDICTORS = [
    "Req_Finish_Fabric_yds",
    "Fabric_Allowance",
    "Rec_Beam_length_yds",
    "Shrink_allow",
    "Req_Grey_Fabric_yds",
    "Req_Beam_length_yds",
    "Weft_Count",
    "EPI",
    "PPI",
]
TARGETS = ["Total_Pdn_yds", "Rejection"]

# true coefficients of the production target (per raw predictor unit)
TRUE_COEF = np.array([2.0, -1.5, 0.0, 0.5, 1.0, 0.0, -0.75, 0.25, 0.0])
TRUE_INTERCEPT = 10.0


@pytest.fixture(scope="session", autouse=True)
def _set_start_method():
    multiprocessing.set_start_method("spawn", force=True)


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


def make_weaving_frame(n: int = 1000, seed: int = 7) -> pd.DataFrame:
    """
    Synthetic production table:
    - 9 independent predictors
    - Total_Pdn_yds = linear in predictors + N(0, 1) noise
    - Rejection correlated with Total_Pdn_yds
    - a non-numeric identifier column that must never be used
    """
    rng = np.random.default_rng(seed)
    X = rng.normal(loc=5.0, scale=2.0, size=(n, len(PREDICTORS)))

    production = TRUE_INTERCEPT + X @ TRUE_COEF + rng.normal(0.0, 1.0, n)
    rejection = 0.1 * production + 0.8 * X[:, 1] + rng.normal(0.0, 0.5, n)

    df = pd.DataFrame(X, columns=PREDICTORS)
    df["Total_Pdn_yds"] = production
    df["Rejection"] = rejection
    df["Order_No"] = [f"ORD-{i:05d}" for i in range(n)]
    return df


@pytest.fixture
def predictors() -> list[str]:
    return list(PREDICTORS)


@pytest.fixture
def true_coef() -> np.ndarray:
    return TRUE_COEF.copy()


@pytest.fixture
def weaving_frame() -> pd.DataFrame:
    return make_weaving_frame()


@pytest.fixture
def small_weaving_frame() -> pd.DataFrame:
    return make_weaving_frame(n=120, seed=11)


@pytest.fixture
def weaving_csv(tmp_path: Path, weaving_frame: pd.DataFrame) -> Path:
    path = tmp_path / "weaving.csv"
    weaving_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def make_config_file(tmp_path: Path):
    """
    Factory: write a YAML config into tmp_path, overriding sections.

    A small lambda grid keeps end-to-end runs fast.
    """

    def _make(data_path: Path, **sections) -> Path:
        raw = {
            "log": {"dir": str(tmp_path / "logs"), "level": "DEBUG"},
            "data": {
                "path": str(data_path),
                "targets": TARGETS,
                "predictors": PREDICTORS,
            },
            "analysis": {
                "seed": 1,
                "train_fraction": 0.75,
                "n_folds": 5,
                "lambda_grid": {"start_exp": -2, "stop_exp": 4, "num": 7},
            },
            "pipeline": {
                "output_dir": str(tmp_path / "reports"),
                "max_workers": 1,
                "plots": False,
                "instrumentation": True,
            },
        }
        for section, values in sections.items():
            raw.setdefault(section, {}).update(values)

        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump(raw), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def app_config(make_config_file, weaving_csv) -> AppConfig:
    return AppConfig.load(path=str(make_config_file(weaving_csv)))
