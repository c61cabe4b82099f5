#!filepath: tests/analysis/engines/test_assumption_engine.py
import math

import numpy as np

from weavefit.analysis.engines.assumption_engine import AssumptionCheckEngine


def test_normal_sample_passes():
    x = np.random.default_rng(0).normal(size=500)
    res = AssumptionCheckEngine(alpha=0.01).check(x, kind="target", target="Total_Pdn_yds")

    assert res.n == 500
    assert res.normal is True
    assert abs(res.skewness) < 0.5
    assert abs(res.kurtosis) < 0.5


def test_skewed_sample_fails():
    x = np.random.default_rng(0).exponential(size=500)
    res = AssumptionCheckEngine().check(x, kind="residual", target="Rejection", method="ols")

    assert res.normal is False
    assert res.skewness > 1.0
    assert res.method == "ols"


def test_too_few_values_gives_nan_statistics():
    res = AssumptionCheckEngine().check([1.0, np.nan, 2.0], kind="target", target="y")

    assert res.n == 2
    assert res.normal is False
    assert math.isnan(res.shapiro_p)
    assert res.mean == 1.5


def test_record_is_flat():
    res = AssumptionCheckEngine().check(np.arange(10.0), kind="target", target="y")
    rec = res.to_record()

    assert rec["kind"] == "target"
    assert set(rec) >= {"shapiro_stat", "shapiro_p", "normal", "kurtosis"}
