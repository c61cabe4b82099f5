#!filepath: tests/analysis/test_feature_schema.py
import pandas as pd
import pytest

from weavefit.analysis.schema import ColumnRole, FeatureSchema
from weavefit.utils.errors import ConfigurationError, DataIntegrityError


def test_every_target_view_excludes_other_targets(weaving_frame):
    schema = FeatureSchema.resolve(
        weaving_frame, targets=["Total_Pdn_yds", "Rejection"]
    )

    for target in schema.targets:
        view = schema.predictors_for(target)
        assert "Total_Pdn_yds" not in view
        assert "Rejection" not in view
        assert len(view) == 9


def test_non_numeric_columns_are_excluded(weaving_frame):
    schema = FeatureSchema.resolve(
        weaving_frame, targets=["Total_Pdn_yds", "Rejection"]
    )

    assert schema.role("Order_No") is ColumnRole.EXCLUDED
    assert "Order_No" not in schema.columns


def test_explicit_exclusion(weaving_frame):
    schema = FeatureSchema.resolve(
        weaving_frame, targets=["Total_Pdn_yds"], excluded=["PPI"]
    )

    assert "PPI" not in schema.predictors
    # undeclared as target → ordinary numeric predictor
    assert schema.role("Rejection") is ColumnRole.PREDICTOR


def test_explicit_predictors_keep_order(weaving_frame):
    schema = FeatureSchema.resolve(
        weaving_frame, targets=["Rejection"], predictors=["PPI", "EPI"]
    )

    assert schema.predictors_for("Rejection") == ["PPI", "EPI"]
    assert "Total_Pdn_yds" in schema.excluded


def test_missing_columns(weaving_frame):
    with pytest.raises(DataIntegrityError):
        FeatureSchema.resolve(weaving_frame, targets=["Scrap"])
    with pytest.raises(DataIntegrityError):
        FeatureSchema.resolve(weaving_frame, targets=["Rejection"], predictors=["Loom_Speed"])


def test_conflicting_roles():
    with pytest.raises(ConfigurationError):
        FeatureSchema(predictors=("EPI", "Rejection"), targets=("Rejection",))


def test_unknown_target():
    schema = FeatureSchema(predictors=("EPI",), targets=("Rejection",))

    with pytest.raises(ConfigurationError):
        schema.predictors_for("Total_Pdn_yds")


def test_no_predictors_left():
    df = pd.DataFrame({"y": [1.0, 2.0], "id": ["a", "b"]})

    with pytest.raises(ConfigurationError):
        FeatureSchema.resolve(df, targets=["y"])
