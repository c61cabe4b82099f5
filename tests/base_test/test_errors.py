#!filepath: tests/base_test/test_errors.py
import pytest

from weavefit.utils.errors import (
    ConfigurationError,
    DataIntegrityError,
    NumericalInstabilityError,
    WeavefitError,
)


@pytest.mark.parametrize(
    "cls, kind",
    [
        (DataIntegrityError, "data_integrity"),
        (NumericalInstabilityError, "numerical_instability"),
        (ConfigurationError, "configuration"),
    ],
)
def test_error_kinds(cls, kind):
    err = cls("boom")

    assert isinstance(err, WeavefitError)
    assert err.kind == kind
    assert str(err) == "boom"


def test_context_in_message():
    err = NumericalInstabilityError("singular", method="ridge", target="Rejection", penalty=0.0)

    assert str(err) == "singular (method=ridge, target=Rejection, lambda=0.0)"
    assert err.context() == {
        "kind": "numerical_instability",
        "method": "ridge",
        "target": "Rejection",
        "penalty": 0.0,
        "message": "singular",
    }


def test_with_context_fills_only_unset_fields():
    err = DataIntegrityError("bad", target="Total_Pdn_yds")
    out = err.with_context(method="lasso", target="Rejection", penalty=1.0)

    assert out is err
    assert err.method == "lasso"
    assert err.target == "Total_Pdn_yds"
    assert err.penalty == 1.0
