# weavefit/utils/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided input (paths, CLI flags).
    Should NOT print traceback.
    """


class WeavefitError(RuntimeError):
    """
    Base error of the analysis pipeline.

    Carries the (method, target, penalty) it belongs to so that failures
    stay attributable in the final report.
    """

    kind: str = "error"

    def __init__(
        self,
        message: str,
        *,
        method: Optional[str] = None,
        target: Optional[str] = None,
        penalty: Optional[float] = None,
    ):
        super().__init__(message)
        self.message = message
        self.method = method
        self.target = target
        self.penalty = penalty

    def with_context(
        self,
        *,
        method: Optional[str] = None,
        target: Optional[str] = None,
        penalty: Optional[float] = None,
    ) -> "WeavefitError":
        """Fill context fields that are still unset, return self."""
        if self.method is None:
            self.method = method
        if self.target is None:
            self.target = target
        if self.penalty is None:
            self.penalty = penalty
        return self

    def context(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "method": self.method,
            "target": self.target,
            "penalty": self.penalty,
            "message": self.message,
        }

    def __str__(self) -> str:
        parts = [
            f"{k}={v}"
            for k, v in (
                ("method", self.method),
                ("target", self.target),
                ("lambda", self.penalty),
            )
            if v is not None
        ]
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class DataIntegrityError(WeavefitError):
    """
    Missing / degenerate feature or schema mismatch.
    Fatal for the (method, target) pair.
    """

    kind = "data_integrity"


class NumericalInstabilityError(WeavefitError):
    """
    Singular design matrix or solver non-convergence.
    Recoverable per lambda cell, fatal when every candidate fails.
    """

    kind = "numerical_instability"


class ConfigurationError(WeavefitError):
    """
    Invalid setup (split fraction, fold count, lambda grid, method).
    Raised before any fitting begins.
    """

    kind = "configuration"
