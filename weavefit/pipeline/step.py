# weavefit/pipeline/step.py
from __future__ import annotations

from typing import Any

from weavefit.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


class PipelineStep:
    """
    Pipeline Step base class (FINAL / FROZEN)

    Responsibilities:
      1. orchestration layer (loops / conditional execution)
      2. step-level timing boundary (parent scope)

    Rules:
      - the step itself never enters the timeline
      - leaf timers live inside the step
      - instrumentation is optional; behavior never depends on it
    """

    stage: str = ""

    def __init__(self, inst: Instrumentation | None = None):
        # 永远保证 inst 可用（No-op 语义）
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    # --------------------------------------------------
    # Step identity
    # --------------------------------------------------
    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    # --------------------------------------------------
    # Step-level timer (parent scope, not recorded)
    # --------------------------------------------------
    def timed(self):
        return self.inst.timer(self.step_name, record=False)

    # --------------------------------------------------
    # Contract
    # --------------------------------------------------
    def run(self, ctx: Any) -> Any:
        raise NotImplementedError
