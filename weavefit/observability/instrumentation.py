#!filepath: weavefit/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict

from weavefit.observability.progress import ProgressReporter
from weavefit.observability.timer import Timer
from weavefit.observability.metrics import MetricRecorder
from weavefit.observability.timeline_reporter import TimelineReporter


@dataclass
class Instrumentation:
    """
    Instrumentation (leaf-only accounting + parent scope).

    Rules:
    1. Timeline records leaf timers only (record=True)
    2. Step-level timers are scope boundaries (record=False)
    3. record=False timers have no side effects
    """

    enabled: bool = True

    def __post_init__(self):
        self.progress = ProgressReporter(enabled=self.enabled)
        self._timer = Timer(enabled=self.enabled)
        self.metrics = MetricRecorder(enabled=self.enabled)

        # timeline: OrderedDict[leaf_name, elapsed_seconds]
        self.timeline: Dict[str, float] = OrderedDict()

    # ---------------------------------------------------------
    # Context manager timer
    # ---------------------------------------------------------
    def timer(self, name: str, *, record: bool = True):
        """
        Parameters
        ----------
        name : str
            timer name
        record : bool
            - True  : leaf, written to timeline
            - False : parent scope, wall-time only
        """
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                inst._timer.end(name)
                if record:
                    # repeated leaf names accumulate
                    inst.timeline[name] = inst._timer.totals[name]

        return _ctx()

    # ---------------------------------------------------------
    # Timeline output (cold path)
    # ---------------------------------------------------------
    def generate_timeline_report(self, run_id: str):
        TimelineReporter(self.timeline, run_id).print()


# -------------------------------------------------------------
# No-op Instrumentation
# -------------------------------------------------------------
class NoOpInstrumentation:
    """Used when observability is disabled."""

    def __init__(self):
        self.progress = ProgressReporter(enabled=False)
        self.metrics = MetricRecorder(enabled=False)
        self.timeline: Dict[str, float] = OrderedDict()

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def generate_timeline_report(self, run_id: str):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
