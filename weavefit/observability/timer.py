#!filepath: weavefit/observability/timer.py
import time
from collections import defaultdict
from typing import Dict


class Timer:
    """
    Named perf_counter timer.

    The same name may be timed repeatedly (one fit per fold, one target
    after another); totals and counts accumulate per name.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._open: Dict[str, float] = {}
        self.totals: Dict[str, float] = defaultdict(float)
        self.counts: Dict[str, int] = defaultdict(int)

    def start(self, name: str):
        if not self.enabled:
            return
        self._open[name] = time.perf_counter()

    def end(self, name: str) -> float:
        """Elapsed seconds of the open interval; 0.0 if none is open."""
        if not self.enabled or name not in self._open:
            return 0.0
        elapsed = time.perf_counter() - self._open.pop(name)
        self.totals[name] += elapsed
        self.counts[name] += 1
        return elapsed
