#!filepath: weavefit/observability/progress.py
import time
from typing import Dict, Tuple

from weavefit.utils.logger import logs


class ProgressReporter:
    """
    Log-only progress for batch work (CV grids), quiet under pytest.

    done() reports wall time and throughput of the task started with
    the same name.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._tasks: Dict[str, Tuple[float, int, str]] = {}

    def start(self, task: str, total: int, unit: str = ""):
        if not self.enabled:
            return
        self._tasks[task] = (time.perf_counter(), total, unit)
        logs.info(f"[Progress] {task} started total={total} {unit}".rstrip())

    def update(self, task: str, current: int, total: int, unit: str = ""):
        if not self.enabled:
            return
        pct = 100.0 * current / total if total else 100.0
        logs.info(f"[Progress] {task}: {current}/{total} {unit} ({pct:.0f}%)")

    def done(self, task: str):
        if not self.enabled:
            return
        started = self._tasks.pop(task, None)
        if started is None:
            logs.info(f"[Progress] {task} done")
            return

        t0, total, unit = started
        elapsed = time.perf_counter() - t0
        rate = total / elapsed if elapsed > 0 else float("inf")
        logs.info(
            f"[Progress] {task} done in {elapsed:.2f}s ({rate:.1f} {unit or 'items'}/s)"
        )
