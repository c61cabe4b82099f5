#!filepath: weavefit/observability/timeline_reporter.py
from typing import Dict

from weavefit.utils.logger import logs


class TimelineReporter:
    """
    Run timeline report: leaf timer → elapsed seconds
    """

    def __init__(self, timeline: Dict[str, float], run_id: str):
        self.timeline = timeline
        self.run_id = run_id

    def print(self):
        logs.info(f"[Timeline] ===== Analysis timeline for {self.run_id} =====")

        total = 0.0
        for name, sec in self.timeline.items():
            logs.info(f"[Timeline] {str(name):<40} {sec:>8.3f}s")
            total += sec

        logs.info(f"[Timeline] Total{'':<37} {total:>8.3f}s")
        logs.info("[Timeline] =====================================================")
