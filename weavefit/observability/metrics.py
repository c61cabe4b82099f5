#!filepath: weavefit/observability/metrics.py
from dataclasses import dataclass, field
from typing import Any, Dict

from weavefit.utils.logger import logs


@dataclass
class MetricRecorder:
    """
    Flat run metrics, keyed "<metric>@<method>/<target>".
    """

    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.debug(f"[Metric] {name} = {value}")

    def with_prefix(self, prefix: str) -> Dict[str, Any]:
        """
        with_prefix("nonzero") → {"lasso/Rejection": 4, ...}
        """
        head = f"{prefix}@"
        return {k[len(head):]: v for k, v in self.metrics.items() if k.startswith(head)}

    def snapshot(self) -> Dict[str, Any]:
        return dict(self.metrics)
