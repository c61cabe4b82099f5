# weavefit/config/pipeline_config.py
from typing import Optional

from pydantic import BaseModel


class PipelineConfig(BaseModel):
    output_dir: str = "reports"

    # None → cpu_count, 1 → sequential
    max_workers: Optional[int] = 1

    plots: bool = True
    instrumentation: bool = True
