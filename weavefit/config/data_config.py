#!filepath: weavefit/config/data_config.py
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class DataConfig(BaseModel):
    """
    Input table + column roles.

    - rename is applied AFTER column-name normalization
    - predictors=None → every numeric column that is neither a target
      nor excluded
    """

    path: str
    rename: Dict[str, str] = Field(default_factory=dict)
    targets: List[str] = Field(
        default_factory=lambda: ["Total_Pdn_yds", "Rejection"]
    )
    predictors: Optional[List[str]] = None
    excluded: List[str] = Field(default_factory=list)
