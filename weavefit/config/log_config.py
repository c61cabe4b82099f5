#!filepath: weavefit/config/log_config.py
from typing import Literal

from pydantic import BaseModel

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LogConfig(BaseModel):
    """
    loguru file sink: <dir>/<YYYY-MM-DD>.log
    """

    dir: str = "logs"
    rotation: str = "1 day"
    retention: str = "30 days"
    level: LogLevel = "INFO"
