#!filepath: weavefit/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from weavefit.utils.path import PathManager

from .log_config import LogConfig
from .data_config import DataConfig
from .analysis_config import AnalysisConfig
from .pipeline_config import PipelineConfig


# env var → (section, key)
_ENV_OVERRIDES = {
    "WEAVEFIT_DATA_PATH": ("data", "path"),
    "WEAVEFIT_OUTPUT_DIR": ("pipeline", "output_dir"),
    "WEAVEFIT_LOG_LEVEL": ("log", "level"),
}


class AppConfig(BaseModel):
    log: LogConfig
    data: DataConfig
    analysis: AnalysisConfig
    pipeline: PipelineConfig

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML config + .env
        - default file: the base.yml shipped inside the package
        - .env is read from PathManager.root()
        - WEAVEFIT_* environment variables override YAML entries
        """
        # 1) .env at project root
        load_dotenv(PathManager.root() / ".env")

        # 2) config file
        if path is None:
            path = str(PathManager.default_config_file())

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        # 4) environment overrides
        for env_name, (section, key) in _ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                raw.setdefault(section, {})
                raw[section][key] = value

        return cls(**raw)
