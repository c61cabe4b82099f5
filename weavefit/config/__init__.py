from .app_config import AppConfig
from .analysis_config import AnalysisConfig, LambdaGridConfig, ModelMethod
from .data_config import DataConfig
from .log_config import LogConfig
from .pipeline_config import PipelineConfig

__all__ = [
    "AppConfig",
    "AnalysisConfig",
    "DataConfig",
    "LambdaGridConfig",
    "LogConfig",
    "ModelMethod",
    "PipelineConfig",
]
