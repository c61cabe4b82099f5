#!filepath: weavefit/__init__.py

from .utils.logger import Logging, logs, init_logging
from .utils.filesystem import FileSystem
from .utils.path import PathManager
from .config.app_config import AppConfig

__version__ = "0.1.0"

# short aliases
fs = FileSystem
path = PathManager

__all__ = [
    "logs", "Logging", "init_logging",
    "fs",
    "path",
    "AppConfig",
    "__version__",
]
