#!filepath: weavefit/utils/logger.py
import os
import sys
from functools import wraps
from time import perf_counter
from typing import Callable, Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {process.name} | {message}"


class Logging:
    """
    loguru wrapper shared by every weavefit module.

    - without log_dir: stderr only, nothing is created on disk
    - with log_dir: one file per day, rotation / retention from LogConfig
    - messages are bracket-tagged by component: "[TuneEngine] ..."
    - warning / error are echoed to stdout when logging to a file
    - enqueue=True: CV worker processes write through the same sink
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level

        self._configure()

    # shared by every instance: they all drive the one loguru logger
    _to_file: bool = False

    def _configure(self) -> None:
        # every previous sink goes, this instance owns the logger
        logger.remove()

        if self.log_dir is None:
            logger.add(sys.stderr, level=self.level, format=LOG_FORMAT, diagnose=False)
            Logging._to_file = False
            return

        os.makedirs(self.log_dir, exist_ok=True)
        logger.add(
            sink=os.path.join(self.log_dir, "{time:YYYY-MM-DD}.log"),
            rotation=self.rotation,
            retention=self.retention,
            level=self.level,
            format=LOG_FORMAT,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )
        Logging._to_file = True
        logger.debug(f"[Logging] sink={self.log_dir} level={self.level}")

    # ---------- level methods ----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        if Logging._to_file:
            print(msg)
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        if Logging._to_file:
            print(msg)
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.exception(msg, *args, **kwargs)

    # ---------- decorator ----------
    def catch(self, msg: str = "failed", log_time: bool = True) -> Callable:
        """
        Log the traceback of anything escaping the wrapped call, then
        re-raise. Wall time goes to the log at INFO.
        """

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start = perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    logger.exception(f"[{func.__qualname__}] {msg}")
                    raise

                if log_time:
                    logger.info(f"[TIME] {func.__qualname__} took {perf_counter() - start:.3f}s")
                return result

            return wrapper

        return decorator


def init_logging(cfg) -> Logging:
    """
    Reconfigure the sink from a LogConfig.

    Every Logging instance drives the same loguru logger, so the
    module-level ``logs`` follows the new sink as well.
    """
    return Logging(
        log_dir=cfg.dir,
        rotation=cfg.rotation,
        retention=cfg.retention,
        log_level=cfg.level,
    )


# default global logs: stderr until init_logging adds the file sink
logs = Logging()
