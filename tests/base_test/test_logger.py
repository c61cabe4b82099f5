#!filepath: tests/base_test/test_logger.py
import pytest
from loguru import logger

from weavefit.config.log_config import LogConfig
from weavefit.utils.logger import Logging, init_logging, logs


def test_init_logging_writes_daily_file(tmp_path):
    init_logging(LogConfig(dir=str(tmp_path / "logs"), level="DEBUG"))

    logs.info("[Test] hello")
    logger.complete()

    files = list((tmp_path / "logs").glob("*.log"))
    assert len(files) == 1
    assert "[Test] hello" in files[0].read_text(encoding="utf-8")


def test_catch_reraises_and_logs():
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    @logs.catch(msg="fit blew up")
    def boom():
        raise ValueError("x")

    with pytest.raises(ValueError):
        boom()

    logger.remove(sink_id)
    assert any("fit blew up" in line for line in captured)


def test_catch_passes_results_through():
    @logs.catch()
    def add(a, b):
        return a + b

    assert add(1, 2) == 3


def test_default_logging_creates_nothing_on_disk(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    Logging().info("[Test] console only")

    assert list(tmp_path.iterdir()) == []


def test_warning_echo_follows_file_sink(tmp_path, capsys):
    Logging()
    logs.warning("[Test] quiet")
    assert "[Test] quiet" not in capsys.readouterr().out

    init_logging(LogConfig(dir=str(tmp_path / "logs")))
    logs.warning("[Test] loud")
    logger.complete()
    assert "[Test] loud" in capsys.readouterr().out
