#!filepath: tests/observability/test_timeline.py

from loguru import logger

from weavefit.observability.timeline_reporter import TimelineReporter


def test_timeline_log_output():
    tl = {
        "dataset_load": 1.23,
        "fit ridge/Rejection": 2.34,
    }
    reporter = TimelineReporter(tl, "20251103-101500")

    captured = []

    # 临时添加一个 sink 捕获 Loguru 输出
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    reporter.print()

    logger.remove(sink_id)  # 恢复

    output = "\n".join(captured)

    assert "Analysis timeline for 20251103-101500" in output
    assert "dataset_load" in output
    assert "1.230" in output
    assert "fit ridge/Rejection" in output
    assert "3.570" in output
