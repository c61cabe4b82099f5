#!filepath: tests/observability/test_instrumentation.py

import time

from loguru import logger

from weavefit.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


def test_instrumentation_timer():
    inst = Instrumentation(enabled=True)

    with inst.timer("fit ols/Rejection"):
        time.sleep(0.01)

    assert "fit ols/Rejection" in inst.timeline
    assert inst.timeline["fit ols/Rejection"] > 0


def test_parent_scope_is_not_recorded():
    inst = Instrumentation(enabled=True)

    with inst.timer("ModelFitStep", record=False):
        with inst.timer("leaf"):
            pass

    assert list(inst.timeline) == ["leaf"]


def test_disabled_instrumentation_records_nothing():
    inst = Instrumentation(enabled=False)

    with inst.timer("leaf"):
        pass
    inst.metrics.record("rows", 1)

    assert inst.timeline == {}
    assert inst.metrics.metrics == {}


def test_noop_instrumentation_interface():
    inst = NoOpInstrumentation()

    with inst.timer("leaf"):
        pass
    inst.progress.start("Task", 1)
    inst.metrics.record("x", 1)
    inst.generate_timeline_report("r")

    assert inst.timeline == {}


def test_generate_timeline_report():
    inst = Instrumentation(enabled=True)

    with inst.timer("phase_X"):
        time.sleep(0.005)

    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    inst.generate_timeline_report("run-1")

    logger.remove(sink_id)

    output = "\n".join(captured)

    assert "phase_X" in output
    assert "run-1" in output


def test_repeated_leaf_accumulates():
    inst = Instrumentation(enabled=True)

    with inst.timer("dataset_load"):
        time.sleep(0.005)
    first = inst.timeline["dataset_load"]
    with inst.timer("dataset_load"):
        time.sleep(0.005)

    assert inst.timeline["dataset_load"] > first
