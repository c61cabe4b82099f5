#!filepath: tests/observability/test_timer.py

import time
from weavefit.observability.timer import Timer

def test_timer_basic():
    t = Timer(enabled=True)
    t.start("task")
    time.sleep(0.01)
    elapsed = t.end("task")

    assert elapsed > 0
    assert isinstance(elapsed, float)

def test_timer_disabled():
    t = Timer(enabled=False)
    t.start("task")
    elapsed = t.end("task")

    assert elapsed == 0.0

def test_timer_end_without_start():
    assert Timer(enabled=True).end("never") == 0.0

def test_timer_accumulates_per_name():
    t = Timer(enabled=True)
    for _ in range(3):
        t.start("fit")
        t.end("fit")

    assert t.counts["fit"] == 3
    assert t.totals["fit"] >= 0.0
