import threading
import time

import pytest

from lnexplorer.core.scheduler import DeterministicScheduler, PeriodicWorker


def test_scheduler_rejects_non_positive_cadence():
    with pytest.raises(ValueError):
        DeterministicScheduler(0)


def test_first_tick_is_immediate_unless_skipped():
    s = DeterministicScheduler(60_000)
    t0 = time.monotonic()
    assert s.wait_next_tick() is True
    assert time.monotonic() - t0 < 1.0

    stop = threading.Event()
    stop.set()
    assert DeterministicScheduler(60_000, skip_first=True).wait_next_tick(stop) is False


def test_worker_survives_failing_cycles_and_stops(capsys):
    ran = threading.Event()
    calls = []

    def task():
        calls.append(1)
        if len(calls) >= 3:
            ran.set()
        raise RuntimeError("cycle failed")

    w = PeriodicWorker("test-worker", 10, task)
    w.start()
    assert ran.wait(5)
    w.stop(5)

    assert not w.running
    assert len(calls) >= 3
    assert "worker_unhandled_exception" in capsys.readouterr().out


def test_delayed_worker_does_not_run_before_first_interval():
    calls = []
    w = PeriodicWorker("late", 60_000, lambda: calls.append(1), run_immediately=False)
    w.start()
    time.sleep(0.05)
    w.stop(5)
    assert calls == []


def test_overrun_drops_missed_ticks():
    s = DeterministicScheduler(50)
    assert s.wait_next_tick() is True
    # work overran about four ticks
    time.sleep(0.22)

    t0 = time.monotonic()
    assert s.wait_next_tick() is True
    assert time.monotonic() - t0 < 0.04
    # the next tick lies ahead on the original grid, not in the past
    assert s.next_tick_time() > time.monotonic()
