from __future__ import annotations

import threading
import time
import traceback
from typing import Callable, Optional

from lnexplorer.core.events import describe_error, print_event


class DeterministicScheduler:
    """
    Drift-free scheduler: tick k occurs at t0 + k * cadence.
    Uses monotonic time for determinism and stability.

    With skip_first=False the first tick fires immediately.
    """

    def __init__(self, tick_ms: int, skip_first: bool = False) -> None:
        if tick_ms <= 0:
            raise ValueError("tick_ms must be > 0")
        self._cadence_s = tick_ms / 1000.0
        self._t0 = time.monotonic()
        self._k = 1 if skip_first else 0

    def next_tick_time(self) -> float:
        return self._t0 + (self._k * self._cadence_s)

    def wait_next_tick(self, stop: Optional[threading.Event] = None) -> bool:
        """
        Sleeps until the next tick. Returns False if `stop` was set while waiting.
        A late caller (previous work overran the cadence) returns immediately,
        once; ticks missed during the overrun are dropped, not replayed.
        """
        target = self.next_tick_time()
        now = time.monotonic()
        sleep_s = max(0.0, target - now)
        if stop is not None:
            if stop.wait(sleep_s):
                return False
        elif sleep_s > 0:
            time.sleep(sleep_s)
        self._k += 1
        now = time.monotonic()
        while self.next_tick_time() <= now:
            self._k += 1
        return True


class PeriodicWorker:
    """
    Runs `task` on its own daemon thread at a fixed cadence until stopped.
    A failing cycle is logged and the schedule continues.
    """

    def __init__(self, name: str, interval_ms: int, task: Callable[[], object], run_immediately: bool = True) -> None:
        self.name = name
        self._interval_ms = interval_ms
        self._task = task
        self._run_immediately = run_immediately
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.cycles = 0

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"worker '{self.name}' already started")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout_s: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout_s)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        scheduler = DeterministicScheduler(self._interval_ms, skip_first=not self._run_immediately)
        while scheduler.wait_next_tick(self._stop):
            try:
                self._task()
            except Exception as e:
                print_event("worker_unhandled_exception", {"worker": self.name, "error": describe_error(e)})
                traceback.print_exc()
            self.cycles += 1
