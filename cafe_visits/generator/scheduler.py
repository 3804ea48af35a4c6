import logging
import math
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FixedRateScheduler:
    """Runs a task on a daemon thread at a fixed rate.

    Ticks are due at ``start + delay + k * interval``. A tick that overruns
    its slot makes the scheduler drop the missed slots and wait for the next
    future one, so late ticks never pile up.
    """

    def __init__(
        self,
        task: Callable[[], object],
        interval: float,
        delay: float = 0.0,
        name: str = "visit-generator",
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive: {interval}")
        if delay < 0:
            raise ValueError(f"delay must not be negative: {delay}")
        self.task = task
        self.interval = interval
        self.delay = delay
        self.name = name
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.ticks = 0
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            raise RuntimeError(f"Scheduler {self.name} is already running")
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info(
            f"Scheduler {self.name} started (delay={self.delay}s, interval={self.interval}s)"
        )

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info(f"Scheduler {self.name} stopped after {self.ticks} ticks")

    def _loop(self) -> None:
        next_run = self._clock() + self.delay
        while not self._stop.wait(max(0.0, next_run - self._clock())):
            try:
                self.task()
            except Exception:
                logger.exception(f"Scheduled task {self.name} failed")
            self.ticks += 1
            next_run = self._next_slot(next_run, self._clock())

    def _next_slot(self, last_slot: float, now: float) -> float:
        next_run = last_slot + self.interval
        if now > next_run:
            missed = math.floor((now - next_run) / self.interval) + 1
            self.dropped += missed
            logger.warning(f"Scheduler {self.name} overran, dropping {missed} tick(s)")
            next_run += missed * self.interval
        return next_run
