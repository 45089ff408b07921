# =============================================================================
# REALM BEOBACHTER - SCHEDULER
# =============================================================================
#
# Fixed-interval timer for the notifier tick.
#
# - First run fires immediately on start
# - Next runs fire every interval on a monotonic clock (robust against
#   system time changes)
# - Each run gets its own daemon thread: a slow run never delays the timer,
#   so runs may overlap (unguarded)
# - An exception in a run is logged and counted; later runs are unaffected
#
# =============================================================================

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class SchedulerStats:
    """Counters across the lifetime of the scheduler."""
    started: int = 0
    succeeded: int = 0
    failed: int = 0
    last_error: Optional[str] = None
    last_run_at: Optional[str] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, error: Optional[BaseException] = None) -> None:
        with self._lock:
            if error is None:
                self.succeeded += 1
            else:
                self.failed += 1
                self.last_error = f"{type(error).__name__}: {error}"


class Scheduler:
    """
    Runs a job now and then every interval_seconds until stopped.

    Args:
        job: Callable without arguments (one tick)
        interval_seconds: Time between run starts
        name: Name used in logs and thread names
        max_runs: Stop after this many started runs (None = forever)
    """

    def __init__(
        self,
        job: Callable[[], object],
        interval_seconds: float,
        name: str = "notifier",
        max_runs: Optional[int] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.job = job
        self.interval_seconds = interval_seconds
        self.name = name
        self.max_runs = max_runs
        self.stats = SchedulerStats()
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    def _safe_run(self, run_number: int) -> None:
        """Execute one run. Never raises."""
        logger.debug(f"{self.name} run #{run_number} started")
        try:
            self.job()
        except Exception as e:
            self.stats.record(e)
            logger.exception(f"{self.name} run #{run_number} failed: {e}")
            return
        self.stats.record()
        logger.debug(f"{self.name} run #{run_number} finished")

    def _launch(self) -> threading.Thread:
        self.stats.started += 1
        self.stats.last_run_at = datetime.now().isoformat()
        thread = threading.Thread(
            target=self._safe_run,
            args=(self.stats.started,),
            name=f"{self.name}-run-{self.stats.started}",
            daemon=True,
        )
        thread.start()
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        return thread

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def run_forever(self) -> SchedulerStats:
        """
        Block and fire runs until stop() is called, max_runs is reached or
        the process is interrupted.

        Returns:
            Final SchedulerStats
        """
        logger.info(f"Scheduler '{self.name}' started: every {self.interval_seconds:g}s")

        next_run = time.monotonic()
        try:
            while not self._stop.is_set():
                self._launch()

                if self.max_runs is not None and self.stats.started >= self.max_runs:
                    break

                next_run += self.interval_seconds
                # Event.wait returns early if stop() is called
                self._stop.wait(max(0.0, next_run - time.monotonic()))

        except KeyboardInterrupt:
            logger.info("Scheduler stopped by user")
        finally:
            self._stop.set()

        logger.info(
            f"Scheduler '{self.name}' stopped: {self.stats.started} runs, "
            f"{self.stats.failed} failed"
        )
        return self.stats

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for runs still in flight (used by tests)."""
        for thread in list(self._threads):
            thread.join(timeout)
