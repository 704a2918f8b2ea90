from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from stockwatch.core.errors import StockwatchError

logger = logging.getLogger(__name__)

_SCAN_JOB_EXCEPTIONS = (OSError, RuntimeError, ValueError, StockwatchError)


@dataclass
class ScanJob:
    name: str
    interval: timedelta
    func: Callable[[], object]
    next_run: Optional[datetime] = None
    last_result: object = None


class ScanScheduler:
    """Runs scan jobs on a fixed interval in one daemon thread.

    A failing run is logged and the job is rescheduled; the next run picks up
    whatever is still pending (alerts are de-duplicated per day, sends are
    at-least-once).
    """

    def __init__(self, *, poll_seconds: int = 30, run_immediately: bool = True):
        self._jobs: list[ScanJob] = []
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._poll_seconds = max(1, int(poll_seconds))
        self._run_immediately = run_immediately

    def add_job(self, name: str, interval_minutes: int, func: Callable[[], object]) -> ScanJob:
        if int(interval_minutes) <= 0:
            raise ValueError("interval_minutes must be positive")
        job = ScanJob(name=name, interval=timedelta(minutes=int(interval_minutes)), func=func)
        now = datetime.now(timezone.utc)
        job.next_run = now if self._run_immediately else now + job.interval
        with self._lock:
            self._jobs.append(job)
        return job

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="scan-scheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info("Scan scheduler started with %d job(s).", len(self._jobs))

    def stop(self) -> None:
        if not self._thread:
            return
        self._stop_event.set()
        self._thread.join(timeout=self._poll_seconds + 1)
        self._thread = None
        logger.info("Scan scheduler stopped.")

    def run_pending(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        with self._lock:
            jobs = list(self._jobs)
        ran = 0
        for job in jobs:
            if job.next_run and now >= job.next_run:
                self._safe_run(job)
                job.next_run = now + job.interval
                ran += 1
        return ran

    @staticmethod
    def _safe_run(job: ScanJob) -> None:
        logger.info("Running scan job: %s", job.name)
        try:
            job.last_result = job.func()
        except _SCAN_JOB_EXCEPTIONS:
            logger.exception("Scan job failed: %s", job.name)

    def run_forever(self) -> None:
        logger.info("Scan scheduler running in foreground with %d job(s).", len(self._jobs))
        self._stop_event.clear()
        self._run()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.run_pending()
            self._stop_event.wait(self._poll_seconds)


def build_scan_scheduler(settings, scan_func: Callable[..., object]) -> ScanScheduler:
    scheduler = ScanScheduler()
    check_type = settings.SCHEDULER_CHECK_TYPE
    scheduler.add_job(
        "scan-{}".format(check_type),
        settings.SCHEDULER_INTERVAL_MINUTES,
        lambda: scan_func(check_type),
    )
    return scheduler


__all__ = ["ScanJob", "ScanScheduler", "build_scan_scheduler"]
