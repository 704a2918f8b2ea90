import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from stockwatch.config import get_settings
from stockwatch.core.dates import utc_now
from stockwatch.core.errors import SourceUnavailable
from stockwatch.core.severity_rules import alert_severity
from stockwatch.core.types import (
    CHECK_CATEGORIES,
    AlertRecord,
    CheckType,
    OutcomeStatus,
    RecordStatus,
    ScanRunReport,
)
from stockwatch.notifications.factory import build_channels
from stockwatch.services.aggregator import aborted_report, aggregate, merge_totals
from stockwatch.services.alert_recorder import AlertRecorder, SqlAlertStore
from stockwatch.services.dispatcher import NotificationDispatcher, RetryPolicy
from stockwatch.services.expiry_scanner import ExpiryScanner
from stockwatch.services.product_source import SqlProductSource

logger = logging.getLogger(__name__)


class ScanOrchestrator:
    """Runs scan, alert recording, dispatch and aggregation for one request.

    A source failure aborts only the sub-scan it happened in. Recording and
    send failures never escape; they end up as per-item results in the report.
    """

    def __init__(
        self,
        *,
        scanner,
        recorder,
        dispatcher,
        window_days=90,
        timeout_seconds=120.0,
        high_within_days=30,
        recording_grace_seconds=5.0,
        clock=utc_now,
        monotonic=time.monotonic,
    ):
        self._scanner = scanner
        self._recorder = recorder
        self._dispatcher = dispatcher
        self._window_days = window_days
        self._timeout_seconds = timeout_seconds
        self._high_within_days = high_within_days
        self._recording_grace_seconds = float(recording_grace_seconds)
        self._clock = clock
        self._monotonic = monotonic

    def severity_for(self, candidate):
        return alert_severity(candidate, self._high_within_days)

    def run_scan(self, check_type=CheckType.ALL, window_days=None, timeout_seconds=None):
        check_type = CheckType(check_type)
        if window_days is None:
            window_days = self._window_days
        if int(window_days) <= 0:
            raise ValueError("window_days must be a positive integer")
        if timeout_seconds is None:
            timeout_seconds = self._timeout_seconds

        deadline = None
        if timeout_seconds:
            deadline = self._monotonic() + float(timeout_seconds)

        started_at = self._clock()
        reports = []
        failures = []
        for category in CHECK_CATEGORIES[check_type]:
            try:
                reports.append(self.scan_category(category, int(window_days), deadline))
            except SourceUnavailable as exc:
                if check_type != CheckType.ALL:
                    raise
                logger.error("%s scan aborted: %s", category.value, exc)
                failures.append(exc)
                reports.append(
                    aborted_report(
                        category=category,
                        started_at=started_at,
                        finished_at=self._clock(),
                        reason=str(exc),
                    )
                )

        if failures and len(failures) == len(reports):
            raise failures[0]

        report = ScanRunReport(
            check_type=check_type,
            started_at=started_at,
            finished_at=self._clock(),
            reports=tuple(reports),
            totals=merge_totals(reports),
        )
        logger.info("Scan %s finished with status %s: %s", check_type.value, report.status, report.totals)
        return report

    def scan_category(self, category, window_days, deadline=None):
        started_at = self._clock()
        logger.info("Scanning for %s candidates (window=%d days)", category.value, window_days)
        candidates = self._scanner.scan(window_days, category)

        day = started_at.date()
        recorded = []
        recorder_pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="alert-recorder")
        try:
            recording = recorder_pool.submit(
                self._recorder.record_all, candidates, self.severity_for, day, recorded
            )
            outcomes = self._dispatcher.dispatch_all(candidates, deadline=deadline)
            alerts = self._await_recording(recording, recorded, candidates, deadline)
        finally:
            recorder_pool.shutdown(wait=False)

        timed_out = any(outcome.status == OutcomeStatus.NOT_ATTEMPTED for outcome in outcomes)
        if deadline is not None and self._monotonic() >= deadline:
            timed_out = True

        return aggregate(
            category=category,
            started_at=started_at,
            finished_at=self._clock(),
            candidates=candidates,
            outcomes=outcomes,
            alerts=alerts,
            channels=self._dispatcher.channels,
            timed_out=timed_out,
        )

    def _await_recording(self, recording, recorded, candidates, deadline):
        """Wait for alert recording until the deadline plus the grace period.

        Candidates still unrecorded by then are reported failed; the recorder
        thread is left to finish on its own.
        """
        timeout = None
        if deadline is not None:
            timeout = max(deadline - self._monotonic(), 0.0) + self._recording_grace_seconds
        try:
            return recording.result(timeout=timeout)
        except FutureTimeout:
            done = list(recorded)
            logger.error(
                "Alert recording unfinished at scan deadline: %d of %d candidate(s) recorded",
                len(done),
                len(candidates),
            )
            return done + [
                AlertRecord(
                    product_id=candidate.product.id,
                    category=candidate.category,
                    status=RecordStatus.FAILED,
                    severity=self.severity_for(candidate),
                    detail="alert recording did not finish before the scan deadline",
                )
                for candidate in candidates[len(done):]
            ]


def build_orchestrator(settings=None, session_factory=None, channels=None):
    settings = settings or get_settings()
    if channels is None:
        channels = build_channels(settings)
    dispatcher = NotificationDispatcher(
        channels,
        max_workers=settings.DISPATCH_MAX_WORKERS,
        retry_policy=RetryPolicy(
            max_attempts=settings.DISPATCH_MAX_ATTEMPTS,
            backoff_seconds=settings.DISPATCH_BACKOFF_SECONDS,
            max_backoff_seconds=settings.DISPATCH_MAX_BACKOFF_SECONDS,
        ),
    )
    return ScanOrchestrator(
        scanner=ExpiryScanner(SqlProductSource(session_factory)),
        recorder=AlertRecorder(SqlAlertStore(session_factory)),
        dispatcher=dispatcher,
        window_days=settings.SCAN_WINDOW_DAYS,
        timeout_seconds=settings.SCAN_TIMEOUT_SECONDS,
        high_within_days=settings.SEVERITY_HIGH_WITHIN_DAYS,
        recording_grace_seconds=settings.SCAN_RECORDING_GRACE_SECONDS,
    )


def run_scan(check_type=CheckType.ALL, window_days=None, timeout_seconds=None, *, orchestrator=None):
    orchestrator = orchestrator or build_orchestrator()
    return orchestrator.run_scan(check_type, window_days=window_days, timeout_seconds=timeout_seconds)


__all__ = ["ScanOrchestrator", "build_orchestrator", "run_scan"]
