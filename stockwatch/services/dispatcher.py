"""Fan-out of candidate notifications over the configured channels.

Every (candidate, channel) pair yields exactly one DispatchOutcome. Sends run
on a fixed thread pool; the pool size is the in-flight bound and the dispatch
call returns only after every submitted send has resolved or been cancelled.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass

from stockwatch.core.dates import utc_now
from stockwatch.core.errors import ChannelUnconfigured, TransportError
from stockwatch.core.types import DispatchOutcome, OutcomeStatus
from stockwatch.notifications.messages import build_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_seconds: float = 0.5
    max_backoff_seconds: float = 8.0

    def delay(self, attempt: int) -> float:
        return min(self.backoff_seconds * (2 ** (attempt - 1)), self.max_backoff_seconds)


def _outcome(candidate, channel, status, *, target=None, error=None, retry_count=0):
    return DispatchOutcome(
        product_id=candidate.product.id,
        product_name=candidate.product.name,
        channel=channel,
        status=status,
        timestamp=utc_now(),
        candidate_index=candidate.index,
        target=target,
        error=error,
        retry_count=retry_count,
    )


class NotificationDispatcher:
    def __init__(
        self,
        channels,
        *,
        max_workers=8,
        retry_policy=None,
        message_builder=build_message,
        sleep=time.sleep,
        clock=time.monotonic,
    ):
        if isinstance(channels, dict):
            adapters = list(channels.values())
        else:
            adapters = list(channels)
        self._channels = {adapter.channel: adapter for adapter in adapters}
        self._max_workers = max(1, int(max_workers))
        self._retry = retry_policy or RetryPolicy()
        self._build_message = message_builder
        self._sleep = sleep
        self._clock = clock

    @property
    def channels(self):
        return list(self._channels)

    def dispatch_all(self, candidates, deadline=None):
        """Send every candidate over every channel; returns outcomes in completion order.

        ``deadline`` is a ``clock()`` value. Sends still queued when it passes
        are cancelled and reported as not attempted.
        """
        outcomes = []
        jobs = []
        for candidate in candidates:
            for channel, adapter in self._channels.items():
                target = adapter.resolve_target(candidate.supplier)
                if target is None:
                    if candidate.supplier is None:
                        reason = "no supplier on record"
                    else:
                        reason = "supplier has no {} contact".format(channel.value)
                    outcomes.append(_outcome(candidate, channel, OutcomeStatus.SKIPPED, error=reason))
                    continue
                jobs.append((candidate, adapter, target))

        if not jobs:
            return outcomes

        workers = min(self._max_workers, len(jobs))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dispatch") as pool:
            futures = {
                pool.submit(self._deliver, candidate, adapter, target, deadline): (candidate, adapter, target)
                for candidate, adapter, target in jobs
            }
            timeout = None if deadline is None else max(0.0, deadline - self._clock())
            _done, pending = wait(futures, timeout=timeout)

            running = []
            for future in pending:
                if future.cancel():
                    candidate, adapter, target = futures[future]
                    outcomes.append(
                        _outcome(
                            candidate,
                            adapter.channel,
                            OutcomeStatus.NOT_ATTEMPTED,
                            target=target,
                            error="scan deadline reached before send",
                        )
                    )
                else:
                    running.append(future)
            if running:
                logger.warning("Deadline reached; waiting for %d in-flight send(s)", len(running))
                wait(running)

            for future in futures:
                if not future.cancelled():
                    outcomes.append(future.result())

        return outcomes

    def _deadline_passed(self, deadline, extra=0.0):
        return deadline is not None and self._clock() + extra > deadline

    def _deliver(self, candidate, adapter, target, deadline):
        channel = adapter.channel
        if self._deadline_passed(deadline):
            return _outcome(
                candidate,
                channel,
                OutcomeStatus.NOT_ATTEMPTED,
                target=target,
                error="scan deadline reached before send",
            )

        attempt = 0
        try:
            message = self._build_message(candidate, channel)
            while True:
                attempt += 1
                try:
                    adapter.send(target, message.subject, message.body)
                    return _outcome(
                        candidate, channel, OutcomeStatus.SENT, target=target, retry_count=attempt - 1
                    )
                except ChannelUnconfigured as exc:
                    return _outcome(
                        candidate,
                        channel,
                        OutcomeStatus.SKIPPED,
                        target=target,
                        error=str(exc),
                        retry_count=attempt - 1,
                    )
                except TransportError as exc:
                    if not exc.retryable or attempt >= self._retry.max_attempts:
                        logger.warning(
                            "%s send for product %s failed after %d attempt(s): %s",
                            channel.value,
                            candidate.product.id,
                            attempt,
                            exc,
                        )
                        return _outcome(
                            candidate,
                            channel,
                            OutcomeStatus.FAILED,
                            target=target,
                            error=str(exc),
                            retry_count=attempt - 1,
                        )
                    delay = self._retry.delay(attempt)
                    if self._deadline_passed(deadline, delay):
                        return _outcome(
                            candidate,
                            channel,
                            OutcomeStatus.FAILED,
                            target=target,
                            error="{}; scan deadline reached after {} attempt(s)".format(exc, attempt),
                            retry_count=attempt - 1,
                        )
                    logger.info(
                        "Retrying %s send for product %s in %.2fs (attempt %d): %s",
                        channel.value,
                        candidate.product.id,
                        delay,
                        attempt,
                        exc,
                    )
                    self._sleep(delay)
        except Exception as exc:
            logger.exception("Unexpected %s send error for product %s", channel.value, candidate.product.id)
            return _outcome(
                candidate,
                channel,
                OutcomeStatus.FAILED,
                target=target,
                error="{}: {}".format(type(exc).__name__, exc),
                retry_count=max(0, attempt - 1),
            )


__all__ = ["NotificationDispatcher", "RetryPolicy"]
