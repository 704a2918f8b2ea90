from dataclasses import replace

from stockwatch.core.types import OutcomeStatus, RecordStatus, ScanReport

STATUS_KEYS = tuple(status.value for status in OutcomeStatus)


def empty_counts():
    return {key: 0 for key in STATUS_KEYS}


def count_outcomes(outcomes, channels=()):
    """Per-channel status counts plus totals across channels."""
    counts = {channel.value: empty_counts() for channel in channels}
    totals = empty_counts()
    for outcome in outcomes:
        per_channel = counts.setdefault(outcome.channel.value, empty_counts())
        per_channel[outcome.status.value] += 1
        totals[outcome.status.value] += 1
    return counts, totals


def merge_totals(reports):
    totals = empty_counts()
    for report in reports:
        for key, value in report.totals.items():
            totals[key] = totals.get(key, 0) + value
    return totals


def aggregate(
    *,
    category,
    started_at,
    finished_at,
    candidates,
    outcomes,
    alerts=(),
    channels=(),
    timed_out=False,
):
    """Assemble a ScanReport in candidate order. Pure; no I/O."""
    channel_rank = {channel: rank for rank, channel in enumerate(channels)}
    warnings = {
        record.product_id: record.detail or "alert recording failed"
        for record in alerts
        if record.status == RecordStatus.FAILED
    }

    ordered = sorted(
        outcomes,
        key=lambda outcome: (
            outcome.candidate_index,
            channel_rank.get(outcome.channel, len(channel_rank)),
            outcome.channel.value,
        ),
    )
    ordered = [
        replace(outcome, recording_warning=warnings[outcome.product_id])
        if outcome.product_id in warnings
        else outcome
        for outcome in ordered
    ]

    record_order = {candidate.product.id: candidate.index for candidate in candidates}
    ordered_alerts = sorted(alerts, key=lambda record: record_order.get(record.product_id, len(record_order)))

    counts, totals = count_outcomes(ordered, channels)
    return ScanReport(
        category=category,
        started_at=started_at,
        finished_at=finished_at,
        candidates_scanned=len(candidates),
        outcomes=tuple(ordered),
        alerts=tuple(ordered_alerts),
        counts=counts,
        totals=totals,
        timed_out=timed_out,
    )


def aborted_report(*, category, started_at, finished_at, reason):
    return ScanReport(
        category=category,
        started_at=started_at,
        finished_at=finished_at,
        candidates_scanned=0,
        totals=empty_counts(),
        aborted=True,
        abort_reason=reason,
    )


__all__ = ["aborted_report", "aggregate", "count_outcomes", "empty_counts", "merge_totals"]
