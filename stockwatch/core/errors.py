from typing import Optional


class StockwatchError(Exception):
    """Base class for errors raised by the scan and dispatch pipeline."""


class SourceUnavailable(StockwatchError):
    """The product source could not be queried; the sub-scan is aborted."""


class RecordingFailed(StockwatchError):
    """The alert store rejected an insert for a reason other than a duplicate."""


class ChannelUnconfigured(StockwatchError):
    """A channel has no transport credential; sends through it are skipped."""


class TransportError(StockwatchError):
    """Provider-level failure: non-2xx response or network error."""

    def __init__(self, message: str, *, retryable: bool = True, status_code: Optional[int] = None):
        super().__init__(message)
        self.retryable = retryable
        self.status_code = status_code


__all__ = [
    "ChannelUnconfigured",
    "RecordingFailed",
    "SourceUnavailable",
    "StockwatchError",
    "TransportError",
]
