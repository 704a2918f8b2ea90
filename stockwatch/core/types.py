from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class CheckType(str, Enum):
    EXPIRY = "expiry"
    LOW_STOCK = "low_stock"
    ALL = "all"


class AlertCategory(str, Enum):
    EXPIRY = "Expiry"
    LOW_STOCK = "LowStock"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(str, Enum):
    NEW = "New"
    ACKNOWLEDGED = "Acknowledged"
    RESOLVED = "Resolved"


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"


class OutcomeStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"
    NOT_ATTEMPTED = "not_attempted"


class RecordStatus(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


CHECK_CATEGORIES = {
    CheckType.EXPIRY: (AlertCategory.EXPIRY,),
    CheckType.LOW_STOCK: (AlertCategory.LOW_STOCK,),
    CheckType.ALL: (AlertCategory.EXPIRY, AlertCategory.LOW_STOCK),
}


@dataclass(frozen=True)
class ProductRecord:
    id: int
    name: str
    sku: str
    quantity: float
    unit: str
    reorder_level: float
    location: str
    expires_at: Optional[datetime] = None
    supplier_id: Optional[int] = None


@dataclass(frozen=True)
class SupplierContact:
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class Candidate:
    product: ProductRecord
    supplier: Optional[SupplierContact]
    category: AlertCategory
    index: int = 0
    days_until_expiry: Optional[int] = None


@dataclass(frozen=True)
class Message:
    subject: str
    body: str


@dataclass(frozen=True)
class DispatchOutcome:
    product_id: int
    product_name: str
    channel: Channel
    status: OutcomeStatus
    timestamp: datetime
    candidate_index: int
    target: Optional[str] = None
    error: Optional[str] = None
    retry_count: int = 0
    recording_warning: Optional[str] = None


@dataclass(frozen=True)
class AlertRecord:
    product_id: int
    category: AlertCategory
    status: RecordStatus
    severity: Optional[Severity] = None
    detail: Optional[str] = None


@dataclass(frozen=True)
class ScanReport:
    category: AlertCategory
    started_at: datetime
    finished_at: datetime
    candidates_scanned: int
    outcomes: tuple = ()
    alerts: tuple = ()
    counts: dict = field(default_factory=dict)
    totals: dict = field(default_factory=dict)
    timed_out: bool = False
    aborted: bool = False
    abort_reason: Optional[str] = None

    @property
    def recording_warnings(self) -> dict:
        return {
            record.product_id: record.detail
            for record in self.alerts
            if record.status == RecordStatus.FAILED
        }

    @property
    def status(self) -> str:
        return report_status(self.totals, aborted=self.aborted)


@dataclass(frozen=True)
class ScanRunReport:
    check_type: CheckType
    started_at: datetime
    finished_at: datetime
    reports: tuple = ()
    totals: dict = field(default_factory=dict)

    @property
    def aborted(self) -> dict:
        return {
            report.category.value: report.abort_reason
            for report in self.reports
            if report.aborted
        }

    @property
    def outcomes(self) -> tuple:
        merged = []
        for report in self.reports:
            merged.extend(report.outcomes)
        return tuple(merged)

    @property
    def status(self) -> str:
        aborted = [report for report in self.reports if report.aborted]
        if aborted and len(aborted) == len(self.reports):
            return "aborted"
        status = report_status(self.totals)
        if aborted and status == "completed":
            return "partial"
        return status


def report_status(totals: dict, *, aborted: bool = False) -> str:
    """Summarise a report without hiding partial failure."""
    sent = totals.get(OutcomeStatus.SENT.value, 0)
    unfinished = totals.get(OutcomeStatus.FAILED.value, 0) + totals.get(
        OutcomeStatus.NOT_ATTEMPTED.value, 0
    )
    if aborted and not sent and not unfinished and not totals.get(OutcomeStatus.SKIPPED.value, 0):
        return "aborted"
    if unfinished or aborted:
        return "partial" if sent else "failed"
    return "completed"


__all__ = [
    "AlertCategory",
    "AlertRecord",
    "AlertStatus",
    "CHECK_CATEGORIES",
    "Candidate",
    "Channel",
    "CheckType",
    "DispatchOutcome",
    "Message",
    "OutcomeStatus",
    "ProductRecord",
    "RecordStatus",
    "ScanReport",
    "ScanRunReport",
    "Severity",
    "SupplierContact",
    "report_status",
]
