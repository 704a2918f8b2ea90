from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from stockwatch.core.types import (
    AlertCategory,
    Channel,
    CheckType,
    OutcomeStatus,
    RecordStatus,
    Severity,
)


class ScanRequest(BaseModel):
    check_type: CheckType = CheckType.ALL
    window_days: Optional[int] = Field(None, gt=0)
    timeout_seconds: Optional[float] = Field(None, gt=0)


class DispatchOutcomeRead(BaseModel):
    product_id: int
    product_name: str
    channel: Channel
    status: OutcomeStatus
    target: Optional[str]
    error: Optional[str]
    retry_count: int
    recording_warning: Optional[str]
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class AlertRecordRead(BaseModel):
    product_id: int
    category: AlertCategory
    status: RecordStatus
    severity: Optional[Severity]
    detail: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class ScanReportRead(BaseModel):
    category: AlertCategory
    status: str
    started_at: datetime
    finished_at: datetime
    candidates_scanned: int
    timed_out: bool
    aborted: bool
    abort_reason: Optional[str]
    counts: Dict[str, Dict[str, int]]
    totals: Dict[str, int]
    recording_warnings: Dict[int, Optional[str]]
    outcomes: List[DispatchOutcomeRead]
    alerts: List[AlertRecordRead]

    model_config = ConfigDict(from_attributes=True)


class ScanRunRead(BaseModel):
    check_type: CheckType
    status: str
    started_at: datetime
    finished_at: datetime
    totals: Dict[str, int]
    aborted: Dict[str, Optional[str]]
    reports: List[ScanReportRead]

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "AlertRecordRead",
    "DispatchOutcomeRead",
    "ScanReportRead",
    "ScanRequest",
    "ScanRunRead",
]
