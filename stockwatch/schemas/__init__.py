from stockwatch.schemas.scan import (
    AlertRecordRead,
    DispatchOutcomeRead,
    ScanReportRead,
    ScanRequest,
    ScanRunRead,
)

__all__ = [
    "AlertRecordRead",
    "DispatchOutcomeRead",
    "ScanReportRead",
    "ScanRequest",
    "ScanRunRead",
]
