from stockwatch.services.alert_recorder import AlertRecorder, SqlAlertStore
from stockwatch.services.dispatcher import NotificationDispatcher, RetryPolicy
from stockwatch.services.expiry_scanner import ExpiryScanner
from stockwatch.services.product_source import SqlProductSource
from stockwatch.services.scan_service import ScanOrchestrator, build_orchestrator, run_scan

__all__ = [
    "AlertRecorder",
    "ExpiryScanner",
    "NotificationDispatcher",
    "RetryPolicy",
    "ScanOrchestrator",
    "SqlAlertStore",
    "SqlProductSource",
    "build_orchestrator",
    "run_scan",
]
