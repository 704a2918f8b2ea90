from stockwatch.scheduler.scan_scheduler import ScanJob, ScanScheduler, build_scan_scheduler

__all__ = ["ScanJob", "ScanScheduler", "build_scan_scheduler"]
