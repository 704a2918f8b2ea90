from contextlib import asynccontextmanager

from fastapi import FastAPI

from stockwatch.config import Settings, get_settings
from stockwatch.core.logging import setup_logging
from stockwatch.database import init_db
from stockwatch.routers import health_router, scans_router
from stockwatch.scheduler import build_scan_scheduler
from stockwatch.services.scan_service import run_scan

setup_logging()
settings: Settings = get_settings()

init_db()

scan_scheduler = build_scan_scheduler(settings, run_scan)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.SCHEDULER_ENABLED:
        scan_scheduler.start()
    try:
        yield
    finally:
        scan_scheduler.stop()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(scans_router)


__all__ = ["app"]
