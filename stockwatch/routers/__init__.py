from stockwatch.routers.health import router as health_router
from stockwatch.routers.scans import router as scans_router

__all__ = ["health_router", "scans_router"]
