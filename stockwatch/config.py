from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Stockwatch Alert Dispatch"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./stockwatch.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Email (Resend)
    # ==============================
    RESEND_API_URL: str = "https://api.resend.com/emails"
    RESEND_API_KEY: Optional[str] = None
    EMAIL_FROM: str = "Stockwatch <alerts@stockwatch.local>"

    # ==============================
    # SMS (Twilio)
    # ==============================
    TWILIO_API_BASE_URL: str = "https://api.twilio.com/2010-04-01"
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_FROM_NUMBER: Optional[str] = None

    # ==============================
    # Dispatch
    # ==============================
    NOTIFY_CHANNELS: str = "email,sms"
    TRANSPORT_TIMEOUT_SECONDS: float = 15.0
    DISPATCH_MAX_WORKERS: int = 8
    DISPATCH_MAX_ATTEMPTS: int = 3
    DISPATCH_BACKOFF_SECONDS: float = 0.5
    DISPATCH_MAX_BACKOFF_SECONDS: float = 8.0

    # ==============================
    # Scan
    # ==============================
    SCAN_WINDOW_DAYS: int = 90
    SCAN_TIMEOUT_SECONDS: float = 120.0
    SCAN_RECORDING_GRACE_SECONDS: float = 5.0
    SEVERITY_HIGH_WITHIN_DAYS: int = 30

    # ==============================
    # Scheduler
    # ==============================
    SCHEDULER_ENABLED: bool = False
    SCHEDULER_INTERVAL_MINUTES: int = 1440
    SCHEDULER_CHECK_TYPE: str = "all"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
