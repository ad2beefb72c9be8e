from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Shop Ledger"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./shopledger.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None
    JWT_ISSUER: Optional[str] = None
    DEFAULT_USER_ID: str = "owner"

    # ==============================
    # Live subscriptions
    # ==============================
    SUBSCRIPTION_WATCH_ENABLED: bool = True
    SUBSCRIPTION_POLL_SECONDS: float = 2.0
    SUBSCRIPTION_RETRY_SECONDS: float = 1.0
    SUBSCRIPTION_MAX_BACKOFF_SECONDS: float = 60.0

    # ==============================
    # Views
    # ==============================
    RECENT_EXPENSES_LIMIT: int = 20


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
