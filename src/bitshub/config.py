"""Runtime configuration, read from ``BITSHUB_*`` environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BITSHUB_", env_file=".env", extra="ignore")

    env: str = "development"

    # Local key/value storage (one JSON file per slice)
    storage_dir: Path = Path(".bitshub")

    # Rotating file logs are only written when a directory is configured
    log_dir: Path | None = None

    # The single administrator identity
    admin_email: str = "admin@bitshub.store"
    admin_password: str = "1234567"

    added_to_cart_seconds: float = 2.0
    cancellation_window_hours: int = 24
    delivery_lead_days: int = 7
    payment_method: str = "Card"


@lru_cache
def get_settings() -> Settings:
    return Settings()
