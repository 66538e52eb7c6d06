"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models.config import EngineConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Redis (history log, snapshots, last notified signal)
    redis_url: str = "redis://localhost:6379/0"

    # Metric sources and manual fallback values
    metrics_config_path: str = "metrics.yaml"
    fetch_timeout_seconds: float = 5.0

    # Refresh cadences
    price_refresh_seconds: float = 60
    sentiment_refresh_seconds: float = 3600
    money_supply_refresh_seconds: float = 86400
    auto_refresh: bool = True

    # Notifications (empty webhook URL = not configured)
    notify_webhook_url: str = ""
    notify_recipient: str = ""
    notify_cooldown_hours: float = 4.0

    # History
    history_retention_days: int = 90

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    def engine_config(self) -> EngineConfig:
        """Time-window parameters for the core engine."""
        return EngineConfig(
            notify_cooldown_hours=self.notify_cooldown_hours,
            history_retention_days=self.history_retention_days,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
