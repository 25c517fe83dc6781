from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./pos_sync.db"
    DB_ECHO: bool = False

    API_BASE_URL: str = "http://localhost:5000"
    API_TOKEN: str = ""

    TENANT_ID: str = "default"
    STORE_ID: str | None = None

    SYNC_BATCH_SIZE: int = 10
    SYNC_BASE_DELAY_MS: int = 5_000
    SYNC_BACKOFF_MULTIPLIER: int = 5
    SYNC_MAX_DELAY_MS: int = 1_800_000
    SYNC_AUTH_COOLDOWN_MS: int = 600_000
    SYNC_PERIODIC_INTERVAL_MS: int = 30_000
    SYNC_REQUEST_TIMEOUT: float = 30.0
    SYNC_MAX_ATTEMPTS: int | None = None

    PROBE_INTERVAL: float = 5.0
    PROBE_PATH: str = "/health"

    REDIS_URL: str | None = None
    NOTIFY_CHANNEL: str = "pos.sync.notifications"

    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = 8765

    LOG_LEVEL: str = "INFO"

    @property
    def periodic_sync_interval(self) -> float:
        return self.SYNC_PERIODIC_INTERVAL_MS / 1000

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
