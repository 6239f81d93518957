from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    TICKETS_API_URL: str = "http://localhost:3001/api"
    TICKETS_API_TOKEN: str | None = None
    HTTP_TIMEOUT_SECONDS: float = 30.0

    POLL_INTERVAL_SECONDS: float = 3.0
    RATE_LIMIT_COOLDOWN_SECONDS: float = 120.0
    POLLER_AUTOSTART: bool = True

    NOTIFICATION_CAPACITY: int = 100
    ACTIVITY_HISTORY_LIMIT: int = 100
    STALE_AFTER_SECONDS: float = 60.0

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    CORS_ORIGINS: list[str] = ["*"]

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
