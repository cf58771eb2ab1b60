# inkbook/core/config.py

from datetime import time
from functools import lru_cache
import urllib.parse

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from .env; ignore unknown keys so extra lines don't crash startup
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Postgres ---
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "inkbook"
    POSTGRES_USER: str = "inkbook"
    POSTGRES_PASSWORD: str = ""
    # Full async URL override, e.g. sqlite+aiosqlite:///./inkbook.db
    DATABASE_URL: str | None = None
    REPOSITORY_TIMEOUT_SECONDS: float = 5.0
    # create_all at startup (local sqlite and tests); production uses Alembic
    AUTO_CREATE_TABLES: bool = False

    # --- Shop ---
    SHOP_TIMEZONE: str = "America/Edmonton"
    SHOP_OPEN_TIME: time = time(10, 0)
    SHOP_CLOSE_TIME: time = time(20, 0)
    SLOT_INTERVAL_MIN: int = 30
    CANCELLATION_NOTICE_HOURS: int = 24

    # --- Security ---
    ADMIN_API_KEY: str | None = None

    # --- Monitoring & Logging ---
    APP_ENV: str = "production"
    LOG_LEVEL: str = "INFO"
    LOG_REQUESTS: bool = False
    LOG_RESPONSES: bool = False
    MAX_LOG_LENGTH: int = 200
    SLOW_REQUEST_THRESHOLD: float = 2.0

    ALLOWED_CORS_ORIGINS: str = "*"  # comma-separated list

    # Sync URI (Alembic)
    @property
    def sync_db_uri(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL.replace("+asyncpg", "").replace("+aiosqlite", "")
        pwd = urllib.parse.quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql://{self.POSTGRES_USER}:{pwd}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Async URI (SQLAlchemy engine)
    @property
    def async_db_uri(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        pwd = urllib.parse.quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{pwd}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() in ("development", "dev", "local")


@lru_cache
def get_settings() -> Settings:
    return Settings()
