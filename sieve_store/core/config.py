"""Application configuration using pydantic settings with structured sections."""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./sieve.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    # Only used for sqlite: how each transaction is opened.
    sqlite_begin: Literal["DEFERRED", "IMMEDIATE", "EXCLUSIVE"] = "IMMEDIATE"


class QuotaSettings(BaseModel):
    # Seeded as the default quota by init_quota.py when none is stored yet.
    default_limit: Optional[int] = Field(default=None, ge=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False

    database: DatabaseSettings = DatabaseSettings()
    quota: QuotaSettings = QuotaSettings()
    log: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def default_quota_limit(self) -> Optional[int]:
        return self.quota.default_limit


def configure_logging(settings: "Settings | None" = None) -> None:
    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log.level.upper()
    logging.basicConfig(level=level, format=settings.log.format)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
