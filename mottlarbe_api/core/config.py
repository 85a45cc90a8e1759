"""Runtime configuration."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    OTHER = "other"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Read once at process start and never mutated afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    port: int = Field(default=9555, alias="PORT", ge=0, le=65535)
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")
    node_env: str = Field(default="development", alias="NODE_ENV")
    host: str = Field(default="0.0.0.0", alias="HOST")
    log_level: str = Field(default="info", alias="LOG_LEVEL")

    api_prefix: ClassVar[str] = "/api"

    @property
    def environment(self) -> Environment:
        try:
            return Environment(self.node_env)
        except ValueError:
            return Environment.OTHER

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
