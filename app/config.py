"""
Application configuration using Pydantic Settings
"""
from functools import lru_cache
from typing import Literal
from urllib.parse import quote

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Database
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "sub_service"
    DB_CONNECT_TIMEOUT: int = 3  # seconds, passed to libpq
    # Full DSN; takes precedence over DB_* when set
    DATABASE_URL: str = ""

    # HTTP server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080

    # Application
    LOG_LEVEL: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept 'debug' as well as 'DEBUG'"""
        return v.upper() if isinstance(v, str) else v

    def get_database_url(self) -> str:
        """
        Plain libpq DSN (postgresql://...), used by psycopg directly

        User and password are percent-encoded, so '@', '/', ':' or '#' in
        them cannot shift the host or database parts.
        """
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            if url.startswith("postgresql+psycopg://"):
                return url.replace("postgresql+psycopg://", "postgresql://", 1)
            return url
        user = quote(self.DB_USER, safe="")
        password = quote(self.DB_PASSWORD, safe="")
        return (
            f"postgresql://{user}:{password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{quote(self.DB_NAME, safe='')}"
        )

    def get_sqlalchemy_url(self) -> str:
        """
        Convert database URL to SQLAlchemy format (postgresql+psycopg://)
        """
        url = self.get_database_url()
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+psycopg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance (singleton)
    """
    return Settings()
