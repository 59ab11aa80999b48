"""Application configuration using Pydantic Settings.

This module centralizes all configuration values that may vary between environments.
Values can be overridden via environment variables or .env file. The NEXT_PUBLIC_*
names used by the web frontend are accepted as aliases so both can share one env file.
"""
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # ===== Environment =====
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ===== Database =====
    DATABASE_URL: Optional[str] = None
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: int = 3306
    DATABASE_USER: str = "root"
    DATABASE_PASSWORD: str = ""
    DATABASE_NAME: str = "numtrip"

    # ===== Site & SEO =====
    SITE_URL: str = Field(
        "https://numtrip.com",
        validation_alias=AliasChoices("SITE_URL", "NEXT_PUBLIC_SITE_URL"),
    )
    API_PREFIX: str = "/api/v1"
    SITEMAP_CACHE_TTL: int = 3600
    SITEMAP_INDEX_CACHE_TTL: int = 3600
    ROBOTS_CACHE_TTL: int = 86400

    # ===== IndexNow =====
    INDEXNOW_KEY: Optional[str] = None
    INDEXNOW_API_URL: str = "https://api.indexnow.org/indexnow"
    INDEXNOW_BATCH_SIZE: int = 100

    # ===== Identity provider (Supabase) =====
    SUPABASE_URL: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    SUPABASE_ANON_KEY: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    )
    MOCK_AUTH: bool = Field(
        False,
        validation_alias=AliasChoices("MOCK_AUTH", "NEXT_PUBLIC_MOCK_AUTH"),
    )
    ADMIN_KEY: Optional[str] = None

    # ===== Pagination Defaults =====
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    VALIDATION_HISTORY_PAGE_SIZE: int = 10
    VALIDATION_HISTORY_MAX_PAGE_SIZE: int = 50
    DASHBOARD_VALIDATIONS_LIMIT: int = 50
    RECENT_ACTIVITY_LIMIT: int = 10

    # ===== Claims & Promo Codes =====
    CLAIM_CODE_TTL_MINUTES: int = 60
    PROMO_EXPIRY_WARNING_DAYS: int = 30

    # ===== Email (claim verification) =====
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: Optional[str] = None

    # ===== HTTP client =====
    HTTP_TIMEOUT_SECONDS: float = 30.0
    HTTP_MAX_CONNECTIONS: int = 100
    HTTP_MAX_KEEPALIVE: int = 50

    # ===== CORS =====
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "https://numtrip.com",
        "https://www.numtrip.com",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def database_url(self) -> str:
        """Resolve the SQLAlchemy URL.

        DATABASE_URL wins; otherwise a MySQL URL is built from the individual
        DATABASE_* variables when a host is given, else a local SQLite file.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DATABASE_HOST:
            return (
                f"mysql+pymysql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
                f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
            )
        return "sqlite:///./numtrip.db"

    @property
    def mock_auth_enabled(self) -> bool:
        """Mock auth only ever applies in development."""
        return self.MOCK_AUTH and self.ENVIRONMENT == "development"

    @property
    def site_url(self) -> str:
        return self.SITE_URL.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure singleton pattern - settings are loaded once.
    """
    return Settings()
