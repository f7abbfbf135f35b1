# app/config.py
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every variable is prefixed with ``CATALOG_`` (e.g. ``CATALOG_LOG_LEVEL``)
    and may also come from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Books & Authors Catalog"
    log_level: str = "INFO"

    # Form-action transport security token
    nonce_secret: str = "dev-nonce-secret-change-in-production"
    nonce_action: str = "book_crud_nonce"

    # Optional JSON file loaded into the repository at startup
    seed_file: Optional[Path] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v):
        return (v or "INFO").strip().upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
