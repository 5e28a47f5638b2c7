"""
Application settings.

Values come from environment variables prefixed with ``SPECIES_INGEST_``
(or a local ``.env`` file), e.g. ``SPECIES_INGEST_DATA_DIR=/srv/species``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the ingest pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="SPECIES_INGEST_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "species-ingest"
    app_env: str = "development"
    debug: bool = False

    # Document store
    data_dir: Path = Path("data")
    collection: str = "species"

    # Trigger endpoint
    trigger_host: str = "0.0.0.0"  # noqa: S104
    trigger_port: int = Field(default=8080, ge=0, le=65535)

    # Upstream fetching
    http_timeout: float = Field(default=30.0, gt=0)
    retry_attempts: int = Field(default=5, ge=1)
    retry_base_delay: float = Field(default=1.0, ge=0)
    page_delay: float = Field(default=0.3, ge=0)
    max_images: int = Field(default=5, ge=1)

    # Fixed seed makes taxon choice and species order reproducible
    seed: int | None = None


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
