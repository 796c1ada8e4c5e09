"""
Application settings.

Values come from the environment (``FRESCALO_`` prefix) or a local ``.env``
file, e.g. ``FRESCALO_FRESCALO_PATH=/opt/frescalo/frescalo``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Frescalo rejects neighbourhood parameters outside these ranges
PHI_RANGE = (0.50, 0.95)
ALPHA_RANGE = (0.08, 0.50)

DEFAULT_PHI = 0.74
DEFAULT_ALPHA = 0.27
DEFAULT_DATE_FORMAT = "%d/%m/%Y"


class Settings(BaseSettings):
    """Runtime configuration for a Frescalo analysis."""

    model_config = SettingsConfigDict(
        env_prefix="FRESCALO_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "frescalo-trends"
    app_env: str = "development"
    debug: bool = False

    data_dir: Path = Field(default=Path("data"), description="Root of the run store")
    frescalo_path: Path = Field(default=Path("frescalo"), description="Frescalo executable")
    frescalo_timeout: float | None = Field(default=None, description="Seconds, None = no limit")

    phi: float = DEFAULT_PHI
    alpha: float = DEFAULT_ALPHA

    date_format: str = DEFAULT_DATE_FORMAT
    taxon_column: str = "taxon"
    site_column: str = "site"
    start_column: str = "start_date"
    end_column: str = "end_date"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
