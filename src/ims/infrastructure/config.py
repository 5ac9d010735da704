"""Runtime settings.

Read from ``IMS_*`` environment variables and an optional ``.env`` file
in the working directory.  CLI options take precedence over these.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="IMS_",
        env_file=".env",
        extra="ignore",
    )

    # Persistence
    data_dir: Path = Path("data")

    # Logging
    log_level: str = "INFO"

    # Acting user for CLI attribution
    user: str | None = None

    # Currency for every amount entered through the CLI
    currency: str = "USD"


def get_settings() -> Settings:
    return Settings()
