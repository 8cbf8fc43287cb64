"""Application settings using pydantic-settings.

Settings are loaded from environment variables (prefix ``CLOUDPOOL_``) or an
``.env`` file, with defaults suited to a local SQLite database.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Environment variables:
        CLOUDPOOL_DATABASE_URL: SQLAlchemy URL (default: sqlite:///cloudpool_metadata.db)
        CLOUDPOOL_DATABASE_ECHO: Echo emitted SQL (default: false)
        CLOUDPOOL_LOG_JSON: Force JSON (true) or console (false) log output;
            unset picks console output on a TTY
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOUDPOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///cloudpool_metadata.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Echo emitted SQL")
    log_json: Optional[bool] = Field(
        default=None,
        description="Render logs as JSON; None chooses by TTY",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()
