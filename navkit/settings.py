from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for navkit's demos, logging and runtime checks.

    Values are loaded from environment variables and `.env`.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Logging
    NAVKIT_LOG_LEVEL: str = Field(default="INFO")
    NAVKIT_LOG_DIR: Path = Field(default=Path("_logs"))
    NAVKIT_LOG_TO_FILE: bool = Field(default=False)
    # Timed rotation retention count (days).
    NAVKIT_LOG_BACKUP_COUNT: int = Field(default=7)

    # Scripted post-dismissal flow (seconds)
    NAVKIT_FLOW_FIRST_DELAY: float = Field(default=1.0, ge=0)
    NAVKIT_FLOW_SECOND_DELAY: float = Field(default=2.0, ge=0)
    # Simulated order processing in the shop sample (seconds)
    NAVKIT_CHECKOUT_DELAY: float = Field(default=2.0, ge=0)

    # Reject navigation mutations coming from a thread other than the creator's.
    NAVKIT_STRICT_THREADING: bool = Field(default=True)


def load_settings() -> Settings:
    return Settings()
