"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to the project root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="KICKOFF_",
        extra="ignore",
    )

    # --- Display ---
    display_timezone: str = "America/New_York"

    # --- Trailing windows (number of finished matches per team) ---
    form_window: int = 5
    team_form_window: int = 10

    # --- Rankings ---
    rankings_limit: int = 5

    # --- App ---
    app_env: str = "development"
    log_level: str = "INFO"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
