# availability_engine/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "dev"
    APP_NAME: str = "Availability Suggestion Engine"

    # DB URL – participant profiles only, the engine never touches it
    DATABASE_URL: str = "sqlite:///./availability.db"

    LOG_LEVEL: str = "INFO"

    # Engine defaults, overridable per request
    DEFAULT_MIN_DURATION_MINUTES: int = 60
    DEFAULT_MAX_SUGGESTIONS: int = 5
    DEFAULT_MIN_IDEAL_RESERVED: int = 2
    DEFAULT_GOOD_MARGIN_MINUTES: int = 60
    DEFAULT_CUTTING_POLICY: str = "band_anchored"

    # Inclusive day count accepted at the call boundary
    MAX_RANGE_DAYS: int = 90

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
