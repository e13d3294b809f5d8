from __future__ import annotations

import pathlib
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_CONFIG_DIR = pathlib.Path(__file__).parent

DEFAULT_CONFIG_PATH = _CONFIG_DIR / "organogram.json"
DEFAULT_PREFERENCE_PATH = pathlib.Path.home() / ".kcvv" / "organogram-preferences.json"
PREFERENCE_KEY = "kcvv-organogram-view-preference"


class NavigatorSettings(BaseSettings):
    """Runtime settings for the organogram navigator."""

    model_config = SettingsConfigDict(
        env_prefix="ORGANOGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_path: pathlib.Path = Field(default=DEFAULT_CONFIG_PATH)
    preference_path: pathlib.Path = Field(default=DEFAULT_PREFERENCE_PATH)
    preference_key: str = Field(default=PREFERENCE_KEY, min_length=1)
    preference_version: int = Field(default=2, ge=1)
    # Matches the "(max-width: 1023px)" media query of the site layout.
    narrow_viewport_max_width: int = Field(default=1023, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> NavigatorSettings:
    return NavigatorSettings()
