# src/config/settings.py - v2
"""Typed configuration loaded from the environment (and .env) via pydantic-settings.

Single source of truth for every knob of a catalog build. There are no
command-line switches for behaviour: API credentials, paths, throttling and
the automated-context flag all come from here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REMOTE_BASE_URL = (
    "https://raw.githubusercontent.com/ChatLunaLab/awesome-chatluna-presets/main"
)
DEFAULT_CACHE_FALLBACK_URLS = (
    "https://raw.githubusercontent.com/ChatLunaLab/awesome-chatluna-presets/"
    "refs/heads/preset/cache-presets.json,"
    "https://raw.githubusercontent.com/ChatLunaLab/awesome-chatluna-presets/"
    "refs/heads/main/cache-presets.json"
)


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Generator (OpenAI-compatible chat completions) ===
    api_key: str = ""
    base_url: str = ""
    model: str = "gpt-4o-mini"
    temperature: float = 1.2

    # === Throttling / retries ===
    rate_limit_per_minute: float = 15
    max_attempts: int = 3

    # Unattended runs trust cache entries without re-hashing.
    automated: bool = Field(
        default=False,
        validation_alias=AliasChoices("automated", "github_actions"),
    )

    # === Presets ===
    preset_root: Path = Path(".")
    main_preset_dir: str = "presets/chatluna"
    character_preset_dir: str = "presets/chatluna-character"
    remote_base_url: str = DEFAULT_REMOTE_BASE_URL

    # === Cache ===
    cache_path: Path = Path("cache-presets.json")
    cache_fallback_urls: str = DEFAULT_CACHE_FALLBACK_URLS
    cache_fetch_timeout: float = 30.0
    cache_prune_stale: bool = False

    # === Output ===
    output_path: Path = Path("presets.json")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("rate_limit_per_minute")
    @classmethod
    def validate_rate_limit(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ConfigurationError("rate_limit_per_minute must be > 0")
        return v

    @field_validator("max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ConfigurationError("max_attempts must be >= 1")
        return v

    @field_validator("remote_base_url", "base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:  # noqa: N805
        return v.rstrip("/")

    @field_validator("log_file", mode="before")
    @classmethod
    def empty_log_file(cls, v: object) -> object:  # noqa: N805
        return None if v == "" else v

    # --- Helpers ---

    @property
    def generation_enabled(self) -> bool:
        """Whether both credential and endpoint are configured."""
        return bool(self.api_key and self.base_url)

    @property
    def cache_fallback_urls_list(self) -> list[str]:
        """Parse comma-separated remote cache mirrors, in priority order."""
        return [u.strip() for u in self.cache_fallback_urls.split(",") if u.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
