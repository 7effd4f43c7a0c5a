"""
Configuration Management for Alokasi Pendapatan

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable of the storage slot, the report image and the share link
lives in one place and is validated when first accessed.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Savings plan options offered to the user (percent of head income)
SAVINGS_PERCENT_OPTIONS: tuple[int, ...] = (10, 15, 20, 25, 30)
DEFAULT_SAVINGS_PERCENT = 20


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_STORAGE_",
        extra="ignore"
    )

    state_path: Path = Field(
        default=Path.home() / ".alokasi" / "state.json",
        description="Path to the JSON file holding the key-value slots"
    )
    state_key: str = Field(
        default="budgetApp_v1",
        min_length=1,
        description="Key under which the budget document is stored"
    )

    @field_validator('state_path')
    @classmethod
    def expand_state_path(cls, v: Path) -> Path:
        """Expand '~' so the path works regardless of how it was configured."""
        return v.expanduser()


class ReportSettings(BaseSettings):
    """Report image rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_REPORT_",
        extra="ignore"
    )

    # 9:16 portrait, sized for phone status/story sharing
    width: int = Field(
        default=1080,
        ge=360,
        le=4320,
        description="Report image width in pixels"
    )
    height: int = Field(
        default=1920,
        ge=640,
        le=7680,
        description="Report image height in pixels"
    )
    jpeg_quality: int = Field(
        default=90,
        ge=1,
        le=95,
        description="JPEG quality used when encoding the report"
    )
    font_path: Optional[str] = Field(
        default=None,
        description="Optional TrueType font; Pillow's default font otherwise"
    )

    @field_validator('font_path')
    @classmethod
    def validate_font_path(cls, v: Optional[str]) -> Optional[str]:
        """Warn if the font file doesn't exist (renderer falls back to default)."""
        if v and not Path(v).exists():
            import warnings
            warnings.warn(
                f"Report font not found at {v}. "
                "The default font will be used instead."
            )
        return v


class ShareSettings(BaseSettings):
    """Share / deep-link configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_SHARE_",
        extra="ignore"
    )

    link_base: str = Field(
        default="https://wa.me",
        description="Base of the messaging deep link (recipient is appended)"
    )

    @field_validator('link_base')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Budget defaults
    default_savings_percent: int = Field(
        default=DEFAULT_SAVINGS_PERCENT,
        description="Savings plan percent used when none is stored"
    )
    currency_prefix: str = Field(
        default="Rp",
        description="Currency symbol printed before amounts"
    )

    @field_validator('default_savings_percent')
    @classmethod
    def validate_savings_percent(cls, v: int) -> int:
        """Only the offered savings options are accepted."""
        if v not in SAVINGS_PERCENT_OPTIONS:
            raise ValueError(
                f"Unsupported savings percent: {v}. Allowed: {SAVINGS_PERCENT_OPTIONS}"
            )
        return v


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def report(self) -> ReportSettings:
        return ReportSettings()

    @property
    def share(self) -> ShareSettings:
        return ShareSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every group that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "report", "share", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
