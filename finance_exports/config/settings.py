"""
Configuration Management for the Export Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable of the pipeline (row guard, history size, locale)
and of the storage layer is declared and validated in one place.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_LOCALES = ("pt_BR", "en_US")


class ExportSettings(BaseSettings):
    """Export pipeline configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    max_rows: int = Field(
        default=100_000,
        ge=1,
        description="Maximum number of input records accepted by a single run"
    )
    history_capacity: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="How many past export results are kept in memory"
    )
    default_sheet_name: str = Field(
        default="Data",
        min_length=1,
        max_length=31,
        description="Sheet name used when a config does not name one"
    )
    locale: str = Field(
        default="pt_BR",
        description="Locale used for number, currency, date and boolean labels"
    )
    summary_label: str = Field(
        default="TOTAL",
        description="Label written in the first column of the summary row"
    )

    @field_validator('locale')
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Only locales with known conventions are accepted."""
        if v not in SUPPORTED_LOCALES:
            raise ValueError(
                f"Unsupported locale: {v}. Supported: {', '.join(SUPPORTED_LOCALES)}"
            )
        return v


class StorageSettings(BaseSettings):
    """Key-value storage configuration for persisted export configs."""

    model_config = SettingsConfigDict(
        env_prefix="EXPORT_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["memory", "file"] = Field(
        default="memory",
        description="Which key-value backend holds the config list"
    )
    file_path: Path = Field(
        default=Path("data/export_store.json"),
        description="JSON file used by the file backend"
    )
    configs_key: str = Field(
        default="export_configs",
        min_length=1,
        description="Slot name under which the config list is stored"
    )


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
    persist_audit_events: bool = Field(
        default=True,
        description="Keep audit events in an in-memory audit store"
    )


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
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("export", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
