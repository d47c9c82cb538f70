"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from finance_exports.config import (
    ExportSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestExportSettings:
    """Tests for EXPORT_* settings."""

    def test_defaults(self, monkeypatch):
        for name in ("EXPORT_MAX_ROWS", "EXPORT_LOCALE", "EXPORT_HISTORY_CAPACITY"):
            monkeypatch.delenv(name, raising=False)
        settings = ExportSettings()
        assert settings.max_rows == 100_000
        assert settings.history_capacity == 50
        assert settings.locale == "pt_BR"
        assert settings.summary_label == "TOTAL"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("EXPORT_MAX_ROWS", "10")
        monkeypatch.setenv("EXPORT_LOCALE", "en_US")
        settings = Settings().export
        assert settings.max_rows == 10
        assert settings.locale == "en_US"

    def test_unknown_locale_rejected(self):
        with pytest.raises(ValidationError):
            ExportSettings(locale="fr_FR")

    def test_row_guard_must_be_positive(self):
        with pytest.raises(ValidationError):
            ExportSettings(max_rows=0)


class TestStorageSettings:
    """Tests for EXPORT_STORAGE_* settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("EXPORT_STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("EXPORT_STORAGE_FILE_PATH", raising=False)
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.file_path == Path("data/export_store.json")
        assert settings.configs_key == "export_configs"

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            StorageSettings(backend="redis")


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_all_valid(self, monkeypatch):
        monkeypatch.delenv("EXPORT_LOCALE", raising=False)
        results = validate_all_settings()
        assert results == {"export": True, "storage": True, "app": True}

    def test_reports_invalid_section(self, monkeypatch):
        monkeypatch.setenv("EXPORT_LOCALE", "xx_XX")
        results = validate_all_settings()
        assert results["export"] is False
        assert "export_error" in results
        assert results["storage"] is True
