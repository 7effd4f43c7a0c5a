"""Tests for settings loaded from the environment."""

import pytest
from pathlib import Path

from pydantic import ValidationError

from alokasi.config import (
    AppSettings,
    ReportSettings,
    Settings,
    ShareSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


class TestSettings:
    """Tests for the settings groups."""

    def test_defaults(self):
        """Test built-in defaults."""
        assert StorageSettings().state_key == "budgetApp_v1"
        assert ReportSettings().width == 1080
        assert ReportSettings().height == 1920
        assert ReportSettings().jpeg_quality == 90
        assert ShareSettings().link_base == "https://wa.me"
        assert AppSettings().currency_prefix == "Rp"

    def test_env_prefix(self, monkeypatch):
        """Test each group reads its own prefix."""
        monkeypatch.setenv("BUDGET_STORAGE_STATE_KEY", "other")
        monkeypatch.setenv("BUDGET_REPORT_JPEG_QUALITY", "70")
        assert StorageSettings().state_key == "other"
        assert ReportSettings().jpeg_quality == 70

    def test_state_path_expanded(self, monkeypatch):
        """Test '~' in the state path is expanded."""
        monkeypatch.setenv("BUDGET_STORAGE_STATE_PATH", "~/budget/state.json")
        path = StorageSettings().state_path
        assert "~" not in str(path)
        assert path == Path.home() / "budget" / "state.json"

    def test_link_base_trailing_slash(self):
        """Test a trailing slash on the link base is dropped."""
        assert ShareSettings(link_base="https://wa.me/").link_base == "https://wa.me"

    def test_jpeg_quality_bounds(self):
        """Test out-of-range quality is rejected."""
        with pytest.raises(ValidationError):
            ReportSettings(jpeg_quality=100)

    def test_default_savings_percent_validated(self):
        """Test only offered savings percents are accepted."""
        assert AppSettings(default_savings_percent=30).default_savings_percent == 30
        with pytest.raises(ValidationError):
            AppSettings(default_savings_percent=12)

    def test_root_settings_groups(self):
        """Test the root container exposes every group."""
        settings = Settings()
        assert isinstance(settings.storage, StorageSettings)
        assert isinstance(settings.report, ReportSettings)
        assert isinstance(settings.share, ShareSettings)
        assert isinstance(settings.app, AppSettings)

    def test_get_settings_cached(self):
        """Test settings are loaded once until the cache is cleared."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()

    def test_validate_all_settings_reports_failures(self, monkeypatch):
        """Test a bad group is reported with its error."""
        get_settings.cache_clear()
        monkeypatch.setenv("BUDGET_REPORT_WIDTH", "10")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["report"] is False
        assert "report_error" in results
        get_settings.cache_clear()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
