"""
Tests for environment overrides in the settings module.
"""
import importlib

import pytest

from emi_calc import config


@pytest.fixture
def reload_config(monkeypatch):
    """Reload settings under patched environment variables, then restore them."""
    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


class TestEnvironmentOverrides:
    """Test environment variables that tune the calculator."""

    def test_valid_overrides(self, monkeypatch, reload_config):
        monkeypatch.setenv("EMI_CALC_MAX_ROWS", "24")
        monkeypatch.setenv("EMI_CALC_LOG_LEVEL", "debug")
        monkeypatch.setenv("EMI_CALC_CURRENCY", "usd")

        settings = reload_config()

        assert settings.MAX_SCHEDULE_ROWS == 24
        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.DEFAULT_CURRENCY == "USD"

    def test_unusable_values_fall_back(self, monkeypatch, reload_config):
        """Test bad values fall back to defaults instead of failing at import."""
        monkeypatch.setenv("EMI_CALC_MAX_ROWS", "lots")
        monkeypatch.setenv("EMI_CALC_LOG_LEVEL", "LOUD")
        monkeypatch.setenv("EMI_CALC_CURRENCY", "XYZ")

        settings = reload_config()

        assert settings.MAX_SCHEDULE_ROWS == 120
        assert settings.LOG_LEVEL == "INFO"
        assert settings.DEFAULT_CURRENCY == "INR"

    def test_non_positive_row_limit_falls_back(self, monkeypatch, reload_config):
        monkeypatch.setenv("EMI_CALC_MAX_ROWS", "0")

        assert reload_config().MAX_SCHEDULE_ROWS == 120
