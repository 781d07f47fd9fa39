"""Unit tests for SieveSettings."""

import pytest
from pydantic import ValidationError

from sieve.config import SieveSettings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("SIEVE_UNBOUNDED_MAX_RESULTS", "SIEVE_MAX_RESULTS_LIMIT", "SIEVE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_settings_with_defaults():
    """Test settings creation with default values."""
    settings = SieveSettings()

    assert settings.unbounded_max_results == 2147483647
    assert settings.max_results_limit is None
    assert settings.log_level == "INFO"


def test_settings_with_custom_values():
    settings = SieveSettings(unbounded_max_results=1000, max_results_limit=50, log_level="DEBUG")

    assert settings.unbounded_max_results == 1000
    assert settings.max_results_limit == 50
    assert settings.log_level == "DEBUG"


def test_settings_from_environment(monkeypatch):
    """Test that settings are read from SIEVE_ prefixed variables."""
    monkeypatch.setenv("SIEVE_MAX_RESULTS_LIMIT", "200")
    monkeypatch.setenv("SIEVE_LOG_LEVEL", "WARNING")

    settings = SieveSettings()

    assert settings.max_results_limit == 200
    assert settings.log_level == "WARNING"


def test_explicit_values_override_environment(monkeypatch):
    monkeypatch.setenv("SIEVE_MAX_RESULTS_LIMIT", "200")

    assert SieveSettings(max_results_limit=10).max_results_limit == 10


def test_validation_unbounded_max_results():
    """Test that unbounded_max_results must be at least 1."""
    with pytest.raises(ValidationError):
        SieveSettings(unbounded_max_results=0)


def test_validation_max_results_limit():
    """Test that max_results_limit must be at least 1 when set."""
    with pytest.raises(ValidationError):
        SieveSettings(max_results_limit=0)


def test_validation_from_environment(monkeypatch):
    monkeypatch.setenv("SIEVE_MAX_RESULTS_LIMIT", "lots")

    with pytest.raises(ValidationError):
        SieveSettings()
