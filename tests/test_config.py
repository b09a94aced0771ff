"""
Unit tests for configuration module.

Tests run WITHOUT .env file.
"""
import pytest
from pydantic import ValidationError

from climate_risk.core.config import Settings, get_settings, reset_settings
from climate_risk.core.errors import ConfigurationError


@pytest.mark.unit
def test_config_requires_database_url(clean_env, monkeypatch):
    """Database URL is required for app startup."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.unit
def test_config_blank_database_url_rejected_on_use(clean_env, monkeypatch):
    """A blank URL passes construction but cannot build the client."""
    monkeypatch.setenv("DATABASE_URL", "  ")

    settings = Settings(_env_file=None)

    with pytest.raises(ConfigurationError) as exc_info:
        settings.require_database_url()

    assert "DATABASE_URL is required" in str(exc_info.value)
    assert exc_info.value.missing_config == "DATABASE_URL"
    assert exc_info.value.component == "config"


@pytest.mark.unit
def test_config_defaults(clean_env, monkeypatch):
    """Test default values for optional settings."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://test")

    settings = Settings(_env_file=None)

    assert settings.require_database_url() == "postgresql://test"
    assert settings.log_level == "INFO"
    assert settings.random_seed is None
    assert settings.satellite_grid_size == 7
    assert settings.satellite_grid_radius_deg == 0.045
    assert settings.satellite_source_label == "copernicus-simulated"
    assert settings.demographic_grid_size == 5
    assert settings.demographic_grid_radius_deg == 0.05
    assert settings.overlay_query_limit == 100
    assert settings.enable_scheduler is False
    assert settings.ingest_interval_minutes == 30


@pytest.mark.unit
def test_config_custom_values(clean_env, monkeypatch):
    """Test custom configuration values."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://test")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("RANDOM_SEED", "1234")
    monkeypatch.setenv("SATELLITE_GRID_SIZE", "9")
    monkeypatch.setenv("ENABLE_SCHEDULER", "true")
    monkeypatch.setenv("INGEST_INTERVAL_MINUTES", "15")

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.random_seed == 1234
    assert settings.satellite_grid_size == 9
    assert settings.enable_scheduler is True
    assert settings.ingest_interval_minutes == 15


@pytest.mark.unit
def test_config_log_level_validation(clean_env, monkeypatch):
    """Log level must be a standard level."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://test")
    monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.unit
def test_config_grid_size_bounds(clean_env, monkeypatch):
    """A one-point satellite lattice has no spacing and is rejected."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://test")
    monkeypatch.setenv("SATELLITE_GRID_SIZE", "1")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.unit
def test_config_interval_bounds(clean_env, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://test")
    monkeypatch.setenv("INGEST_INTERVAL_MINUTES", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.unit
def test_get_settings_singleton(clean_env, monkeypatch):
    """get_settings returns the same instance until reset."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://test")

    first = get_settings()
    second = get_settings()
    assert first is second

    reset_settings()
    assert get_settings() is not first
