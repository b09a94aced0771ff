"""
Configuration module with strict validation.

Key principles:
- APP STARTUP requires DATABASE_URL (the persistence client cannot be built without it)
- Grid geometry and scheduling are configurable with safe defaults
- RANDOM_SEED makes every synthetic generator reproducible
"""
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from climate_risk.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings with validation.

    Loads from environment variables and .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database (REQUIRED for API startup)
    database_url: str = Field(
        ...,
        description="SQLAlchemy connection URL for the satellite_data store"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # Random generation
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for synthetic data generation (unset = non-reproducible)"
    )

    # Satellite grid
    satellite_grid_size: int = Field(
        default=7,
        ge=2,
        le=51,
        description="Points per side of the synthetic satellite lattice"
    )

    satellite_grid_radius_deg: float = Field(
        default=0.045,
        gt=0.0,
        le=1.0,
        description="Half-width of the satellite lattice in degrees (~5 km)"
    )

    satellite_source_label: str = Field(
        default="copernicus-simulated",
        description="Value written to satellite_data.source"
    )

    # Demographic grid
    demographic_grid_size: int = Field(
        default=5,
        ge=1,
        le=25,
        description="Points per side of the demographic enrichment lattice"
    )

    demographic_grid_radius_deg: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Half-width of the demographic lattice in degrees"
    )

    # Overlay queries
    overlay_query_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum rows returned for the satellite map overlay"
    )

    # Scheduling
    enable_scheduler: bool = Field(
        default=False,
        description="Run periodic satellite ingestion inside the API process"
    )

    ingest_interval_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="Interval between scheduled satellite ingestions"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    def require_database_url(self) -> str:
        """
        Get the database URL, raising a clear error if it is blank.

        Raises:
            ConfigurationError: If the URL is empty

        Returns:
            str: The connection URL
        """
        if not self.database_url or not self.database_url.strip():
            raise ConfigurationError(
                "DATABASE_URL is required to construct the persistence client. "
                "Please set it in your .env file or environment variables.",
                missing_config="DATABASE_URL",
            )
        return self.database_url


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Built once at process start and injected into handlers via Depends.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """
    Reset the global settings instance.

    Useful for testing to ensure clean state between tests.
    """
    global _settings
    _settings = None
