"""
Pytest configuration and shared fixtures.
"""
import random
import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from climate_risk.core.models import Base, SatelliteData
from climate_risk.core.config import reset_settings
from climate_risk.core.database import reset_engine

FIXED_SEED = 42


@pytest.fixture(scope="function")
def clean_env(monkeypatch):
    """
    Clean environment for testing.

    Removes all app-related env vars to ensure clean state.
    """
    env_vars = [
        "DATABASE_URL",
        "LOG_LEVEL",
        "RANDOM_SEED",
        "SATELLITE_GRID_SIZE",
        "SATELLITE_GRID_RADIUS_DEG",
        "SATELLITE_SOURCE_LABEL",
        "DEMOGRAPHIC_GRID_SIZE",
        "DEMOGRAPHIC_GRID_RADIUS_DEG",
        "OVERLAY_QUERY_LIMIT",
        "ENABLE_SCHEDULER",
        "INGEST_INTERVAL_MINUTES",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)

    # Reset singletons
    reset_settings()
    reset_engine()

    yield

    # Reset again after test
    reset_settings()
    reset_engine()


@pytest.fixture(scope="function")
def test_db():
    """
    Create an in-memory SQLite database for testing.

    Fresh database for each test. StaticPool keeps one connection so the
    API's worker threads see the same data.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(FIXED_SEED)


@pytest.fixture
def sqlite_env(clean_env, monkeypatch):
    """Settings pointing at a throwaway in-memory SQLite database."""
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    reset_settings()
    reset_engine()
    yield


@pytest.fixture
def sample_satellite_rows(test_db):
    """Readings around New York: three inside the overlay box, one outside."""
    rows = [
        SatelliteData(
            latitude=40.7128,
            longitude=-74.0060,
            acquisition_time=datetime(2025, 11, 9, 10, 0, 0),
            cloud_coverage=12.5,
            vegetation_index=0.45,
            water_index=-0.1,
            temperature=22.3,
            risk_indicators={"flood_risk": 46, "drought_risk": 55, "wildfire_risk": 72, "storm_risk": 40},
            source="copernicus-simulated",
        ),
        SatelliteData(
            latitude=40.7300,
            longitude=-74.0200,
            acquisition_time=datetime(2025, 11, 9, 11, 0, 0),
            cloud_coverage=28.0,
            vegetation_index=0.21,
            water_index=0.18,
            temperature=29.5,
            risk_indicators={"flood_risk": 70, "drought_risk": 79, "wildfire_risk": 98, "storm_risk": 80},
            source="copernicus-simulated",
        ),
        SatelliteData(
            latitude=40.6900,
            longitude=-73.9700,
            acquisition_time=datetime(2025, 11, 9, 9, 0, 0),
            cloud_coverage=2.0,
            vegetation_index=0.79,
            water_index=-0.29,
            temperature=15.2,
            risk_indicators={"flood_risk": 30, "drought_risk": 21, "wildfire_risk": 41, "storm_risk": 10},
            source="copernicus-simulated",
        ),
        SatelliteData(
            latitude=34.0522,
            longitude=-118.2437,
            acquisition_time=datetime(2025, 11, 9, 12, 0, 0),
            cloud_coverage=5.0,
            vegetation_index=0.3,
            water_index=-0.2,
            temperature=28.0,
            risk_indicators={"flood_risk": 39, "drought_risk": 70, "wildfire_risk": 91, "storm_risk": 25},
            source="copernicus-simulated",
        ),
    ]
    test_db.add_all(rows)
    test_db.commit()
    for row in rows:
        test_db.refresh(row)
    return rows
