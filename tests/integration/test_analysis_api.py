"""
Integration tests for risk analysis and demographic enrichment endpoints.
"""
import random

import pytest
from fastapi.testclient import TestClient

from climate_risk.api.deps import get_random_source
from climate_risk.core.database import get_db
from climate_risk.main import app


@pytest.fixture
def client(sqlite_env, test_db):
    """Create test client with overridden database and seeded randomness."""
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_random_source] = lambda: random.Random(42)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class TestAnalyzeLocation:
    """Tests for POST /analyze-location."""

    @pytest.mark.integration
    def test_returns_profile(self, client):
        response = client.post("/analyze-location", json={"latitude": 29.7604, "longitude": -95.3698})

        assert response.status_code == 200
        data = response.json()
        assert data["latitude"] == 29.7604
        assert data["longitude"] == -95.3698
        assert 0 <= data["overallScore"] <= 100
        assert set(data["factors"]) == {"flood", "wildfire", "storm", "drought"}
        for value in data["factors"].values():
            assert 0 <= value <= 100

    @pytest.mark.integration
    def test_seeded_responses_match(self, client):
        body = {"latitude": 37.7749, "longitude": -122.4194}

        first = client.post("/analyze-location", json=body).json()
        second = client.post("/analyze-location", json=body).json()

        assert first == second

    @pytest.mark.integration
    @pytest.mark.parametrize(
        "body",
        [{}, {"latitude": 95.0, "longitude": 0.0}, {"latitude": 0.0, "longitude": -181.0}],
    )
    def test_invalid_coordinates(self, client, body):
        response = client.post("/analyze-location", json=body)

        assert response.status_code == 422


class TestEnrichDemographics:
    """Tests for POST /enrich-demographics."""

    @pytest.mark.integration
    def test_returns_grid(self, client):
        response = client.post(
            "/enrich-demographics",
            json={"latitude": 40.7128, "longitude": -74.0060, "riskFactors": {"overallScore": 65}},
        )

        assert response.status_code == 200
        grid = response.json()["gridData"]
        assert len(grid) == 25

        point = grid[0]
        assert set(point) == {
            "lat", "lng", "risk", "riskLevel", "demographics", "payoutEstimate", "distance",
        }
        assert set(point["demographics"]) == {
            "population", "populationDensity", "medianAge", "householdIncome", "urbanization",
        }
        assert set(point["payoutEstimate"]) == {"expected", "percentile75", "percentile90", "worstCase"}

        for p in grid:
            assert p["riskLevel"] in {"low", "medium", "high", "critical"}
            payout = p["payoutEstimate"]
            assert payout["expected"] <= payout["percentile75"] <= payout["percentile90"] <= payout["worstCase"]

    @pytest.mark.integration
    def test_accepts_full_risk_factors(self, client):
        response = client.post(
            "/enrich-demographics",
            json={
                "latitude": 25.7617,
                "longitude": -80.1918,
                "riskFactors": {"overallScore": 80, "flood": 90, "wildfire": 20, "storm": 85, "drought": 30},
            },
        )

        assert response.status_code == 200
        assert len(response.json()["gridData"]) == 25

    @pytest.mark.integration
    def test_configured_grid_size(self, client, monkeypatch):
        from climate_risk.core.config import reset_settings

        monkeypatch.setenv("DEMOGRAPHIC_GRID_SIZE", "3")
        reset_settings()

        response = client.post(
            "/enrich-demographics",
            json={"latitude": 0.0, "longitude": 0.0, "riskFactors": {"overallScore": 50}},
        )

        assert len(response.json()["gridData"]) == 9

    @pytest.mark.integration
    @pytest.mark.parametrize(
        "body",
        [
            {"latitude": 40.0, "longitude": -74.0},
            {"latitude": 40.0, "longitude": -74.0, "riskFactors": {}},
            {"latitude": 40.0, "longitude": -74.0, "riskFactors": {"overallScore": 140}},
        ],
    )
    def test_invalid_body(self, client, body):
        response = client.post("/enrich-demographics", json=body)

        assert response.status_code == 422


class TestServiceEndpoints:

    @pytest.mark.integration
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "Climate Risk Service"
        assert "/ingest-satellite-data" in data["endpoints"]

    @pytest.mark.integration
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
