"""
Unit tests for satellite overlay queries.
"""
import pytest

from climate_risk.services.satellite_overlay import (
    average_risk,
    query_satellite_data,
    summarize_overlay_point,
)


@pytest.mark.unit
def test_query_returns_rows_in_box_newest_first(test_db, sample_satellite_rows):
    rows = query_satellite_data(test_db, 40.7128, -74.0060)

    assert [row.latitude for row in rows] == [40.7300, 40.7128, 40.6900]


@pytest.mark.unit
def test_query_respects_delta(test_db, sample_satellite_rows):
    rows = query_satellite_data(test_db, 40.7128, -74.0060, delta=0.001)

    assert len(rows) == 1
    assert rows[0].id == sample_satellite_rows[0].id


@pytest.mark.unit
def test_query_respects_limit(test_db, sample_satellite_rows):
    rows = query_satellite_data(test_db, 40.7128, -74.0060, limit=2)

    assert len(rows) == 2


@pytest.mark.unit
def test_query_empty_area(test_db, sample_satellite_rows):
    assert query_satellite_data(test_db, 0.0, 0.0) == []


@pytest.mark.unit
def test_average_risk():
    indicators = {"flood_risk": 10, "drought_risk": 20, "wildfire_risk": 30, "storm_risk": 40}

    assert average_risk(indicators) == 25.0
    assert average_risk({}) == 0.0


@pytest.mark.unit
def test_summarize_overlay_point(sample_satellite_rows):
    summary = summarize_overlay_point(sample_satellite_rows[1])

    # (70 + 79 + 98 + 80) / 4
    assert summary["average_risk"] == 81.75
    assert summary["color"] == "#dc2626"
    assert summary["source"] == "copernicus-simulated"


@pytest.mark.unit
def test_summarize_low_risk_point(sample_satellite_rows):
    summary = summarize_overlay_point(sample_satellite_rows[2])

    assert summary["average_risk"] == 25.5
    assert summary["color"] == "#f59e0b"
