"""
Satellite ingestion metadata and constants.

Defines the default locations, the lattice geometry and the value ranges
drawn for each synthetic reading.
"""
from typing import Dict, List, Any, Tuple


SOURCE_NAME = "satellite"
DEFAULT_SOURCE_LABEL = "copernicus-simulated"

# 7x7 lattice with a ~5 km half-width
GRID_SIZE = 7
GRID_RADIUS_DEG = 0.045

# Uniform draw ranges: (low, high)
CLOUD_COVERAGE_RANGE: Tuple[float, float] = (0.0, 30.0)  # percent
VEGETATION_INDEX_RANGE: Tuple[float, float] = (0.2, 0.8)  # NDVI
WATER_INDEX_RANGE: Tuple[float, float] = (-0.3, 0.2)  # NDWI
TEMPERATURE_RANGE: Tuple[float, float] = (15.0, 30.0)  # °C
STORM_JITTER_RANGE: Tuple[float, float] = (0.0, 30.0)

# Major risk-prone areas ingested when a request names no location
DEFAULT_LOCATIONS: List[Dict[str, Any]] = [
    {"name": "New York", "lat": 40.7128, "lng": -74.0060},
    {"name": "Los Angeles", "lat": 34.0522, "lng": -118.2437},
    {"name": "Houston", "lat": 29.7604, "lng": -95.3698},  # flood-prone
    {"name": "Miami", "lat": 25.7617, "lng": -80.1918},  # hurricane-prone
    {"name": "San Francisco", "lat": 37.7749, "lng": -122.4194},  # wildfire-prone
]


def grid_step(grid_size: int = GRID_SIZE, radius_deg: float = GRID_RADIUS_DEG) -> float:
    """Spacing between adjacent lattice points in degrees."""
    if grid_size < 2:
        raise ValueError("grid_size must be at least 2")
    return (radius_deg * 2) / (grid_size - 1)
