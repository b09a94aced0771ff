"""
Synthetic satellite reading generator.

Stands in for a Copernicus Data Space query: produces a square lattice of
readings around a location with uniform random cloud coverage, NDVI, NDWI
and surface temperature, and derives four risk indicators from them.

The random source is injected so a fixed seed yields identical output.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from climate_risk.sources.satellite.metadata import (
    CLOUD_COVERAGE_RANGE,
    DEFAULT_SOURCE_LABEL,
    GRID_RADIUS_DEG,
    GRID_SIZE,
    STORM_JITTER_RANGE,
    TEMPERATURE_RANGE,
    VEGETATION_INDEX_RANGE,
    WATER_INDEX_RANGE,
    grid_step,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves toward positive infinity (not banker's rounding)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp_score(value: float) -> int:
    """Clamp to [0, 100] and round to the nearest integer."""
    return int(round_half_up(min(100.0, max(0.0, value))))


def compute_risk_indicators(
    cloud_coverage: float,
    vegetation_index: float,
    water_index: float,
    temperature: float,
    storm_jitter: float,
) -> Dict[str, int]:
    """
    Derive flood/drought/wildfire/storm risk from one reading.

    Inputs are the raw (unrounded) draws. Every indicator is clamped to
    [0, 100] whatever the inputs.
    """
    flood = (water_index + 0.3) * 100 + (100 - cloud_coverage) * 0.3
    drought = (1 - vegetation_index) * 100
    wildfire = temperature * 2 + (1 - vegetation_index) * 50
    storm = cloud_coverage * 2 + storm_jitter

    return {
        "flood_risk": clamp_score(flood),
        "drought_risk": clamp_score(drought),
        "wildfire_risk": clamp_score(wildfire),
        "storm_risk": clamp_score(storm),
    }


def lattice_coordinates(
    latitude: float,
    longitude: float,
    grid_size: int = GRID_SIZE,
    radius_deg: float = GRID_RADIUS_DEG,
) -> List[Tuple[float, float]]:
    """
    Lattice points centered on (latitude, longitude), row-major.

    Point (i, j) sits at (lat - r + i*step, lng - r + j*step), so the first
    point is offset -r on both axes and the last +r.

    Offsets are not wrapped or clamped: within r of a pole or the
    antimeridian some points fall outside [-90, 90] x [-180, 180], and
    GET /satellite-data cannot be centered on them.
    """
    step = grid_step(grid_size, radius_deg)
    points = []
    for i in range(grid_size):
        for j in range(grid_size):
            points.append(
                (latitude - radius_deg + i * step, longitude - radius_deg + j * step)
            )
    return points


@dataclass
class SatelliteReading:
    """One generated reading, shaped like a satellite_data row."""
    latitude: float
    longitude: float
    acquisition_time: datetime
    cloud_coverage: float
    vegetation_index: float
    water_index: float
    temperature: float
    risk_indicators: Dict[str, int] = field(default_factory=dict)
    source: str = DEFAULT_SOURCE_LABEL

    def to_row(self) -> Dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "acquisition_time": self.acquisition_time,
            "cloud_coverage": self.cloud_coverage,
            "vegetation_index": self.vegetation_index,
            "water_index": self.water_index,
            "temperature": self.temperature,
            "risk_indicators": dict(self.risk_indicators),
            "source": self.source,
        }


class SatelliteDataGenerator:
    """Generates a lattice of synthetic readings per location."""

    def __init__(
        self,
        rng: random.Random,
        grid_size: int = GRID_SIZE,
        radius_deg: float = GRID_RADIUS_DEG,
        source_label: str = DEFAULT_SOURCE_LABEL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.rng = rng
        self.grid_size = grid_size
        self.radius_deg = radius_deg
        self.source_label = source_label
        self.clock = clock or datetime.utcnow

    def _uniform(self, bounds: Tuple[float, float]) -> float:
        low, high = bounds
        return low + self.rng.random() * (high - low)

    def generate(self, latitude: float, longitude: float) -> List[SatelliteReading]:
        """Generate grid_size**2 readings centered on the given location."""
        logger.info(f"Generating satellite data for coordinates: {latitude}, {longitude}")

        acquired_at = self.clock()
        readings = []
        for point_lat, point_lng in lattice_coordinates(
            latitude, longitude, self.grid_size, self.radius_deg
        ):
            cloud_coverage = self._uniform(CLOUD_COVERAGE_RANGE)
            vegetation_index = self._uniform(VEGETATION_INDEX_RANGE)
            water_index = self._uniform(WATER_INDEX_RANGE)
            temperature = self._uniform(TEMPERATURE_RANGE)
            storm_jitter = self._uniform(STORM_JITTER_RANGE)

            readings.append(
                SatelliteReading(
                    latitude=point_lat,
                    longitude=point_lng,
                    acquisition_time=acquired_at,
                    cloud_coverage=round_half_up(cloud_coverage, 2),
                    vegetation_index=round_half_up(vegetation_index, 2),
                    water_index=round_half_up(water_index, 2),
                    temperature=round_half_up(temperature, 2),
                    risk_indicators=compute_risk_indicators(
                        cloud_coverage,
                        vegetation_index,
                        water_index,
                        temperature,
                        storm_jitter,
                    ),
                    source=self.source_label,
                )
            )

        logger.info(f"Generated {len(readings)} satellite data points")
        return readings
