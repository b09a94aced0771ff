"""
Spatial grid synthesizer for demographic and payout enrichment.

Expands one location's risk score into an N x N lattice of nearby points.
Each point carries a distance-decayed risk, a risk level band, a synthetic
demographic profile and payout percentile estimates.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0088
KM_PER_DEGREE = 111.32

# Risk decay: risk(d) = base * (floor + (1 - floor) * exp(-d / decay))
RISK_FLOOR = 0.4
RISK_DECAY_KM = 4.0
RISK_JITTER = 5.0

# Population density decays away from the analysed point
CENTER_DENSITY_RANGE = (800.0, 9000.0)  # people / km²
DENSITY_DECAY_KM = 6.0
URBAN_DENSITY = 3000.0
SUBURBAN_DENSITY = 1000.0

MEDIAN_AGE_RANGE = (28.0, 46.0)
RURAL_AGE_OFFSET = 4.0
HOUSEHOLD_INCOME_RANGE = (38_000.0, 115_000.0)

# Payouts
PERSONS_PER_HOUSEHOLD = 2.5
INSURED_VALUE_PER_HOUSEHOLD = 250_000.0
ANNUAL_LOSS_RATIO = 0.01
PERCENTILE_75_MULTIPLIER = 1.6
PERCENTILE_90_MULTIPLIER = 2.5
WORST_CASE_MULTIPLIER = 5.0

RISK_LEVEL_BANDS = (
    (25.0, "low"),
    (50.0, "medium"),
    (75.0, "high"),
)

RISK_LEVEL_COLORS = {
    "low": "#10b981",
    "medium": "#f59e0b",
    "high": "#ef4444",
    "critical": "#dc2626",
}


@dataclass(frozen=True)
class Demographics:
    population: int
    population_density: float
    median_age: float
    household_income: int
    urbanization: str


@dataclass(frozen=True)
class PayoutEstimate:
    expected: int
    percentile75: int
    percentile90: int
    worst_case: int


@dataclass(frozen=True)
class GridPoint:
    lat: float
    lng: float
    risk: float
    risk_level: str
    demographics: Demographics
    payout_estimate: PayoutEstimate
    distance: float  # km from the center


def classify_risk_level(risk: float) -> str:
    """Map a 0-100 risk to low / medium / high / critical."""
    for upper, level in RISK_LEVEL_BANDS:
        if risk < upper:
            return level
    return "critical"


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def decayed_risk(base_risk: float, distance_km: float) -> float:
    """Risk at a distance from the center, before jitter."""
    decay = math.exp(-distance_km / RISK_DECAY_KM)
    return base_risk * (RISK_FLOOR + (1 - RISK_FLOOR) * decay)


def classify_urbanization(density: float) -> str:
    if density >= URBAN_DENSITY:
        return "urban"
    if density >= SUBURBAN_DENSITY:
        return "suburban"
    return "rural"


def estimate_payout(risk: float, population: int) -> PayoutEstimate:
    """
    Payout percentiles proportional to risk and insured value.

    The multipliers are all >= 1, so expected <= p75 <= p90 <= worst case.
    """
    households = population / PERSONS_PER_HOUSEHOLD
    total_insured_value = households * INSURED_VALUE_PER_HOUSEHOLD
    expected = total_insured_value * ANNUAL_LOSS_RATIO * max(0.0, min(100.0, risk)) / 100
    return PayoutEstimate(
        expected=int(round(expected)),
        percentile75=int(round(expected * PERCENTILE_75_MULTIPLIER)),
        percentile90=int(round(expected * PERCENTILE_90_MULTIPLIER)),
        worst_case=int(round(expected * WORST_CASE_MULTIPLIER)),
    )


def _cell_area_km2(latitude: float, step_deg: float) -> float:
    height = step_deg * KM_PER_DEGREE
    width = step_deg * KM_PER_DEGREE * max(math.cos(math.radians(latitude)), 0.01)
    return height * width


def generate_grid(
    latitude: float,
    longitude: float,
    base_risk: float,
    rng: random.Random,
    grid_size: int = 5,
    radius_deg: float = 0.05,
    jitter: Optional[float] = None,
) -> List[GridPoint]:
    """
    Build the enrichment lattice around a location.

    Args:
        latitude: Center latitude
        longitude: Center longitude
        base_risk: Overall risk score at the center (0-100)
        rng: Random source
        grid_size: Points per side
        radius_deg: Half-width of the lattice in degrees
        jitter: Max absolute noise added to each point's risk

    Returns:
        grid_size**2 points in row-major order
    """
    if grid_size < 1:
        raise ValueError("grid_size must be at least 1")
    jitter = RISK_JITTER if jitter is None else jitter

    step = (radius_deg * 2) / (grid_size - 1) if grid_size > 1 else 0.0
    cell_area = _cell_area_km2(latitude, step if grid_size > 1 else radius_deg * 2)
    center_density = rng.uniform(*CENTER_DENSITY_RANGE)

    points = []
    for i in range(grid_size):
        for j in range(grid_size):
            if grid_size > 1:
                point_lat = latitude - radius_deg + i * step
                point_lng = longitude - radius_deg + j * step
            else:
                point_lat, point_lng = latitude, longitude

            distance = haversine_km(latitude, longitude, point_lat, point_lng)
            risk = decayed_risk(base_risk, distance) + rng.uniform(-jitter, jitter)
            risk = round(max(0.0, min(100.0, risk)), 1)

            density = center_density * math.exp(-distance / DENSITY_DECAY_KM) * rng.uniform(0.8, 1.2)
            density = max(density, 1.0)
            urbanization = classify_urbanization(density)
            population = max(1, int(round(density * cell_area)))

            median_age = rng.uniform(*MEDIAN_AGE_RANGE)
            if urbanization == "rural":
                median_age += RURAL_AGE_OFFSET

            demographics = Demographics(
                population=population,
                population_density=round(density, 1),
                median_age=round(median_age, 1),
                household_income=int(round(rng.uniform(*HOUSEHOLD_INCOME_RANGE))),
                urbanization=urbanization,
            )

            points.append(
                GridPoint(
                    lat=point_lat,
                    lng=point_lng,
                    risk=risk,
                    risk_level=classify_risk_level(risk),
                    demographics=demographics,
                    payout_estimate=estimate_payout(risk, population),
                    distance=round(distance, 2),
                )
            )

    logger.info(
        f"Generated {len(points)} grid points around {latitude}, {longitude} "
        f"(base risk {base_risk})"
    )
    return points
