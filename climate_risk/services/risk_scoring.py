"""
Climate risk scoring engine.

Turns environmental indicators into four hazard sub-scores (flood, wildfire,
storm, drought) and a weighted overall score, all on a 0-100 scale.

Each hazard is scored in two steps:
1. Every sub-indicator is normalised to 0-100 with a closed-form rule
2. The sub-indicators are combined with fixed linear weights and clamped

The formulas follow the published methodology shown next to each score in
the map UI. They document intent; none of them has been calibrated against
observed losses.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────
# Weights
# ──────────────────────────────────────────────────────────────────────

FLOOD_WEIGHTS = {
    "precipitation": 0.30,
    "elevation": 0.25,
    "drainage": 0.15,
    "historical_loss": 0.15,
    "climate_adjustment": 0.15,
}

WILDFIRE_WEIGHTS = {
    "fire_weather": 0.25,
    "temperature": 0.20,
    "humidity": 0.15,
    "wind": 0.15,
    "fuel_moisture": 0.15,
    "defensible_space": 0.10,
}

STORM_WEIGHTS = {
    "wind_gust": 0.30,
    "cape": 0.20,
    "lapse_rate": 0.15,
    "precipitation_intensity": 0.20,
    "frequency_severity": 0.15,
}

DROUGHT_WEIGHTS = {
    "precipitation_deficit": 0.30,
    "evapotranspiration": 0.20,
    "vapor_pressure_deficit": 0.20,
    "growing_degree_days": 0.10,
    "soil_moisture": 0.20,
}

OVERALL_WEIGHTS = {
    "flood": 0.30,
    "wildfire": 0.25,
    "storm": 0.25,
    "drought": 0.20,
}

# Methodology constants
PRECIPITATION_WEIGHT = 2.5  # W_p
CLIMATE_SENSITIVITY = 0.07  # alpha, per °C
CLIMATE_EXPONENT = 1.3  # beta
TEMPERATURE_WEIGHT = 3.5  # W_T
WIND_SPREAD_COEFFICIENT = 0.05  # k, per km/h
GUST_EXPONENT = 2.2
GUST_REFERENCE_MS = 50.0
CAPE_REFERENCE = 3000.0  # J/kg
PSYCHROMETRIC_CONSTANT = 0.0674  # kPa/°C at sea level


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def weighted_score(components: Dict[str, float], weights: Dict[str, float]) -> float:
    """Weighted mean of normalised components, clamped to [0, 100]."""
    total_weight = sum(weights.values())
    score = sum(components[name] * weight for name, weight in weights.items())
    return clamp(score / total_weight)


def _band(value: float, bands: Sequence[Tuple[float, float]], default: float = 0.0) -> float:
    """Return the points of the first band whose upper bound exceeds value."""
    for upper, points in bands:
        if value < upper:
            return points
    return default


# ──────────────────────────────────────────────────────────────────────
# Flood
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FloodIndicators:
    precipitation_intensity_mm_hr: float
    elevation_m: float
    saturated_conductivity_cm_hr: float
    max_conductivity_cm_hr: float
    drainage_penalty: float
    historical_losses: Tuple[Tuple[float, float], ...]  # (loss amount, frequency weight)
    total_insured_value: float
    baseline_return_period_score: float
    projected_warming_c: float

    def __post_init__(self):
        if self.max_conductivity_cm_hr <= 0:
            raise ValueError("max_conductivity_cm_hr must be positive")
        if self.total_insured_value <= 0:
            raise ValueError("total_insured_value must be positive")


ELEVATION_BANDS = ((10.0, 40.0), (50.0, 25.0), (200.0, 12.0))


def idf_intensity(
    return_period_years: float,
    duration_hours: float,
    a: float,
    b: float,
    c: float,
    d: float,
) -> float:
    """Rainfall intensity from an IDF curve: a*T^b / (t_d + c)^d, in mm/hr."""
    return a * return_period_years ** b / (duration_hours + c) ** d


def flood_components(ind: FloodIndicators) -> Dict[str, float]:
    loss_sum = sum(loss * weight for loss, weight in ind.historical_losses)
    return {
        "precipitation": clamp(ind.precipitation_intensity_mm_hr * PRECIPITATION_WEIGHT),
        "elevation": _band(ind.elevation_m, ELEVATION_BANDS) / 40.0 * 100.0,
        "drainage": clamp(
            (1 - ind.saturated_conductivity_cm_hr / ind.max_conductivity_cm_hr) * 100
            + ind.drainage_penalty
        ),
        "historical_loss": clamp(loss_sum / ind.total_insured_value * 100),
        "climate_adjustment": clamp(
            ind.baseline_return_period_score
            * (1 + CLIMATE_SENSITIVITY * ind.projected_warming_c) ** CLIMATE_EXPONENT
        ),
    }


def score_flood(ind: FloodIndicators) -> float:
    return weighted_score(flood_components(ind), FLOOD_WEIGHTS)


# ──────────────────────────────────────────────────────────────────────
# Wildfire
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WildfireIndicators:
    temperature_c: float
    relative_humidity_pct: float
    wind_speed_kmh: float
    precipitation_24h_mm: float
    kbdi: float  # Keetch-Byram drought index, 0-800
    fuel_moisture_pct: float
    vegetation_density_30m: float
    max_vegetation_density: float
    construction_coefficient: float = 1.0  # 0.6 (fire resistant) - 1.0

    def __post_init__(self):
        if self.max_vegetation_density <= 0:
            raise ValueError("max_vegetation_density must be positive")


HUMIDITY_BANDS = ((25.0, 40.0), (35.0, 25.0), (50.0, 10.0))


def fuel_moisture(wet_mass_g: float, dry_mass_g: float) -> float:
    """Fuel moisture content in percent: (M_w - M_d) / M_d * 100."""
    if dry_mass_g <= 0:
        raise ValueError("dry_mass_g must be positive")
    return (wet_mass_g - dry_mass_g) / dry_mass_g * 100


def fire_weather_index(ind: WildfireIndicators) -> float:
    """
    FWI scaled by the drought index.

    f(T, RH, W, P24) is a linear stand-in for the Canadian FWI system:
    heat and wind raise it, humidity and recent rain lower it.
    """
    base = max(
        0.0,
        ind.temperature_c * 1.2
        + ind.wind_speed_kmh * 0.5
        - ind.relative_humidity_pct * 0.5
        - ind.precipitation_24h_mm * 2.0,
    )
    return base * (1 + clamp(ind.kbdi, 0.0, 800.0) / 800)


def temperature_score(temperature_c: float) -> float:
    if temperature_c > 35:
        return clamp(TEMPERATURE_WEIGHT * 10 + TEMPERATURE_WEIGHT * 3.5 * (temperature_c - 35))
    if temperature_c >= 25:
        return TEMPERATURE_WEIGHT * (temperature_c - 25)
    return 0.0


def defensible_space(ind: WildfireIndicators) -> float:
    """DS = 100 * (1 - V_30m / V_max) * C_materials; higher is safer."""
    ratio = clamp(ind.vegetation_density_30m / ind.max_vegetation_density, 0.0, 1.0)
    return 100 * (1 - ratio) * ind.construction_coefficient


def wildfire_components(ind: WildfireIndicators) -> Dict[str, float]:
    return {
        "fire_weather": clamp(fire_weather_index(ind)),
        "temperature": temperature_score(ind.temperature_c),
        "humidity": _band(ind.relative_humidity_pct, HUMIDITY_BANDS) / 40.0 * 100.0,
        "wind": clamp((math.exp(WIND_SPREAD_COEFFICIENT * max(ind.wind_speed_kmh, 0.0)) - 1) * 10),
        "fuel_moisture": clamp((30 - ind.fuel_moisture_pct) / 30 * 100),
        "defensible_space": clamp(100 - defensible_space(ind)),
    }


def score_wildfire(ind: WildfireIndicators) -> float:
    return weighted_score(wildfire_components(ind), WILDFIRE_WEIGHTS)


# ──────────────────────────────────────────────────────────────────────
# Storm
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StormIndicators:
    wind_gust_ms: float
    structural_coefficient: float  # 0.5 - 1.5
    cape_j_kg: float
    lapse_rate_c_per_km: float
    precipitation_total_mm: float
    storm_duration_hr: float
    wind_rain_factor: float
    frequency_scale: float  # alpha
    loss_threshold_ratio: float  # x / x0
    tail_index: float  # beta

    def __post_init__(self):
        if self.storm_duration_hr <= 0:
            raise ValueError("storm_duration_hr must be positive")
        if self.loss_threshold_ratio <= 0:
            raise ValueError("loss_threshold_ratio must be positive")


def exceedance_frequency(alpha: float, threshold_ratio: float, beta: float) -> float:
    """Annual frequency of losses above x: alpha * (x / x0)^-(beta + 1)."""
    return alpha * threshold_ratio ** -(beta + 1)


def storm_components(ind: StormIndicators) -> Dict[str, float]:
    gust_damage = max(ind.wind_gust_ms, 0.0) ** GUST_EXPONENT * ind.structural_coefficient
    intensity = (
        ind.precipitation_total_mm / ind.storm_duration_hr * (1 + 0.3 * ind.wind_rain_factor)
    )
    return {
        "wind_gust": clamp(gust_damage / GUST_REFERENCE_MS ** GUST_EXPONENT * 100),
        "cape": clamp(ind.cape_j_kg / CAPE_REFERENCE * 100),
        "lapse_rate": clamp((ind.lapse_rate_c_per_km - 5) / 5 * 100),
        "precipitation_intensity": clamp(intensity * 2),
        "frequency_severity": clamp(
            exceedance_frequency(ind.frequency_scale, ind.loss_threshold_ratio, ind.tail_index) * 100
        ),
    }


def score_storm(ind: StormIndicators) -> float:
    return weighted_score(storm_components(ind), STORM_WEIGHTS)


# ──────────────────────────────────────────────────────────────────────
# Drought
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DroughtIndicators:
    precipitation_90d_mm: float
    net_radiation_mj_m2: float
    soil_heat_flux_mj_m2: float
    mean_temperature_c: float
    wind_speed_2m_ms: float
    relative_humidity_pct: float
    soil_moisture_pct: float
    wilting_point_pct: float
    normal_gdd: float
    daily_temperatures: Tuple[Tuple[float, float], ...] = field(default_factory=tuple)  # (t_max, t_min)
    base_temperature_c: float = 10.0

    def __post_init__(self):
        if self.normal_gdd <= 0:
            raise ValueError("normal_gdd must be positive")


PRECIPITATION_DEFICIT_BANDS = ((5.0, 50.0), (15.0, 30.0), (30.0, 10.0))


def saturation_vapor_pressure(temperature_c: float) -> float:
    """Tetens equation, kPa."""
    return 0.6108 * math.exp(17.27 * temperature_c / (temperature_c + 237.3))


def vapor_pressure_deficit(temperature_c: float, relative_humidity_pct: float) -> float:
    """VPD = e_s(T) * (1 - RH / 100), kPa."""
    return saturation_vapor_pressure(temperature_c) * (1 - clamp(relative_humidity_pct) / 100)


def reference_evapotranspiration(ind: DroughtIndicators) -> float:
    """FAO-56 Penman-Monteith reference evapotranspiration, mm/day."""
    t = ind.mean_temperature_c
    u2 = max(ind.wind_speed_2m_ms, 0.0)
    es = saturation_vapor_pressure(t)
    ea = es * clamp(ind.relative_humidity_pct) / 100
    delta = 4098 * es / (t + 237.3) ** 2
    gamma = PSYCHROMETRIC_CONSTANT

    numerator = (
        0.408 * delta * (ind.net_radiation_mj_m2 - ind.soil_heat_flux_mj_m2)
        + gamma * 900 / (t + 273) * u2 * (es - ea)
    )
    return max(0.0, numerator / (delta + gamma * (1 + 0.34 * u2)))


def growing_degree_days(
    daily_temperatures: Sequence[Tuple[float, float]],
    base_temperature_c: float = 10.0,
) -> float:
    return sum(
        max((t_max + t_min) / 2 - base_temperature_c, 0.0)
        for t_max, t_min in daily_temperatures
    )


def drought_components(ind: DroughtIndicators) -> Dict[str, float]:
    gdd = growing_degree_days(ind.daily_temperatures, ind.base_temperature_c)
    gdd_anomaly = (gdd - ind.normal_gdd) / ind.normal_gdd
    available_moisture = ind.soil_moisture_pct - ind.wilting_point_pct
    return {
        "precipitation_deficit": _band(ind.precipitation_90d_mm, PRECIPITATION_DEFICIT_BANDS) / 50.0 * 100.0,
        "evapotranspiration": clamp(reference_evapotranspiration(ind) / 8 * 100),
        "vapor_pressure_deficit": clamp(
            vapor_pressure_deficit(ind.mean_temperature_c, ind.relative_humidity_pct) / 3 * 100
        ),
        "growing_degree_days": clamp(gdd_anomaly * 200),
        "soil_moisture": clamp((1 - available_moisture / 20) * 100),
    }


def score_drought(ind: DroughtIndicators) -> float:
    return weighted_score(drought_components(ind), DROUGHT_WEIGHTS)


# ──────────────────────────────────────────────────────────────────────
# Combined profile
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EnvironmentalIndicators:
    flood: FloodIndicators
    wildfire: WildfireIndicators
    storm: StormIndicators
    drought: DroughtIndicators


@dataclass(frozen=True)
class RiskProfile:
    """Scores for one analysed location. Immutable once built."""
    latitude: float
    longitude: float
    overall_score: int
    flood: int
    wildfire: int
    storm: int
    drought: int

    @property
    def factors(self) -> Dict[str, int]:
        return {
            "flood": self.flood,
            "wildfire": self.wildfire,
            "storm": self.storm,
            "drought": self.drought,
        }

    def to_dict(self) -> Dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "overallScore": self.overall_score,
            "factors": self.factors,
        }


def _to_int(value: float) -> int:
    return int(math.floor(clamp(value) + 0.5))


def score_location(
    latitude: float,
    longitude: float,
    indicators: EnvironmentalIndicators,
) -> RiskProfile:
    """Score all four hazards and combine them into a RiskProfile."""
    factors = {
        "flood": score_flood(indicators.flood),
        "wildfire": score_wildfire(indicators.wildfire),
        "storm": score_storm(indicators.storm),
        "drought": score_drought(indicators.drought),
    }
    overall = weighted_score(factors, OVERALL_WEIGHTS)

    profile = RiskProfile(
        latitude=latitude,
        longitude=longitude,
        overall_score=_to_int(overall),
        flood=_to_int(factors["flood"]),
        wildfire=_to_int(factors["wildfire"]),
        storm=_to_int(factors["storm"]),
        drought=_to_int(factors["drought"]),
    )
    logger.debug(f"Scored {latitude}, {longitude}: {profile.to_dict()}")
    return profile


def rank_factors(profile: RiskProfile) -> List[Tuple[str, int]]:
    """Factors sorted from most to least severe."""
    return sorted(profile.factors.items(), key=lambda item: item[1], reverse=True)
