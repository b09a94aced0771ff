"""
Synthetic environmental indicators for a coordinate.

No weather or terrain feed is wired in, so indicators are drawn from
plausible ranges with an injected random source. Latitude sets the
temperature baseline; everything else is location-independent.
"""

import logging
import random

from climate_risk.services.risk_scoring import (
    DroughtIndicators,
    EnvironmentalIndicators,
    FloodIndicators,
    RiskProfile,
    StormIndicators,
    WildfireIndicators,
    fuel_moisture,
    idf_intensity,
    rank_factors,
    score_location,
)

logger = logging.getLogger(__name__)

# NOAA Atlas 14 style IDF coefficients for a mid-latitude region
IDF_COEFFICIENTS = {"a": 60.0, "b": 0.2, "c": 0.5, "d": 0.75}
RETURN_PERIODS = (10, 25, 50, 100, 250)
GROWING_SEASON_DAYS = 90

# Oven-dry fuel sample mass (g) and its moisture content as a fraction
FUEL_DRY_MASS_RANGE = (50.0, 100.0)
FUEL_WATER_FRACTION_RANGE = (0.04, 0.30)


def baseline_temperature(latitude: float) -> float:
    """Mean surface temperature falling off with distance from the equator."""
    return 30.0 - 0.4 * abs(latitude)


def synthesize_indicators(
    latitude: float,
    longitude: float,
    rng: random.Random,
) -> EnvironmentalIndicators:
    """Draw one set of flood/wildfire/storm/drought indicators."""
    t_mean = baseline_temperature(latitude) + rng.uniform(-4.0, 6.0)
    humidity = rng.uniform(15.0, 90.0)

    flood = FloodIndicators(
        precipitation_intensity_mm_hr=idf_intensity(
            rng.choice(RETURN_PERIODS),
            rng.uniform(1.0, 24.0),
            **IDF_COEFFICIENTS,
        ),
        elevation_m=rng.uniform(0.0, 600.0),
        saturated_conductivity_cm_hr=rng.uniform(0.1, 10.0),
        max_conductivity_cm_hr=10.0,
        drainage_penalty=rng.uniform(0.0, 15.0),
        historical_losses=tuple(
            (rng.uniform(0.0, 2_000_000.0), rng.uniform(0.0, 1.0)) for _ in range(5)
        ),
        total_insured_value=25_000_000.0,
        baseline_return_period_score=rng.uniform(10.0, 70.0),
        projected_warming_c=rng.uniform(1.0, 3.0),
    )

    dry_mass = rng.uniform(*FUEL_DRY_MASS_RANGE)
    wet_mass = dry_mass * (1 + rng.uniform(*FUEL_WATER_FRACTION_RANGE))

    wildfire = WildfireIndicators(
        temperature_c=t_mean + rng.uniform(0.0, 8.0),
        relative_humidity_pct=humidity,
        wind_speed_kmh=rng.uniform(0.0, 50.0),
        precipitation_24h_mm=rng.uniform(0.0, 10.0),
        kbdi=rng.uniform(0.0, 800.0),
        fuel_moisture_pct=fuel_moisture(wet_mass, dry_mass),
        vegetation_density_30m=rng.uniform(0.0, 1.0),
        max_vegetation_density=1.0,
        construction_coefficient=rng.uniform(0.6, 1.0),
    )

    storm = StormIndicators(
        wind_gust_ms=rng.uniform(5.0, 55.0),
        structural_coefficient=rng.uniform(0.5, 1.5),
        cape_j_kg=rng.uniform(0.0, 3500.0),
        lapse_rate_c_per_km=rng.uniform(4.0, 10.0),
        precipitation_total_mm=rng.uniform(0.0, 120.0),
        storm_duration_hr=rng.uniform(1.0, 12.0),
        wind_rain_factor=rng.uniform(0.0, 1.0),
        frequency_scale=rng.uniform(0.05, 0.8),
        loss_threshold_ratio=rng.uniform(1.0, 3.0),
        tail_index=rng.uniform(0.5, 2.0),
    )

    daily_temperatures = tuple(
        (t_mean + rng.uniform(3.0, 8.0), t_mean - rng.uniform(3.0, 8.0))
        for _ in range(GROWING_SEASON_DAYS)
    )
    drought = DroughtIndicators(
        precipitation_90d_mm=rng.uniform(0.0, 60.0),
        net_radiation_mj_m2=rng.uniform(8.0, 25.0),
        soil_heat_flux_mj_m2=rng.uniform(0.0, 2.0),
        mean_temperature_c=t_mean,
        wind_speed_2m_ms=rng.uniform(0.5, 6.0),
        relative_humidity_pct=humidity,
        soil_moisture_pct=rng.uniform(8.0, 40.0),
        wilting_point_pct=rng.uniform(5.0, 15.0),
        normal_gdd=max(1.0, (baseline_temperature(latitude) - 10.0) * GROWING_SEASON_DAYS),
        daily_temperatures=daily_temperatures,
    )

    return EnvironmentalIndicators(flood=flood, wildfire=wildfire, storm=storm, drought=drought)


def analyze_location(latitude: float, longitude: float, rng: random.Random) -> RiskProfile:
    """Synthesize indicators for a coordinate and score them."""
    logger.info(f"Analyzing location {latitude}, {longitude}")
    profile = score_location(latitude, longitude, synthesize_indicators(latitude, longitude, rng))
    dominant, score = rank_factors(profile)[0]
    logger.info(
        f"Overall score {profile.overall_score} for {latitude}, {longitude} "
        f"(dominant hazard: {dominant} at {score})"
    )
    return profile
