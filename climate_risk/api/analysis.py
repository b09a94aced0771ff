"""
Risk analysis endpoints.

- POST /analyze-location: four hazard sub-scores and an overall score
- POST /enrich-demographics: lattice of nearby points with demographics and payouts
"""
import logging
import random
from dataclasses import asdict

from fastapi import APIRouter, Depends

from climate_risk.api.deps import get_random_source
from climate_risk.core.config import Settings, get_settings
from climate_risk.core.schemas import (
    AnalyzeLocationRequest,
    EnrichDemographicsRequest,
    GridPointResponse,
    GridResponse,
    RiskProfileResponse,
)
from climate_risk.services.environment import analyze_location
from climate_risk.services.grid_synthesizer import generate_grid

logger = logging.getLogger(__name__)
router = APIRouter(tags=["analysis"])


@router.post("/analyze-location", response_model=RiskProfileResponse)
def analyze(
    request: AnalyzeLocationRequest,
    rng: random.Random = Depends(get_random_source),
) -> RiskProfileResponse:
    """Score flood, wildfire, storm and drought risk for a coordinate."""
    profile = analyze_location(request.latitude, request.longitude, rng)
    return RiskProfileResponse.model_validate(profile.to_dict())


@router.post("/enrich-demographics", response_model=GridResponse)
def enrich_demographics(
    request: EnrichDemographicsRequest,
    rng: random.Random = Depends(get_random_source),
    settings: Settings = Depends(get_settings),
) -> GridResponse:
    """Expand a risk score into a grid of nearby points."""
    points = generate_grid(
        request.latitude,
        request.longitude,
        request.risk_factors.overall_score,
        rng,
        grid_size=settings.demographic_grid_size,
        radius_deg=settings.demographic_grid_radius_deg,
    )
    return GridResponse(grid_data=[GridPointResponse.model_validate(asdict(p)) for p in points])
