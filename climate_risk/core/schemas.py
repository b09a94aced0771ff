"""
Pydantic schemas for API requests and responses.

Client-facing payloads use camelCase on the wire (the map UI's convention);
satellite_data rows keep their snake_case column names.
"""
from datetime import datetime
from typing import Optional, List, Dict
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Satellite ingestion
# =============================================================================

class LocationInput(BaseModel):
    """A location to ingest. Accepts {lat, lng} or {latitude, longitude}."""
    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(
        ...,
        ge=-90.0,
        le=90.0,
        validation_alias=AliasChoices("lat", "latitude"),
    )
    lng: float = Field(
        ...,
        ge=-180.0,
        le=180.0,
        validation_alias=AliasChoices("lng", "longitude"),
    )


class IngestionRequest(CamelModel):
    """Request body for POST /ingest-satellite-data.

    Every field is optional: the scheduled trigger posts no body at all.
    """
    trigger: str = "scheduled"
    source: str = "cron"
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    locations: Optional[List[LocationInput]] = None

    # Pass-through metadata from Pub/Sub events
    event_type: Optional[str] = None
    satellite: Optional[str] = None
    severity: Optional[str] = None


class IngestionResponse(CamelModel):
    """Summary returned by a successful ingestion run."""
    success: bool = True
    message: str = "Satellite data ingestion complete"
    trigger: str
    source: str
    locations_processed: int
    data_points_inserted: int
    timestamp: datetime


class ErrorResponse(CamelModel):
    """Body returned when a request fails before producing a summary."""
    success: bool = False
    error: str
    timestamp: datetime


# =============================================================================
# Pub/Sub webhook
# =============================================================================

class PubSubMessage(CamelModel):
    """The message part of a Pub/Sub push envelope."""
    data: str = Field(..., min_length=1, description="base64-encoded JSON payload")
    message_id: str
    publish_time: Optional[str] = None
    attributes: Optional[Dict[str, str]] = None


class PubSubEnvelope(CamelModel):
    """Pub/Sub push envelope."""
    message: PubSubMessage
    subscription: Optional[str] = None


class EventLocation(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class SatelliteEvent(CamelModel):
    """Decoded inner payload of a satellite Pub/Sub message."""
    event_type: str = Field(..., min_length=1)
    satellite: Optional[str] = None
    location: EventLocation
    acquisition_time: Optional[str] = None
    severity: Optional[str] = None


class WebhookResponse(CamelModel):
    """Acknowledgement body; sent with HTTP 200 whatever the outcome."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    message_id: Optional[str] = None
    event_type: Optional[str] = None
    data_points_processed: Optional[int] = None
    timestamp: Optional[datetime] = None


# =============================================================================
# Satellite overlay
# =============================================================================

class RiskIndicators(BaseModel):
    flood_risk: int
    drought_risk: int
    wildfire_risk: int
    storm_risk: int


class SatelliteDataPoint(BaseModel):
    """A satellite_data row as served to the map overlay."""
    id: int
    latitude: float
    longitude: float
    acquisition_time: datetime
    cloud_coverage: Optional[float] = None
    vegetation_index: Optional[float] = None
    water_index: Optional[float] = None
    temperature: Optional[float] = None
    risk_indicators: RiskIndicators
    source: str
    average_risk: Optional[float] = None
    color: Optional[str] = None

    model_config = {"from_attributes": True}


class SatelliteOverlayResponse(BaseModel):
    count: int
    last_update: Optional[datetime] = None
    points: List[SatelliteDataPoint]


# =============================================================================
# Risk analysis & demographic grid
# =============================================================================

class AnalyzeLocationRequest(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class RiskFactors(BaseModel):
    flood: float = Field(..., ge=0.0, le=100.0)
    wildfire: float = Field(..., ge=0.0, le=100.0)
    storm: float = Field(..., ge=0.0, le=100.0)
    drought: float = Field(..., ge=0.0, le=100.0)


class RiskProfileResponse(CamelModel):
    latitude: float
    longitude: float
    overall_score: float
    factors: RiskFactors


class RiskFactorsInput(CamelModel):
    """Risk factors forwarded by the map when requesting the grid."""
    overall_score: float = Field(..., ge=0.0, le=100.0)
    flood: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    wildfire: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    storm: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    drought: Optional[float] = Field(default=None, ge=0.0, le=100.0)


class EnrichDemographicsRequest(CamelModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    risk_factors: RiskFactorsInput


class Demographics(CamelModel):
    population: int
    population_density: float
    median_age: float
    household_income: int
    urbanization: str


class PayoutEstimate(CamelModel):
    expected: int
    percentile75: int
    percentile90: int
    worst_case: int


class GridPointResponse(CamelModel):
    lat: float
    lng: float
    risk: float
    risk_level: str
    demographics: Demographics
    payout_estimate: PayoutEstimate
    distance: float


class GridResponse(CamelModel):
    grid_data: List[GridPointResponse]
