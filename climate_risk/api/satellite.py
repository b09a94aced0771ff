"""
Satellite data endpoints.

Provides HTTP API for:
- Triggering satellite data ingestion (cron, manual or API callers)
- Receiving Pub/Sub push deliveries for satellite events
- Querying stored readings for the map overlay
"""
import json
import logging
import random
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from climate_risk.api.deps import get_random_source
from climate_risk.core.config import Settings, get_settings
from climate_risk.core.database import get_db
from climate_risk.core.errors import PayloadValidationError
from climate_risk.core.schemas import (
    ErrorResponse,
    IngestionRequest,
    IngestionResponse,
    SatelliteDataPoint,
    SatelliteOverlayResponse,
    WebhookResponse,
)
from climate_risk.services.satellite_overlay import query_satellite_data, summarize_overlay_point
from climate_risk.sources.satellite.ingest import ingest_satellite_data
from climate_risk.sources.satellite.pubsub import WebhookResult, handle_push

logger = logging.getLogger(__name__)
router = APIRouter(tags=["satellite"])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_ingestion_request(raw: bytes) -> IngestionRequest:
    """
    Parse an ingestion body. An empty body means all defaults.

    Raises:
        PayloadValidationError: On invalid JSON or schema violations
    """
    if not raw or not raw.strip():
        return IngestionRequest()

    try:
        payload: Any = json.loads(raw)
    except ValueError as e:
        raise PayloadValidationError(f"Malformed JSON body: {e}", component="ingestion") from e

    if payload is None:
        return IngestionRequest()
    if not isinstance(payload, dict):
        raise PayloadValidationError("Request body must be a JSON object", component="ingestion")

    try:
        return IngestionRequest.model_validate(payload)
    except ValidationError as e:
        raise PayloadValidationError(
            "Invalid ingestion request",
            component="ingestion",
            errors=e.errors(include_url=False, include_context=False),
        ) from e


@router.post(
    "/ingest-satellite-data",
    response_model=IngestionResponse,
    responses={500: {"model": ErrorResponse}},
)
async def ingest_satellite(
    request: Request,
    db: Session = Depends(get_db),
    rng: random.Random = Depends(get_random_source),
    settings: Settings = Depends(get_settings),
):
    """
    Generate and store satellite readings.

    **Body (all optional):**
    - `trigger`, `source`: free-form labels recorded with the run
    - `latitude` + `longitude`: a single location
    - `locations`: list of `{lat, lng}`, takes precedence over the pair

    With neither, the five default cities are ingested. Any failure before
    a summary is produced returns HTTP 500.
    """
    try:
        payload = parse_ingestion_request(await request.body())
        summary = ingest_satellite_data(db, payload, rng, settings)
    except Exception as e:
        logger.error(f"Error in satellite ingestion: {e}", exc_info=True)
        error = ErrorResponse(error=getattr(e, "message", None) or str(e), timestamp=_utcnow())
        return JSONResponse(
            status_code=500,
            content=error.model_dump(by_alias=True, mode="json"),
        )

    return JSONResponse(content=summary.model_dump(by_alias=True, mode="json"))


def _webhook_body(result: WebhookResult) -> dict:
    if result.success:
        response = WebhookResponse(
            success=True,
            message="Satellite event processed successfully",
            message_id=result.message_id,
            event_type=result.event_type,
            data_points_processed=result.data_points_processed,
        )
    else:
        response = WebhookResponse(success=False, error=result.error, timestamp=_utcnow())
    return response.model_dump(by_alias=True, mode="json", exclude_none=True)


@router.post("/satellite-webhook", response_model=WebhookResponse)
async def satellite_webhook(
    request: Request,
    db: Session = Depends(get_db),
    rng: random.Random = Depends(get_random_source),
    settings: Settings = Depends(get_settings),
):
    """
    Pub/Sub push endpoint for satellite events.

    Always answers HTTP 200 so the subscription does not redeliver messages
    that can never succeed; `success` carries the real outcome.
    """
    raw = await request.body()
    try:
        body = json.loads(raw) if raw and raw.strip() else None
    except ValueError as e:
        logger.warning(f"Satellite webhook received malformed JSON: {e}")
        result = WebhookResult(success=False, error=f"Malformed JSON body: {e}")
        return JSONResponse(status_code=200, content=_webhook_body(result))

    try:
        result = handle_push(db, body, rng, settings)
    except Exception as e:
        logger.error(f"Error in satellite webhook: {e}", exc_info=True)
        result = WebhookResult(success=False, error=str(e) or e.__class__.__name__)

    return JSONResponse(status_code=200, content=_webhook_body(result))


@router.get("/satellite-data", response_model=SatelliteOverlayResponse)
def get_satellite_data(
    latitude: float = Query(..., ge=-90.0, le=90.0),
    longitude: float = Query(..., ge=-180.0, le=180.0),
    delta: float = Query(0.05, gt=0.0, le=1.0, description="Half-width of the bounding box in degrees"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SatelliteOverlayResponse:
    """
    Stored readings around a point, newest first, for the map overlay.
    """
    rows = query_satellite_data(
        db, latitude, longitude, delta=delta, limit=limit or settings.overlay_query_limit
    )
    points = [SatelliteDataPoint.model_validate(summarize_overlay_point(row)) for row in rows]
    return SatelliteOverlayResponse(
        count=len(points),
        last_update=points[0].acquisition_time if points else None,
        points=points,
    )
