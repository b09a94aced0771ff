"""
Pub/Sub push envelope decoding and satellite event processing.

The transport contract (always acknowledge with HTTP 200) lives in the API
layer; this module only reports a success/failure WebhookResult.
"""
import base64
import binascii
import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session

from climate_risk.core.config import Settings
from climate_risk.core.errors import ClimateRiskError, EnvelopeDecodeError
from climate_risk.core.schemas import IngestionRequest, PubSubEnvelope, SatelliteEvent
from climate_risk.sources.satellite.ingest import ingest_satellite_data

logger = logging.getLogger(__name__)

PUBSUB_TRIGGER = "pubsub"
PUBSUB_SOURCE = "google-cloud"


@dataclass
class WebhookResult:
    """Outcome of processing one push delivery."""
    success: bool
    message_id: Optional[str] = None
    event_type: Optional[str] = None
    data_points_processed: Optional[int] = None
    error: Optional[str] = None


def decode_envelope(body: Any) -> Tuple[PubSubEnvelope, SatelliteEvent]:
    """
    Validate a push envelope and decode its base64 JSON payload.

    Raises:
        EnvelopeDecodeError: On a missing message, bad base64, non-JSON
            data or a payload that fails validation
    """
    if not isinstance(body, dict) or not body.get("message"):
        raise EnvelopeDecodeError("Invalid Pub/Sub message format")

    try:
        envelope = PubSubEnvelope.model_validate(body)
    except ValidationError as e:
        raise EnvelopeDecodeError(
            "Invalid Pub/Sub message format",
            errors=e.errors(include_url=False, include_context=False),
        ) from e

    try:
        decoded = base64.b64decode(envelope.message.data, validate=True)
        payload = json.loads(decoded.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise EnvelopeDecodeError(f"Could not decode message data: {e}") from e

    if not isinstance(payload, dict):
        raise EnvelopeDecodeError("Message data must be a JSON object")

    try:
        event = SatelliteEvent.model_validate(payload)
    except ValidationError as e:
        raise EnvelopeDecodeError(
            "Invalid satellite event payload",
            errors=e.errors(include_url=False, include_context=False),
        ) from e

    return envelope, event


def build_ingestion_request(event: SatelliteEvent) -> IngestionRequest:
    """Map a satellite event onto an ingestion request for its location."""
    return IngestionRequest(
        trigger=PUBSUB_TRIGGER,
        source=PUBSUB_SOURCE,
        latitude=event.location.latitude,
        longitude=event.location.longitude,
        event_type=event.event_type,
        satellite=event.satellite,
        severity=event.severity,
    )


def process_satellite_event(
    db: Session,
    envelope: PubSubEnvelope,
    event: SatelliteEvent,
    rng: random.Random,
    settings: Optional[Settings] = None,
) -> WebhookResult:
    """Trigger ingestion for the event's location and wrap the summary."""
    logger.info(f"Processing satellite event: {event.event_type} from {event.satellite}")
    logger.info(f"Location: {event.location.latitude}, {event.location.longitude}")
    logger.info(f"Severity: {event.severity}")

    summary = ingest_satellite_data(db, build_ingestion_request(event), rng, settings)

    logger.info(
        f"Event processing complete: message={envelope.message.message_id} "
        f"published={envelope.message.publish_time} "
        f"acquired={event.acquisition_time} "
        f"inserted={summary.data_points_inserted}"
    )
    return WebhookResult(
        success=True,
        message_id=envelope.message.message_id,
        event_type=event.event_type,
        data_points_processed=summary.data_points_inserted,
    )


def handle_push(
    db: Session,
    body: Any,
    rng: random.Random,
    settings: Optional[Settings] = None,
) -> WebhookResult:
    """
    Decode and process one push delivery.

    Service errors become a failed WebhookResult; anything else propagates.
    """
    try:
        envelope, event = decode_envelope(body)
        return process_satellite_event(db, envelope, event, rng, settings)
    except ClimateRiskError as e:
        logger.warning(f"Satellite webhook rejected delivery: {e}")
        return WebhookResult(success=False, error=e.message)
