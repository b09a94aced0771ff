"""
Satellite data ingestion logic.

This function set orchestrates one ingestion run:
1. Resolves which locations to process
2. Creates an ingestion_jobs record
3. Generates a lattice of readings per location
4. Bulk-inserts each location's readings in its own transaction
5. Updates the job and returns a summary

A failed insert for one location is logged and skipped; the remaining
locations are still processed.
"""
import logging
import random
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from climate_risk.core.config import Settings
from climate_risk.core.errors import PersistenceError
from climate_risk.core.models import IngestionJob, JobStatus, SatelliteData
from climate_risk.core.schemas import IngestionRequest, IngestionResponse, LocationInput
from climate_risk.sources.satellite.generator import SatelliteDataGenerator, SatelliteReading
from climate_risk.sources.satellite.metadata import (
    DEFAULT_LOCATIONS,
    DEFAULT_SOURCE_LABEL,
    GRID_RADIUS_DEG,
    GRID_SIZE,
    SOURCE_NAME,
)

logger = logging.getLogger(__name__)


def resolve_locations(request: IngestionRequest) -> List[LocationInput]:
    """
    Pick the locations for a request.

    Order of precedence: explicit ``locations`` (even an empty list), then
    the single (latitude, longitude) pair when both are present, then the
    default cities.
    """
    if request.locations is not None:
        return list(request.locations)

    if request.latitude is not None and request.longitude is not None:
        return [LocationInput(lat=request.latitude, lng=request.longitude)]

    return [LocationInput(lat=loc["lat"], lng=loc["lng"]) for loc in DEFAULT_LOCATIONS]


def persist_satellite_points(
    db: Session,
    readings: List[SatelliteReading],
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> int:
    """
    Insert one location's readings in a single transaction.

    Raises:
        PersistenceError: If the insert fails (the transaction is rolled back)

    Returns:
        Number of rows inserted
    """
    try:
        db.add_all([SatelliteData(**reading.to_row()) for reading in readings])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(
            f"Error inserting satellite data for {latitude}, {longitude}: {e}",
            latitude=latitude,
            longitude=longitude,
        ) from e
    return len(readings)


def build_generator(
    rng: random.Random,
    settings: Optional[Settings] = None,
) -> SatelliteDataGenerator:
    """Build a generator from settings, falling back to module defaults."""
    if settings is None:
        return SatelliteDataGenerator(
            rng,
            grid_size=GRID_SIZE,
            radius_deg=GRID_RADIUS_DEG,
            source_label=DEFAULT_SOURCE_LABEL,
        )
    return SatelliteDataGenerator(
        rng,
        grid_size=settings.satellite_grid_size,
        radius_deg=settings.satellite_grid_radius_deg,
        source_label=settings.satellite_source_label,
    )


def ingest_satellite_data(
    db: Session,
    request: IngestionRequest,
    rng: random.Random,
    settings: Optional[Settings] = None,
) -> IngestionResponse:
    """
    Run one satellite ingestion.

    Args:
        db: Database session
        request: Validated ingestion request
        rng: Random source for the synthetic readings
        settings: Optional settings for grid geometry and source label

    Returns:
        Summary with locations processed and rows inserted
    """
    logger.info(
        f"Satellite data ingestion triggered by: {request.trigger} "
        f"(source: {request.source})"
    )
    if request.event_type:
        logger.info(
            f"Event {request.event_type} from {request.satellite} "
            f"(severity: {request.severity})"
        )

    locations = resolve_locations(request)
    generator = build_generator(rng, settings)

    job = IngestionJob(
        source=SOURCE_NAME,
        status=JobStatus.RUNNING,
        config=request.model_dump(mode="json", exclude_none=True),
        started_at=datetime.utcnow(),
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    job_id = job.id

    total_inserted = 0
    failures: List[Dict[str, Any]] = []

    try:
        for location in locations:
            readings = generator.generate(location.lat, location.lng)
            try:
                inserted = persist_satellite_points(db, readings, location.lat, location.lng)
            except PersistenceError as e:
                logger.error(str(e))
                failures.append(e.to_dict())
                continue

            total_inserted += inserted
            logger.info(
                f"Inserted {inserted} satellite data points for "
                f"{location.lat}, {location.lng}"
            )
    except Exception as e:
        db.rollback()
        _finish_job(db, job_id, JobStatus.FAILED, total_inserted, str(e), failures)
        raise

    status = JobStatus.SUCCESS
    error_message = None
    if failures:
        error_message = f"{len(failures)} of {len(locations)} locations failed to insert"
        if len(failures) == len(locations):
            status = JobStatus.FAILED
    _finish_job(db, job_id, status, total_inserted, error_message, failures)

    summary = IngestionResponse(
        trigger=request.trigger,
        source=request.source,
        locations_processed=len(locations),
        data_points_inserted=total_inserted,
        timestamp=datetime.now(timezone.utc),
    )
    logger.info(f"Satellite ingestion summary: {summary.model_dump(by_alias=True)}")
    return summary


def _finish_job(
    db: Session,
    job_id: int,
    status: JobStatus,
    rows_inserted: int,
    error_message: Optional[str],
    failures: List[Dict[str, Any]],
) -> None:
    """Record the outcome of a run on its job row."""
    job = db.get(IngestionJob, job_id)
    if job is None:
        logger.warning(f"Ingestion job {job_id} disappeared before completion")
        return
    job.status = status
    job.completed_at = datetime.utcnow()
    job.rows_inserted = rows_inserted
    job.error_message = error_message
    job.error_details = {"failures": failures} if failures else None
    db.commit()
