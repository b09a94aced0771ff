"""
Scheduled satellite ingestion.

Registers an APScheduler interval job that ingests the default cities,
mirroring the external 30-minute cron trigger.
"""

import logging
import random
from typing import Any, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from climate_risk.core.config import get_settings
from climate_risk.core.schemas import IngestionRequest
from climate_risk.sources.satellite.ingest import ingest_satellite_data

logger = logging.getLogger(__name__)

JOB_ID = "satellite_ingestion_interval"

# Global scheduler instance
_scheduler: Optional[AsyncIOScheduler] = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the global scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(timezone="UTC")
    return _scheduler


def run_scheduled_ingestion() -> Dict[str, Any]:
    """APScheduler wrapper: one ingestion run over the default cities."""
    from climate_risk.core.database import get_session_factory

    settings = get_settings()
    SessionLocal = get_session_factory()
    db = SessionLocal()

    try:
        summary = ingest_satellite_data(
            db,
            IngestionRequest(trigger="scheduled", source="cron"),
            random.Random(settings.random_seed),
            settings,
        )
        result = summary.model_dump(by_alias=True, mode="json")
        logger.info(f"Scheduled satellite ingestion completed: {result}")
        return result
    except Exception as e:
        logger.error(f"Scheduled satellite ingestion failed: {e}", exc_info=True)
        return {"success": False, "error": str(e)}
    finally:
        db.close()


def register_satellite_schedule(interval_minutes: Optional[int] = None) -> bool:
    """
    Register the interval ingestion job.

    Returns:
        True if the job was registered
    """
    if interval_minutes is None:
        interval_minutes = get_settings().ingest_interval_minutes

    scheduler = get_scheduler()
    try:
        scheduler.add_job(
            run_scheduled_ingestion,
            trigger=IntervalTrigger(minutes=interval_minutes),
            id=JOB_ID,
            name="Satellite Data Ingestion",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Registered satellite ingestion every {interval_minutes} minutes")
        return True
    except Exception as e:
        logger.error(f"Failed to register satellite ingestion schedule: {e}")
        return False


def start_scheduler() -> None:
    """Start the scheduler if not already running."""
    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler() -> None:
    """Stop the scheduler."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    _scheduler = None


def get_scheduler_status() -> Dict[str, Any]:
    """Current scheduler state and next run time of the ingestion job."""
    scheduler = get_scheduler()
    job = scheduler.get_job(JOB_ID)
    next_run = getattr(job, "next_run_time", None) if job else None
    return {
        "running": scheduler.running,
        "job_registered": job is not None,
        "next_run_time": next_run.isoformat() if next_run else None,
    }
