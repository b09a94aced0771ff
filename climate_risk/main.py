"""
Main FastAPI application.

Serves risk analysis, demographic enrichment and satellite ingestion for the
climate risk map.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from climate_risk.core.config import get_settings
from climate_risk.core.database import check_connection, create_tables
from climate_risk.api import analysis, satellite
from climate_risk.jobs import satellite_scheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Runs on startup and shutdown.
    """
    # Startup
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    logger.info("Starting Climate Risk Service")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Random seed: {settings.random_seed if settings.random_seed is not None else 'unseeded'}")

    try:
        create_tables()
        logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    if settings.enable_scheduler:
        satellite_scheduler.register_satellite_schedule(settings.ingest_interval_minutes)
        satellite_scheduler.start_scheduler()

    yield

    # Shutdown
    if settings.enable_scheduler:
        satellite_scheduler.stop_scheduler()
    logger.info("Shutting down")


# Create FastAPI app
app = FastAPI(
    title="Climate Risk Service",
    description="Climate risk scoring, demographic enrichment and satellite data ingestion",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware (the map UI calls these endpoints from the browser)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(analysis.router)
app.include_router(satellite.router)


@app.get("/")
def root():
    """Root endpoint with service info."""
    return {
        "service": "Climate Risk Service",
        "version": "0.1.0",
        "endpoints": [
            "/analyze-location",
            "/enrich-demographics",
            "/ingest-satellite-data",
            "/satellite-webhook",
            "/satellite-data",
        ],
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """
    Health check endpoint.

    Returns status of the service and database connectivity.
    """
    health_status = {
        "status": "healthy",
        "service": "running",
        "database": "unknown"
    }

    try:
        check_connection()
        health_status["database"] = "connected"
    except Exception as e:
        health_status["status"] = "degraded"
        health_status["database"] = f"error: {str(e)}"
        logger.warning(f"Database health check failed: {e}")

    return health_status
