"""
Satellite data source adapter.

Generates pseudo-satellite readings (cloud coverage, NDVI, NDWI, surface
temperature and derived risk indicators) on a lattice around each location
and stores them in satellite_data. Copernicus Data Space access runs in demo
mode: readings are synthesized rather than fetched.

Triggers:
- Scheduled: every 30 minutes over the default cities
- Manual: POST /ingest-satellite-data with explicit coordinates
- Pub/Sub push: POST /satellite-webhook for a satellite event's location
"""

from climate_risk.sources.satellite.generator import SatelliteDataGenerator
from climate_risk.sources.satellite.ingest import ingest_satellite_data
from climate_risk.sources.satellite.metadata import DEFAULT_LOCATIONS
from climate_risk.sources.satellite.pubsub import handle_push

__all__ = ["SatelliteDataGenerator", "ingest_satellite_data", "DEFAULT_LOCATIONS", "handle_push"]
