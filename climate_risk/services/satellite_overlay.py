"""
Satellite overlay queries for the risk map.
"""

import logging
from typing import Dict, List, Any

from sqlalchemy.orm import Session

from climate_risk.core.models import SatelliteData
from climate_risk.services.grid_synthesizer import RISK_LEVEL_COLORS, classify_risk_level

logger = logging.getLogger(__name__)

DEFAULT_BBOX_DELTA = 0.05
DEFAULT_LIMIT = 100

INDICATOR_KEYS = ("flood_risk", "drought_risk", "wildfire_risk", "storm_risk")


def query_satellite_data(
    db: Session,
    latitude: float,
    longitude: float,
    delta: float = DEFAULT_BBOX_DELTA,
    limit: int = DEFAULT_LIMIT,
) -> List[SatelliteData]:
    """
    Rows inside the box (lat ± delta, lng ± delta), newest acquisition first.
    """
    rows = (
        db.query(SatelliteData)
        .filter(SatelliteData.latitude >= latitude - delta)
        .filter(SatelliteData.latitude <= latitude + delta)
        .filter(SatelliteData.longitude >= longitude - delta)
        .filter(SatelliteData.longitude <= longitude + delta)
        .order_by(SatelliteData.acquisition_time.desc(), SatelliteData.id.desc())
        .limit(limit)
        .all()
    )
    logger.debug(f"Overlay query at {latitude}, {longitude} returned {len(rows)} rows")
    return rows


def average_risk(risk_indicators: Dict[str, Any]) -> float:
    values = [float(risk_indicators.get(key, 0) or 0) for key in INDICATOR_KEYS]
    return sum(values) / len(values)


def summarize_overlay_point(row: SatelliteData) -> Dict[str, Any]:
    """Row as a dict with its mean indicator and legend color."""
    data = row.to_dict()
    avg = average_risk(row.risk_indicators or {})
    data["average_risk"] = round(avg, 2)
    data["color"] = RISK_LEVEL_COLORS[classify_risk_level(avg)]
    return data
