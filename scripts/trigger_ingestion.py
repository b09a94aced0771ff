#!/usr/bin/env python3
"""
Manual satellite ingestion trigger.

Equivalent to the documented curl call:

    curl -X POST http://localhost:8000/ingest-satellite-data \
      -H "Content-Type: application/json" \
      -d '{"trigger": "manual", "source": "api", "latitude": 40.7128, "longitude": -74.0060}'

Usage:
    python scripts/trigger_ingestion.py --lat 40.7128 --lng -74.0060
    python scripts/trigger_ingestion.py                  # default cities
    python scripts/trigger_ingestion.py --webhook --lat 40.7128 --lng -74.006 --severity high
"""

import argparse
import base64
import json
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

API_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 60.0


def build_ingestion_body(
    latitude: Optional[float],
    longitude: Optional[float],
    trigger: str = "manual",
    source: str = "api",
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"trigger": trigger, "source": source}
    if latitude is not None and longitude is not None:
        body["latitude"] = latitude
        body["longitude"] = longitude
    return body


def build_pubsub_envelope(
    latitude: float,
    longitude: float,
    event_type: str = "new_sentinel_data",
    satellite: str = "Sentinel-2",
    severity: str = "medium",
) -> Dict[str, Any]:
    """Wrap a satellite event the way a Pub/Sub push subscription would."""
    now = datetime.now(timezone.utc).isoformat()
    event = {
        "eventType": event_type,
        "satellite": satellite,
        "location": {"latitude": latitude, "longitude": longitude},
        "acquisitionTime": now,
        "severity": severity,
    }
    return {
        "message": {
            "data": base64.b64encode(json.dumps(event).encode("utf-8")).decode("ascii"),
            "messageId": str(uuid.uuid4()),
            "publishTime": now,
        },
        "subscription": "projects/local/subscriptions/satellite-events",
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Trigger satellite data ingestion")
    parser.add_argument("--api-url", default=API_BASE_URL)
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lng", type=float, default=None)
    parser.add_argument("--trigger", default="manual")
    parser.add_argument("--source", default="api")
    parser.add_argument("--webhook", action="store_true", help="Send as a Pub/Sub push delivery")
    parser.add_argument("--severity", default="medium")
    args = parser.parse_args()

    base_url = args.api_url.rstrip("/")
    if args.webhook:
        if args.lat is None or args.lng is None:
            parser.error("--webhook requires --lat and --lng")
        url = f"{base_url}/satellite-webhook"
        body = build_pubsub_envelope(args.lat, args.lng, severity=args.severity)
    else:
        url = f"{base_url}/ingest-satellite-data"
        body = build_ingestion_body(args.lat, args.lng, args.trigger, args.source)

    with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
        try:
            response = client.post(url, json=body)
        except httpx.HTTPError as e:
            print(f"Request to {url} failed: {e}", file=sys.stderr)
            return 1

    print(json.dumps(response.json(), indent=2))
    return 0 if response.is_success and response.json().get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
