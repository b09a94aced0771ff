"""
Unit tests for the manual ingestion trigger script.
"""
import importlib.util
from pathlib import Path

import pytest

from climate_risk.core.schemas import IngestionRequest
from climate_risk.sources.satellite.pubsub import decode_envelope

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "trigger_ingestion.py"


@pytest.fixture(scope="module")
def trigger_script():
    spec = importlib.util.spec_from_file_location("trigger_ingestion", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.unit
def test_ingestion_body_with_coordinates(trigger_script):
    body = trigger_script.build_ingestion_body(40.7128, -74.0060)

    assert body == {"trigger": "manual", "source": "api", "latitude": 40.7128, "longitude": -74.0060}
    request = IngestionRequest.model_validate(body)
    assert request.trigger == "manual"


@pytest.mark.unit
def test_ingestion_body_without_coordinates(trigger_script):
    body = trigger_script.build_ingestion_body(40.7128, None)

    assert body == {"trigger": "manual", "source": "api"}


@pytest.mark.unit
def test_pubsub_envelope_decodes(trigger_script):
    envelope = trigger_script.build_pubsub_envelope(25.7617, -80.1918, severity="high")

    decoded, event = decode_envelope(envelope)

    assert decoded.message.message_id == envelope["message"]["messageId"]
    assert event.event_type == "new_sentinel_data"
    assert event.satellite == "Sentinel-2"
    assert event.location.latitude == 25.7617
    assert event.severity == "high"
