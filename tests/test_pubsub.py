"""
Unit tests for Pub/Sub envelope decoding and event processing.
"""
import base64
import json

import pytest

from climate_risk.core.errors import EnvelopeDecodeError
from climate_risk.core.models import IngestionJob, SatelliteData
from climate_risk.sources.satellite import pubsub
from climate_risk.sources.satellite.pubsub import (
    build_ingestion_request,
    decode_envelope,
    handle_push,
)

SAMPLE_EVENT = {
    "eventType": "new_sentinel_data",
    "satellite": "Sentinel-2",
    "location": {"latitude": 29.7604, "longitude": -95.3698},
    "acquisitionTime": "2025-11-09T12:00:00Z",
    "severity": "high",
}


def encode(payload) -> str:
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def make_envelope(payload=None, message_id="msg-123"):
    return {
        "message": {
            "data": encode(SAMPLE_EVENT if payload is None else payload),
            "messageId": message_id,
            "publishTime": "2025-11-09T12:00:01Z",
        },
        "subscription": "projects/demo/subscriptions/satellite-events",
    }


class TestDecodeEnvelope:
    """Tests for decode_envelope."""

    @pytest.mark.unit
    def test_decodes_event(self):
        envelope, event = decode_envelope(make_envelope())

        assert envelope.message.message_id == "msg-123"
        assert event.event_type == "new_sentinel_data"
        assert event.satellite == "Sentinel-2"
        assert event.location.latitude == 29.7604
        assert event.severity == "high"

    @pytest.mark.unit
    @pytest.mark.parametrize("body", [None, [], "text", {}, {"message": None}, {"subscription": "x"}])
    def test_missing_message(self, body):
        with pytest.raises(EnvelopeDecodeError) as exc_info:
            decode_envelope(body)

        assert exc_info.value.message == "Invalid Pub/Sub message format"

    @pytest.mark.unit
    def test_missing_data(self):
        with pytest.raises(EnvelopeDecodeError):
            decode_envelope({"message": {"messageId": "m-1"}})

    @pytest.mark.unit
    def test_invalid_base64(self):
        body = {"message": {"data": "not base64!!", "messageId": "m-1"}}

        with pytest.raises(EnvelopeDecodeError) as exc_info:
            decode_envelope(body)

        assert "Could not decode message data" in exc_info.value.message

    @pytest.mark.unit
    def test_data_not_json(self):
        with pytest.raises(EnvelopeDecodeError):
            decode_envelope(make_envelope(b"definitely not json"))

    @pytest.mark.unit
    def test_data_not_an_object(self):
        with pytest.raises(EnvelopeDecodeError) as exc_info:
            decode_envelope(make_envelope([1, 2, 3]))

        assert exc_info.value.message == "Message data must be a JSON object"

    @pytest.mark.unit
    def test_event_missing_location(self):
        with pytest.raises(EnvelopeDecodeError) as exc_info:
            decode_envelope(make_envelope({"eventType": "new_sentinel_data"}))

        assert exc_info.value.errors

    @pytest.mark.unit
    def test_event_missing_type(self):
        payload = {"location": {"latitude": 1.0, "longitude": 2.0}}

        with pytest.raises(EnvelopeDecodeError):
            decode_envelope(make_envelope(payload))


class TestBuildIngestionRequest:

    @pytest.mark.unit
    def test_maps_event_fields(self):
        _, event = decode_envelope(make_envelope())

        request = build_ingestion_request(event)

        assert request.trigger == "pubsub"
        assert request.source == "google-cloud"
        assert request.latitude == 29.7604
        assert request.longitude == -95.3698
        assert request.locations is None
        assert request.event_type == "new_sentinel_data"
        assert request.severity == "high"


class TestHandlePush:
    """Tests for handle_push."""

    @pytest.mark.unit
    def test_success(self, test_db, rng):
        result = handle_push(test_db, make_envelope(), rng)

        assert result.success is True
        assert result.message_id == "msg-123"
        assert result.event_type == "new_sentinel_data"
        assert result.data_points_processed == 49
        assert result.error is None
        assert test_db.query(SatelliteData).count() == 49

        job = test_db.query(IngestionJob).one()
        assert job.config["trigger"] == "pubsub"
        assert job.config["event_type"] == "new_sentinel_data"

    @pytest.mark.unit
    def test_bad_envelope_is_a_failure_result(self, test_db, rng):
        result = handle_push(test_db, {"message": {"data": "%%%", "messageId": "m"}}, rng)

        assert result.success is False
        assert result.error
        assert test_db.query(SatelliteData).count() == 0

    @pytest.mark.unit
    def test_unexpected_error_propagates(self, test_db, rng, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(pubsub, "ingest_satellite_data", boom)

        with pytest.raises(RuntimeError):
            handle_push(test_db, make_envelope(), rng)
