"""Tests for the audit serialiser."""

import json
from datetime import datetime, timezone

import pytest

from auditlink.models import DataCall, DataEvent, ExtendedDataEvent, MergedDataEvent
from auditlink.serialiser import AuditSerialiser

GENERATED_AT = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


@pytest.fixture
def serialiser():
    return AuditSerialiser()


class TestAuditSerialiser:
    """Tests for AuditSerialiser."""

    def test_data_event(self, serialiser):
        """Simple events use camelCase keys and ISO timestamps."""
        event = DataEvent(
            audit_source="app",
            audit_type="Login",
            event_id="evt-1",
            tags={"X-Request-ID": "req-1"},
            detail={"userId": "123"},
            generated_at=GENERATED_AT,
        )

        data = json.loads(serialiser.serialise(event))

        assert data == {
            "auditSource": "app",
            "auditType": "Login",
            "eventId": "evt-1",
            "tags": {"X-Request-ID": "req-1"},
            "detail": {"userId": "123"},
            "generatedAt": "2026-01-02T03:04:05.678+00:00",
        }

    def test_extended_event(self, serialiser):
        """Extended events keep nested detail."""
        event = ExtendedDataEvent(
            audit_source="app",
            audit_type="Upload",
            detail={"files": [1, 2]},
            generated_at=GENERATED_AT,
        )

        data = json.loads(serialiser.serialise(event))

        assert data["detail"] == {"files": [1, 2]}

    def test_simple_and_extended_share_shape(self, serialiser):
        """Simple and extended events serialise to the same set of keys."""
        simple = DataEvent(audit_source="app", audit_type="Login", event_id="evt-1")
        extended = ExtendedDataEvent(
            audit_source="app", audit_type="Login", event_id="evt-1"
        )

        simple_data = json.loads(serialiser.serialise(simple))
        extended_data = json.loads(serialiser.serialise(extended))

        assert simple_data.keys() == extended_data.keys()
        assert simple_data["eventId"] == extended_data["eventId"] == "evt-1"

    def test_merged_event(self, serialiser):
        """Merged events nest request and response calls."""
        event = MergedDataEvent(
            audit_source="app",
            audit_type="OutboundCall",
            event_id="evt-2",
            request=DataCall({"path": "/x"}, {"method": "GET"}, GENERATED_AT),
            response=DataCall({}, {"statusCode": "200"}, GENERATED_AT),
        )

        data = json.loads(serialiser.serialise(event))

        assert data["eventId"] == "evt-2"
        assert data["request"]["detail"] == {"method": "GET"}
        assert data["response"]["tags"] == {}
        assert data["response"]["generatedAt"] == "2026-01-02T03:04:05.678+00:00"

    def test_unknown_type(self, serialiser):
        """Unknown values are refused."""
        with pytest.raises(TypeError):
            serialiser.serialise({"not": "an event"})
