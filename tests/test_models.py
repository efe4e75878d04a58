"""Tests for audit models and result mapping."""

from datetime import timezone

import pytest

from auditlink.models import (
    DISABLED,
    SUCCESS,
    DataCall,
    DataEvent,
    Disabled,
    ExtendedDataEvent,
    Failure,
    HandlerResult,
    MergedDataEvent,
    Success,
    from_handler_result,
)


class TestFromHandlerResult:
    """Tests for the HandlerResult -> AuditResult mapping."""

    def test_success(self):
        """Success maps to Success."""
        assert from_handler_result(HandlerResult.SUCCESS) == Success()

    def test_rejected(self):
        """Rejected maps to a Failure with the rejection message."""
        result = from_handler_result(HandlerResult.REJECTED)

        assert isinstance(result, Failure)
        assert result.message == "Event was actively rejected"
        assert result.cause is None

    def test_failure(self):
        """Failure maps to a Failure with the sending message."""
        result = from_handler_result(HandlerResult.FAILURE)

        assert isinstance(result, Failure)
        assert result.message == "Event sending failed"

    @pytest.mark.parametrize("handler_result", list(HandlerResult))
    def test_mapping_is_total_and_deterministic(self, handler_result):
        """Every handler result maps to the same audit result each time."""
        first = from_handler_result(handler_result)
        second = from_handler_result(handler_result)

        assert first == second
        assert not isinstance(first, Disabled)


class TestAuditResult:
    """Tests for the AuditResult variants."""

    def test_singletons(self):
        """Module singletons compare equal to fresh instances."""
        assert SUCCESS == Success()
        assert DISABLED == Disabled()
        assert SUCCESS != DISABLED

    def test_failure_carries_cause(self):
        """Failure keeps an optional cause."""
        cause = RuntimeError("boom")
        failure = Failure("Event sending failed", cause)

        assert failure.cause is cause
        assert str(failure) == "Failure(Event sending failed)"

    def test_results_are_frozen(self):
        """Results cannot be modified."""
        failure = Failure("x")

        with pytest.raises(AttributeError):
            failure.message = "y"


class TestEvents:
    """Tests for event dataclasses."""

    def test_data_event_defaults(self):
        """DataEvent generates an id and UTC timestamp."""
        event = DataEvent(audit_source="app", audit_type="Login")

        assert event.event_id
        assert event.tags == {}
        assert event.detail == {}
        assert event.generated_at.tzinfo == timezone.utc

    def test_event_ids_are_unique(self):
        """Each event gets its own id."""
        first = DataEvent(audit_source="app", audit_type="Login")
        second = DataEvent(audit_source="app", audit_type="Login")

        assert first.event_id != second.event_id

    def test_extended_event_detail_is_any_json(self):
        """ExtendedDataEvent accepts nested detail."""
        event = ExtendedDataEvent(
            audit_source="app",
            audit_type="Upload",
            detail={"files": [{"name": "a.txt", "size": 10}]},
        )

        assert event.detail["files"][0]["size"] == 10

    def test_merged_event(self):
        """MergedDataEvent pairs request and response calls."""
        event = MergedDataEvent(
            audit_source="app",
            audit_type="OutboundCall",
            request=DataCall(tags={"path": "/x"}, detail={"method": "GET"}),
            response=DataCall(tags={}, detail={"statusCode": "200"}),
        )

        assert event.request.detail["method"] == "GET"
        assert event.response.tags == {}
        assert event.event_id
