"""
JSON serialisation of audit events.
"""

import json
from datetime import datetime
from functools import singledispatchmethod
from typing import Any

from auditlink.models import (
    AuditEvent,
    DataCall,
    DataEvent,
    ExtendedDataEvent,
    MergedDataEvent,
)


def _timestamp(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")


def _data_call(call: DataCall) -> dict[str, Any]:
    return {
        "tags": call.tags,
        "detail": call.detail,
        "generatedAt": _timestamp(call.generated_at),
    }


def _event_dict(event: DataEvent | ExtendedDataEvent) -> dict[str, Any]:
    return {
        "auditSource": event.audit_source,
        "auditType": event.audit_type,
        "eventId": event.event_id,
        "tags": event.tags,
        "detail": event.detail,
        "generatedAt": _timestamp(event.generated_at),
    }


class AuditSerialiser:
    """
    Turns audit events into the JSON wire form sent to datastream.

    Example:
        payload = AuditSerialiser().serialise(event)
    """

    @singledispatchmethod
    def serialise(self, event: AuditEvent) -> str:
        raise TypeError(f"Cannot serialise {type(event).__name__}")

    @serialise.register
    def _(self, event: DataEvent) -> str:
        return self.serialise_data_event(event)

    @serialise.register
    def _(self, event: ExtendedDataEvent) -> str:
        return self.serialise_extended_event(event)

    @serialise.register
    def _(self, event: MergedDataEvent) -> str:
        return self.serialise_merged_event(event)

    def serialise_data_event(self, event: DataEvent) -> str:
        return self._dumps(_event_dict(event))

    def serialise_extended_event(self, event: ExtendedDataEvent) -> str:
        return self._dumps(_event_dict(event))

    def serialise_merged_event(self, event: MergedDataEvent) -> str:
        return self._dumps(
            {
                "auditSource": event.audit_source,
                "auditType": event.audit_type,
                "eventId": event.event_id,
                "request": _data_call(event.request),
                "response": _data_call(event.response),
            }
        )

    @staticmethod
    def _dumps(data: dict[str, Any]) -> str:
        return json.dumps(data, separators=(",", ":"), default=str)
