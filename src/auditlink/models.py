"""
Audit data models.

Provides:
- HandlerResult: Outcome of a single handler send attempt
- AuditResult: Caller-visible outcome (Success, Disabled, Failure)
- DataEvent / ExtendedDataEvent / MergedDataEvent: Event payloads
- DataCall: One half (request or response) of a merged event
- EventKeys / EventTypes: Fixed tag and detail vocabulary
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union
from uuid import uuid4


def _utc_now() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def _generate_id() -> str:
    return str(uuid4())


class EventKeys:
    """Keys used in audit tags and details."""

    STATUS_CODE = "statusCode"
    FAILED_REQUEST_MESSAGE = "failedRequestReason"
    RESPONSE_MESSAGE = "responseMessage"
    PATH = "path"
    METHOD = "method"
    REQUEST_BODY = "requestBody"
    TRANSACTION_NAME = "transactionName"

    # Correlation headers
    REQUEST_ID = "X-Request-ID"
    SESSION_ID = "X-Session-ID"
    CLIENT_IP = "clientIP"
    CLIENT_PORT = "clientPort"
    AKAMAI_REPUTATION = "Akamai-Reputation"
    DEVICE_ID = "deviceID"

    # Detail fields
    IP_ADDRESS = "ipAddress"
    AUTHORISATION = "Authorization"
    TOKEN = "token"


class EventTypes:
    """Audit type tags."""

    OUTBOUND_CALL = "OutboundCall"


class HandlerResult(str, Enum):
    """Outcome of one handler send attempt."""

    SUCCESS = "success"
    REJECTED = "rejected"  # Endpoint actively refused the event
    FAILURE = "failure"  # Transport or protocol failure


# =============================================================================
# AUDIT RESULT
# =============================================================================


@dataclass(frozen=True, slots=True)
class Success:
    """Event was accepted by the primary handler."""

    def __str__(self) -> str:
        return "Success"


@dataclass(frozen=True, slots=True)
class Disabled:
    """Auditing is switched off; nothing was sent."""

    def __str__(self) -> str:
        return "Disabled"


@dataclass(frozen=True, slots=True)
class Failure:
    """Event could not be delivered."""

    message: str
    cause: BaseException | None = None

    def __str__(self) -> str:
        return f"Failure({self.message})"


AuditResult = Union[Success, Disabled, Failure]

SUCCESS = Success()
DISABLED = Disabled()

REJECTED_MESSAGE = "Event was actively rejected"
FAILED_MESSAGE = "Event sending failed"


def from_handler_result(result: HandlerResult) -> AuditResult:
    """Map a handler outcome to the caller-visible audit result."""
    if result is HandlerResult.SUCCESS:
        return SUCCESS
    if result is HandlerResult.REJECTED:
        return Failure(REJECTED_MESSAGE)
    return Failure(FAILED_MESSAGE)


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True, slots=True)
class DataEvent:
    """
    Simple audit event with flat string tags and details.

    Example:
        event = DataEvent(
            audit_source="my-service",
            audit_type="UserLogin",
            detail={"userId": "123"},
        )
    """

    audit_source: str
    audit_type: str
    event_id: str = field(default_factory=_generate_id)
    tags: dict[str, str] = field(default_factory=dict)
    detail: dict[str, str] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, slots=True)
class ExtendedDataEvent:
    """Audit event whose detail is an arbitrary JSON value."""

    audit_source: str
    audit_type: str
    event_id: str = field(default_factory=_generate_id)
    tags: dict[str, str] = field(default_factory=dict)
    detail: Any = None
    generated_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, slots=True)
class DataCall:
    """Tags, details and timestamp for one side of a merged event."""

    tags: dict[str, str]
    detail: dict[str, str]
    generated_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, slots=True)
class MergedDataEvent:
    """Audit event pairing a request with its response."""

    audit_source: str
    audit_type: str
    request: DataCall
    response: DataCall
    event_id: str = field(default_factory=_generate_id)


AuditEvent = Union[DataEvent, ExtendedDataEvent, MergedDataEvent]
