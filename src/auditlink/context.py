"""
Request-scoped call context.

Carries correlation identifiers and forwarded headers for the request
being audited. Passed explicitly to every send and audit operation.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from auditlink.models import EventKeys

MISSING = "-"

# Incoming header names mapped to CallContext fields
_HEADER_FIELDS = {
    "x-request-id": "request_id",
    "x-session-id": "session_id",
    "authorization": "authorization",
    "token": "token",
    "x-forwarded-for": "forwarded",
    "true-client-ip": "true_client_ip",
    "true-client-port": "true_client_port",
    "akamai-reputation": "akamai_reputation",
    "deviceid": "device_id",
}


@dataclass(frozen=True)
class CallContext:
    """
    Correlation data for one request.

    Example:
        ctx = CallContext(request_id="req-1", session_id="sess-1")
        tags = ctx.to_audit_tags("get-user", "/users/1")
    """

    request_id: str | None = None
    session_id: str | None = None
    authorization: str | None = None
    token: str | None = None
    forwarded: str | None = None
    true_client_ip: str | None = None
    true_client_port: str | None = None
    akamai_reputation: str | None = None
    device_id: str | None = None
    extra_headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "CallContext":
        """Build a context from incoming request headers."""
        values: dict[str, str] = {}
        extra: dict[str, str] = {}
        for name, value in headers.items():
            attr = _HEADER_FIELDS.get(name.lower())
            if attr:
                values[attr] = value
            else:
                extra[name] = value
        return cls(extra_headers=extra, **values)

    def to_audit_tags(self, transaction_name: str, path: str) -> dict[str, str]:
        """Project into the tags map of an audit event."""
        return {
            EventKeys.REQUEST_ID: self.request_id or MISSING,
            EventKeys.SESSION_ID: self.session_id or MISSING,
            EventKeys.CLIENT_IP: self.true_client_ip or MISSING,
            EventKeys.CLIENT_PORT: self.true_client_port or MISSING,
            EventKeys.AKAMAI_REPUTATION: self.akamai_reputation or MISSING,
            EventKeys.DEVICE_ID: self.device_id or MISSING,
            EventKeys.TRANSACTION_NAME: transaction_name,
            EventKeys.PATH: path,
        }

    def to_audit_details(self, *pairs: tuple[str, str]) -> dict[str, str]:
        """Project into the detail map, merged with the given pairs."""
        details = {
            EventKeys.IP_ADDRESS: self.forwarded or MISSING,
            EventKeys.AUTHORISATION: self.authorization or MISSING,
            EventKeys.TOKEN: self.token or MISSING,
        }
        details.update(pairs)
        return details
