"""
Audit handler interface.

A handler delivers one serialised event and reports how it went.
"""

from typing import Protocol, runtime_checkable

from auditlink.models import HandlerResult


@runtime_checkable
class AuditHandler(Protocol):
    """
    Protocol for event delivery.

    Implementations report transport problems as HandlerResult.FAILURE.
    The connector also treats any raised exception as a failure.
    """

    async def send_event(self, event: str) -> HandlerResult:
        """Deliver one serialised event."""
        ...
