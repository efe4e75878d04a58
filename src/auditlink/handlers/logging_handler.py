"""
Fallback handler that writes events to the application log.
"""

import logging

from auditlink.models import HandlerResult

logger = logging.getLogger(__name__)

MISSED_EVENT_PREFIX = "DS_EventMissed_AuditRequestFailure"


class LoggingHandler:
    """Logs the event so it can be recovered from the log stream."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    async def send_event(self, event: str) -> HandlerResult:
        self._log.warning(f"{MISSED_EVENT_PREFIX} : audit item : {event}")
        return HandlerResult.SUCCESS
