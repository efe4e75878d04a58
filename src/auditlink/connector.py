"""
Audit Connector - Event dispatch with logging fallback.

Provides:
- Enabled/disabled switch
- Delivery through the simple or merged datastream handler
- Fallback to the logging handler when delivery fails
- Mapping of handler outcomes to AuditResult
"""

import logging
import threading

from auditlink.config import AuditingConfig
from auditlink.context import CallContext
from auditlink.handlers import AuditHandler, DatastreamHandler, LoggingHandler
from auditlink.models import (
    DISABLED,
    FAILED_MESSAGE,
    AuditResult,
    DataEvent,
    ExtendedDataEvent,
    Failure,
    HandlerResult,
    MergedDataEvent,
    from_handler_result,
)
from auditlink.serialiser import AuditSerialiser

logger = logging.getLogger(__name__)


class AuditConnector:
    """
    Sends audit events to datastream.

    Never raises: every call completes with an AuditResult.

    Example:
        connector = AuditConnector.from_config(AuditingConfig())

        result = await connector.send_event(
            DataEvent(audit_source="my-app", audit_type="UserLogin"),
            CallContext(request_id="req-1"),
        )

        await connector.aclose()
    """

    def __init__(
        self,
        config: AuditingConfig,
        simple_handler: AuditHandler,
        merged_handler: AuditHandler,
        logging_handler: AuditHandler,
        serialiser: AuditSerialiser,
    ):
        self.config = config
        self._simple_handler = simple_handler
        self._merged_handler = merged_handler
        self._logging_handler = logging_handler
        self._serialiser = serialiser

    @classmethod
    def from_config(cls, config: AuditingConfig) -> "AuditConnector":
        """Wire up the default datastream and logging handlers."""
        consumer = config.effective_consumer
        base_uri = consumer.base_uri

        simple_handler = DatastreamHandler(
            base_uri.protocol,
            base_uri.host,
            base_uri.port,
            f"/{consumer.single_event_uri}",
            config.connection_timeout_ms,
            config.request_timeout_ms,
        )
        merged_handler = DatastreamHandler(
            base_uri.protocol,
            base_uri.host,
            base_uri.port,
            f"/{consumer.merged_event_uri}",
            config.connection_timeout_ms,
            config.request_timeout_ms,
        )

        return cls(
            config,
            simple_handler,
            merged_handler,
            LoggingHandler(),
            AuditSerialiser(),
        )

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    async def send_event(
        self,
        event: DataEvent,
        context: CallContext | None = None,
    ) -> AuditResult:
        """Send a simple event to the single-event endpoint."""
        return await self._if_enabled(
            lambda: self._serialiser.serialise_data_event(event),
            self._simple_handler,
            context,
        )

    async def send_extended_event(
        self,
        event: ExtendedDataEvent,
        context: CallContext | None = None,
    ) -> AuditResult:
        """Send an extended event, also to the single-event endpoint."""
        return await self._if_enabled(
            lambda: self._serialiser.serialise_extended_event(event),
            self._simple_handler,
            context,
        )

    async def send_merged_event(
        self,
        event: MergedDataEvent,
        context: CallContext | None = None,
    ) -> AuditResult:
        """Send a merged request/response event to the merged endpoint."""
        return await self._if_enabled(
            lambda: self._serialiser.serialise_merged_event(event),
            self._merged_handler,
            context,
        )

    async def dispatch(
        self,
        event: str,
        handler: AuditHandler,
        context: CallContext | None = None,
    ) -> AuditResult:
        """
        Deliver an already serialised event through the given handler.

        Args:
            event: Serialised event
            handler: Primary handler to try first
            context: Call context used for diagnostics

        Returns:
            Disabled when auditing is off, otherwise the mapped handler result
        """
        return await self._if_enabled(lambda: event, handler, context)

    async def aclose(self) -> None:
        """Release network resources held by the handlers."""
        for handler in (self._simple_handler, self._merged_handler):
            close = getattr(handler, "aclose", None)
            if close is not None:
                await close()

    # =========================================================================
    # DELIVERY
    # =========================================================================

    async def _if_enabled(self, serialise, handler, context) -> AuditResult:
        if not self.config.enabled:
            context = context or CallContext()
            logger.info(
                f"auditing disabled for request-id {context.request_id}, "
                f"session-id: {context.session_id}"
            )
            return DISABLED

        try:
            event = serialise()
        except Exception as e:
            logger.exception("Error serialising audit event")
            return Failure(FAILED_MESSAGE, e)

        return await self._send(event, handler)

    async def _send(self, event: str, handler: AuditHandler) -> AuditResult:
        """Try the primary handler, falling back to the log on failure."""
        cause = None
        try:
            result = await handler.send_event(event)
        except Exception as e:
            logger.exception("Error in handler code")
            result = HandlerResult.FAILURE
            cause = e

        if result is HandlerResult.FAILURE:
            # Fallback outcome does not change the caller's result
            try:
                await self._logging_handler.send_event(event)
            except Exception:
                logger.exception("Error in fallback handler code")

        if cause is not None:
            return Failure(FAILED_MESSAGE, cause)
        return from_handler_result(result)


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_audit_connector: AuditConnector | None = None
_connector_lock = threading.Lock()


def get_audit_connector(config: AuditingConfig | None = None) -> AuditConnector:
    """
    Get or create the global audit connector.

    Args:
        config: Optional configuration (only used on first call)

    Returns:
        AuditConnector instance
    """
    global _audit_connector

    if _audit_connector is None:
        with _connector_lock:
            if _audit_connector is None:
                _audit_connector = AuditConnector.from_config(
                    config or AuditingConfig.from_env()
                )

    return _audit_connector


def reset_audit_connector() -> None:
    """Reset the global audit connector (for testing)."""
    global _audit_connector
    with _connector_lock:
        _audit_connector = None
