"""Tests for audit handlers."""

import logging

import httpx
import pytest

from auditlink.handlers import AuditHandler, DatastreamHandler, LoggingHandler
from auditlink.models import HandlerResult


def make_handler(responder) -> DatastreamHandler:
    return DatastreamHandler(
        "http",
        "audit.local",
        8080,
        "/write/audit",
        transport=httpx.MockTransport(responder),
    )


class TestDatastreamHandler:
    """Tests for DatastreamHandler."""

    def test_endpoint(self):
        """Endpoint is built from protocol, host, port and path."""
        handler = DatastreamHandler("https", "audit.local", 443, "/write/audit/merged")

        assert handler.endpoint == "https://audit.local:443/write/audit/merged"

    def test_is_audit_handler(self):
        """DatastreamHandler satisfies the handler protocol."""
        assert isinstance(make_handler(lambda r: httpx.Response(204)), AuditHandler)

    @pytest.mark.asyncio
    async def test_success_posts_event(self):
        """A 2xx response is a success and the body is sent as JSON."""
        seen = []

        def responder(request):
            seen.append(request)
            return httpx.Response(204)

        handler = make_handler(responder)
        result = await handler.send_event('{"auditType":"Test"}')
        await handler.aclose()

        assert result == HandlerResult.SUCCESS
        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "http://audit.local:8080/write/audit"
        assert seen[0].headers["Content-Type"] == "application/json"
        assert seen[0].content == b'{"auditType":"Test"}'

    @pytest.mark.asyncio
    async def test_bad_request_is_rejected(self):
        """A 400 response means the event was rejected."""
        handler = make_handler(lambda r: httpx.Response(400, text="bad event"))

        assert await handler.send_event("{}") == HandlerResult.REJECTED

    @pytest.mark.asyncio
    async def test_server_error_is_failure(self):
        """Other error statuses are failures."""
        handler = make_handler(lambda r: httpx.Response(503))

        assert await handler.send_event("{}") == HandlerResult.FAILURE

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self):
        """Timeouts are reported as failures, not raised."""

        def responder(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        handler = make_handler(responder)

        assert await handler.send_event("{}") == HandlerResult.FAILURE

    @pytest.mark.asyncio
    async def test_connection_error_is_failure(self):
        """Transport errors are reported as failures."""

        def responder(request):
            raise httpx.ConnectError("refused", request=request)

        handler = make_handler(responder)

        assert await handler.send_event("{}") == HandlerResult.FAILURE


class TestLoggingHandler:
    """Tests for LoggingHandler."""

    @pytest.mark.asyncio
    async def test_logs_event_and_succeeds(self, caplog):
        """The event is written to the log and reported as sent."""
        handler = LoggingHandler()

        with caplog.at_level(logging.WARNING):
            result = await handler.send_event('{"auditType":"Test"}')

        assert result == HandlerResult.SUCCESS
        assert (
            'DS_EventMissed_AuditRequestFailure : audit item : {"auditType":"Test"}'
            in caplog.text
        )
