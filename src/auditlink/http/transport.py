"""
httpx integration for outbound call auditing.

Example:
    auditing = HttpAuditing(connector, app_name="my-app")
    client = httpx.AsyncClient(transport=AuditingTransport(auditing))
"""

from typing import Callable

import httpx

from auditlink.context import CallContext
from auditlink.http.auditing import HttpAuditing

ContextFactory = Callable[[httpx.Request], CallContext]


def context_from_request(request: httpx.Request) -> CallContext:
    """Default context: correlation headers already on the outbound request."""
    return CallContext.from_headers(request.headers)


class AuditingTransport(httpx.AsyncBaseTransport):
    """
    Transport that audits every request it sends.

    Response bodies are read before being returned so they can be
    recorded in the audit event.
    """

    def __init__(
        self,
        auditing: HttpAuditing,
        transport: httpx.AsyncBaseTransport | None = None,
        context_factory: ContextFactory = context_from_request,
    ):
        self.auditing = auditing
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._context_factory = context_factory

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        context = self._context_factory(request)
        captured = self.auditing.capture(
            str(request.url), request.method, _request_body(request)
        )

        try:
            response = await self._transport.handle_async_request(request)
            await response.aread()
        except Exception as e:
            self.auditing.audit_request_with_exception(captured, e, context)
            raise

        self.auditing.audit(captured, response, context)
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()


def _request_body(request: httpx.Request) -> str | None:
    try:
        content = request.content
    except httpx.RequestNotRead:
        return None
    if not content:
        return None
    return content.decode("utf-8", errors="replace")
