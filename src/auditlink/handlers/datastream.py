"""
Datastream handler - HTTP delivery to the audit ingestion service.
"""

import logging
import time

import httpx

from auditlink.models import HandlerResult

logger = logging.getLogger(__name__)


class DatastreamHandler:
    """
    Posts serialised events to one datastream endpoint.

    Example:
        handler = DatastreamHandler("http", "localhost", 8080, "/write/audit")
        result = await handler.send_event('{"auditType": "Test"}')
        await handler.aclose()
    """

    def __init__(
        self,
        protocol: str,
        host: str,
        port: int,
        path: str,
        connect_timeout_ms: int = 5000,
        request_timeout_ms: int = 5000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = f"{protocol}://{host}:{port}{path}"
        self._timeout = httpx.Timeout(
            request_timeout_ms / 1000,
            connect=connect_timeout_ms / 1000,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=False,
                transport=self._transport,
            )
        return self._client

    async def send_event(self, event: str) -> HandlerResult:
        """POST the event and classify the response."""
        start_time = time.time()

        try:
            response = await self._get_client().post(
                self.endpoint,
                content=event,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException:
            logger.warning(f"Audit request timed out: {self.endpoint}")
            return HandlerResult.FAILURE
        except httpx.RequestError as e:
            logger.warning(f"Audit request error for {self.endpoint}: {e}")
            return HandlerResult.FAILURE

        response_time_ms = int((time.time() - start_time) * 1000)

        if 200 <= response.status_code < 300:
            logger.debug(
                f"Audit event delivered to {self.endpoint} "
                f"(status={response.status_code}, time={response_time_ms}ms)"
            )
            return HandlerResult.SUCCESS

        if response.status_code == 400:
            logger.warning(
                f"Audit event rejected by {self.endpoint}: {response.text[:500]}"
            )
            return HandlerResult.REJECTED

        logger.warning(
            f"Audit event delivery failed to {self.endpoint}: "
            f"HTTP {response.status_code}"
        )
        return HandlerResult.FAILURE

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
