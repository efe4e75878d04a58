"""
Outbound HTTP call auditing.

Turns each outbound request/response pair into a MergedDataEvent and
submits it through the AuditConnector in the background. Calls to the
audit service itself and to internal service hosts are not audited.
"""

import asyncio
import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import httpx

from auditlink.connector import AuditConnector
from auditlink.context import CallContext
from auditlink.http.models import HttpRequest, HttpResponse
from auditlink.models import DataCall, EventKeys, EventTypes, MergedDataEvent

logger = logging.getLogger(__name__)

AUDIT_PATH = "/write/audit"
DEFAULT_DISABLED_FOR_PATTERN = re.compile(r"http(s)?://.*\.(service|mdtp)($|[:/])")


class HeaderFieldsExtractor:
    """Picks recognised optional fields out of extra request headers."""

    OPTIONAL_FIELDS = {"surrogate": "surrogate"}

    @classmethod
    def optional_audit_fields(
        cls, headers: Mapping[str, str | list[str]]
    ) -> dict[str, str]:
        fields: dict[str, str] = {}
        for name, value in headers.items():
            key = cls.OPTIONAL_FIELDS.get(name.lower())
            if key is None:
                continue
            fields[key] = ",".join(value) if isinstance(value, list) else value
        return fields


class HttpAuditing:
    """
    Audits outbound HTTP calls.

    Example:
        auditing = HttpAuditing(connector, app_name="my-app")

        task = asyncio.ensure_future(client.get(url))
        auditing.apply(url, "GET", None, task, context)
        response = await task
    """

    def __init__(
        self,
        connector: AuditConnector,
        app_name: str,
        disabled_for_pattern: re.Pattern[str] | str | None = None,
    ):
        self.connector = connector
        self.app_name = app_name
        if disabled_for_pattern is None:
            disabled_for_pattern = DEFAULT_DISABLED_FOR_PATTERN
        elif isinstance(disabled_for_pattern, str):
            disabled_for_pattern = re.compile(disabled_for_pattern)
        self.disabled_for_pattern = disabled_for_pattern
        self._pending: set[asyncio.Future[Any]] = set()

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    # =========================================================================
    # HOOKS
    # =========================================================================

    def apply(
        self,
        url: str,
        verb: str,
        body: Any | None,
        response: "asyncio.Future[Any]",
        context: CallContext | None = None,
    ) -> None:
        """
        Audit a call whose response is still pending.

        The response future is observed, never awaited or modified.
        """
        request = self.capture(url, verb, body)
        context = context or CallContext()
        response.add_done_callback(
            lambda f: self._on_response(request, f, context)
        )

    async def audit_call(
        self,
        url: str,
        verb: str,
        body: Any | None,
        call,
        context: CallContext | None = None,
    ) -> Any:
        """Await the call, audit it, and hand back its own result or error."""
        request = self.capture(url, verb, body)
        context = context or CallContext()
        try:
            response = await call
        except Exception as e:
            self.audit_request_with_exception(request, e, context)
            raise
        self.audit(request, response, context)
        return response

    def audit_from_frontend(
        self,
        url: str,
        response: HttpResponse,
        context: CallContext | None = None,
    ) -> None:
        """Audit a known URL and response without going through the hook."""
        self.audit(self.capture(url, "", None), response, context or CallContext())

    def capture(self, url: str, verb: str, body: Any | None) -> HttpRequest:
        return HttpRequest(url, verb, body, self.now())

    def _on_response(
        self,
        request: HttpRequest,
        future: "asyncio.Future[Any]",
        context: CallContext,
    ) -> None:
        if future.cancelled():
            logger.debug(f"Call to {request.url} cancelled, not audited")
            return
        error = future.exception()
        if error is not None:
            self.audit_request_with_exception(request, error, context)
        else:
            self.audit(request, future.result(), context)

    # =========================================================================
    # EVENT BUILDING
    # =========================================================================

    def is_auditable(self, url: str) -> bool:
        if AUDIT_PATH in url:
            return False
        return self.disabled_for_pattern.search(url) is None

    def audit(
        self,
        request: HttpRequest,
        response: HttpResponse | httpx.Response,
        context: CallContext,
    ) -> None:
        self._submit(
            request.url,
            lambda: self.data_event_for_response(request, response, context),
            context,
        )

    def audit_request_with_exception(
        self,
        request: HttpRequest,
        error: BaseException | str,
        context: CallContext,
    ) -> None:
        self._submit(
            request.url,
            lambda: self.data_event_for_error(
                request,
                error if isinstance(error, str) else describe_error(error),
                context,
            ),
            context,
        )

    def data_event_for_response(
        self,
        request: HttpRequest,
        response: HttpResponse | httpx.Response,
        context: CallContext,
    ) -> MergedDataEvent:
        response = _to_response(response)
        response_details = {
            EventKeys.RESPONSE_MESSAGE: response.body,
            EventKeys.STATUS_CODE: str(response.status),
        }
        return self._build_data_event(request, response_details, context)

    def data_event_for_error(
        self,
        request: HttpRequest,
        error_message: str,
        context: CallContext,
    ) -> MergedDataEvent:
        response_details = {EventKeys.FAILED_REQUEST_MESSAGE: error_message}
        return self._build_data_event(request, response_details, context)

    def _build_data_event(
        self,
        request: HttpRequest,
        response_details: dict[str, str],
        context: CallContext,
    ) -> MergedDataEvent:
        return MergedDataEvent(
            audit_source=self.app_name,
            audit_type=EventTypes.OUTBOUND_CALL,
            request=DataCall(
                tags=context.to_audit_tags(request.url, request.url),
                detail=context.to_audit_details(
                    *self._request_details(request, context)
                ),
                generated_at=request.generated_at,
            ),
            response=DataCall(
                tags={},
                detail=response_details,
                generated_at=self.now(),
            ),
        )

    @staticmethod
    def _request_details(
        request: HttpRequest, context: CallContext
    ) -> list[tuple[str, str]]:
        details = [
            (EventKeys.PATH, request.url),
            (EventKeys.METHOD, request.verb),
        ]
        if request.body is not None:
            details.append((EventKeys.REQUEST_BODY, str(request.body)))
        details.extend(
            HeaderFieldsExtractor.optional_audit_fields(context.extra_headers).items()
        )
        return details

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    def _submit(self, url: str, build, context: CallContext) -> None:
        """Build the event and send it without waiting for the result."""
        try:
            if not self.is_auditable(url):
                return
            loop = asyncio.get_running_loop()
            event = build()
            task = loop.create_task(self.connector.send_merged_event(event, context))
        except Exception:
            logger.exception("Failed to submit outbound call audit event")
            return

        self._pending.add(task)
        task.add_done_callback(self._on_submitted)

    def _on_submitted(self, task: "asyncio.Future[Any]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Outbound call audit failed: {error}")
        else:
            logger.debug(f"Outbound call audit result: {task.result()}")

    async def wait_for_pending(self) -> None:
        """Wait for background submissions started so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def describe_error(error: BaseException) -> str:
    return str(error) or type(error).__name__


def _to_response(response: Any) -> HttpResponse:
    if isinstance(response, httpx.Response):
        return HttpResponse.from_httpx(response)
    return response
