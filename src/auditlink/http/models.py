"""
Captured HTTP request and response values for outbound call auditing.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """An outbound request as seen when the call started."""

    url: str
    verb: str
    body: Any | None
    generated_at: datetime


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and body of a completed outbound call."""

    status: int
    body: str = ""

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "HttpResponse":
        """Create from an httpx response whose body has been read."""
        return cls(
            status=response.status_code,
            body=response.text,
        )
