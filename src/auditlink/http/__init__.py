"""
Outbound HTTP call auditing.

Provides:
- HttpAuditing: Builds and submits merged events for outbound calls
- AuditingTransport: httpx transport that audits every request
- HttpRequest / HttpResponse: Captured call values
"""

from auditlink.http.auditing import HeaderFieldsExtractor, HttpAuditing
from auditlink.http.models import HttpRequest, HttpResponse
from auditlink.http.transport import AuditingTransport

__all__ = [
    "HttpAuditing",
    "HeaderFieldsExtractor",
    "AuditingTransport",
    "HttpRequest",
    "HttpResponse",
]
