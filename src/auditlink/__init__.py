"""
auditlink - Audit event client for the datastream ingestion service.

Sends simple, extended and merged audit events with a logging fallback
when delivery fails, and audits outbound HTTP calls made with httpx.

Example:
    from auditlink import AuditConnector, AuditingConfig, DataEvent

    connector = AuditConnector.from_config(AuditingConfig())
    result = await connector.send_event(
        DataEvent(audit_source="my-app", audit_type="UserLogin")
    )
"""

__version__ = "1.2026.10.0"
__version_tuple__ = (1, 2026, 10, 0)

from auditlink.config import AuditingConfig, BaseUri, Consumer
from auditlink.connector import AuditConnector, get_audit_connector
from auditlink.context import CallContext
from auditlink.handlers import AuditHandler, DatastreamHandler, LoggingHandler
from auditlink.http import AuditingTransport, HttpAuditing, HttpResponse
from auditlink.models import (
    AuditResult,
    DataCall,
    DataEvent,
    Disabled,
    ExtendedDataEvent,
    Failure,
    HandlerResult,
    MergedDataEvent,
    Success,
)
from auditlink.serialiser import AuditSerialiser

__all__ = [
    "__version__",
    "__version_tuple__",
    # Config
    "AuditingConfig",
    "BaseUri",
    "Consumer",
    # Connector
    "AuditConnector",
    "get_audit_connector",
    "CallContext",
    # Handlers
    "AuditHandler",
    "DatastreamHandler",
    "LoggingHandler",
    # HTTP auditing
    "HttpAuditing",
    "AuditingTransport",
    "HttpResponse",
    # Models
    "AuditResult",
    "Success",
    "Disabled",
    "Failure",
    "HandlerResult",
    "DataEvent",
    "ExtendedDataEvent",
    "MergedDataEvent",
    "DataCall",
    "AuditSerialiser",
]
