"""
Audit handlers - Delivery backends for serialised events.

Provides:
- AuditHandler: Protocol every handler implements
- DatastreamHandler: HTTP delivery to the ingestion service
- LoggingHandler: Fallback that writes events to the log
"""

from auditlink.handlers.base import AuditHandler
from auditlink.handlers.datastream import DatastreamHandler
from auditlink.handlers.logging_handler import LoggingHandler

__all__ = [
    "AuditHandler",
    "DatastreamHandler",
    "LoggingHandler",
]
