"""
Auditing configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONNECTION_TIMEOUT_MS = 5000
DEFAULT_REQUEST_TIMEOUT_MS = 5000

SUPPORTED_PROTOCOLS = ("http", "https")

FALSE_VALUES = ("false", "0", "no")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_VALUES
    return bool(value)


@dataclass(frozen=True)
class BaseUri:
    """Host, port and protocol of the audit ingestion service."""

    host: str
    port: int
    protocol: str = "http"

    def __post_init__(self) -> None:
        if self.protocol not in SUPPORTED_PROTOCOLS:
            raise ValueError(f"Unsupported protocol: {self.protocol}")

    @property
    def uri(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"


DEFAULT_BASE_URI = BaseUri("datstream.protected.mdtp", 90, "http")


@dataclass(frozen=True)
class Consumer:
    """Ingestion endpoint paths on top of a base URI."""

    base_uri: BaseUri = DEFAULT_BASE_URI
    single_event_uri: str = "write/audit"
    merged_event_uri: str = "write/audit/merged"


@dataclass
class AuditingConfig:
    """
    Complete auditing configuration.

    Loaded from a YAML file, a dictionary or environment variables.
    When no consumer is configured the default datastream endpoint is used.
    """

    enabled: bool = True
    consumer: Consumer | None = None
    app_name: str = "auditlink"

    # Handler timeouts
    connection_timeout_ms: int = DEFAULT_CONNECTION_TIMEOUT_MS
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS

    @property
    def effective_consumer(self) -> Consumer:
        """The configured consumer, or the default one."""
        return self.consumer or Consumer(DEFAULT_BASE_URI)

    @classmethod
    def from_file(cls, path: Path) -> "AuditingConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get("auditing", data) or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditingConfig":
        """Create config from dictionary."""
        config = cls()

        if data.get("enabled") is not None:
            config.enabled = _parse_bool(data["enabled"])

        if "app_name" in data:
            config.app_name = data["app_name"]

        if data.get("consumer"):
            c = data["consumer"]
            b = c.get("base_uri") or {}
            config.consumer = Consumer(
                base_uri=BaseUri(
                    host=b.get("host", DEFAULT_BASE_URI.host),
                    port=int(b.get("port", DEFAULT_BASE_URI.port)),
                    protocol=b.get("protocol", DEFAULT_BASE_URI.protocol),
                ),
                single_event_uri=c.get("single_event_uri", "write/audit"),
                merged_event_uri=c.get("merged_event_uri", "write/audit/merged"),
            )

        if data.get("timeouts"):
            t = data["timeouts"]
            config.connection_timeout_ms = int(
                t.get("connection_ms", DEFAULT_CONNECTION_TIMEOUT_MS)
            )
            config.request_timeout_ms = int(
                t.get("request_ms", DEFAULT_REQUEST_TIMEOUT_MS)
            )

        return config

    @classmethod
    def from_env(cls) -> "AuditingConfig":
        """Create config from environment variables."""
        enabled = _parse_bool(os.getenv("AUDITLINK_ENABLED", "true"))

        consumer = None
        host = os.getenv("AUDITLINK_CONSUMER_HOST")
        if host:
            consumer = Consumer(
                base_uri=BaseUri(
                    host=host,
                    port=int(os.getenv("AUDITLINK_CONSUMER_PORT", "80")),
                    protocol=os.getenv("AUDITLINK_CONSUMER_PROTOCOL", "http"),
                )
            )

        return cls(
            enabled=enabled,
            consumer=consumer,
            app_name=os.getenv("AUDITLINK_APP_NAME", "auditlink"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        consumer = self.effective_consumer
        return {
            "auditing": {
                "enabled": self.enabled,
                "app_name": self.app_name,
                "consumer": {
                    "base_uri": {
                        "host": consumer.base_uri.host,
                        "port": consumer.base_uri.port,
                        "protocol": consumer.base_uri.protocol,
                    },
                    "single_event_uri": consumer.single_event_uri,
                    "merged_event_uri": consumer.merged_event_uri,
                },
                "timeouts": {
                    "connection_ms": self.connection_timeout_ms,
                    "request_ms": self.request_timeout_ms,
                },
            }
        }

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)
