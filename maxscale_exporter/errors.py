"""Exception types raised while talking to the MaxScale REST API."""

from __future__ import annotations


class ExporterError(Exception):
    """Base class for every recoverable exporter failure."""


class TransportError(ExporterError):
    """The API could not be reached (DNS, connect, TLS, timeout)."""


class RemoteStatusError(ExporterError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, path: str, status_code: int, reason: str) -> None:
        super().__init__(
            f"the MaxScale statistic request for {path} failed with a status: {status_code} {reason}"
        )
        self.path = path
        self.status_code = status_code
        self.reason = reason


class DecodeError(ExporterError):
    """The response body was not JSON or did not match the expected record."""


class ConfigError(ExporterError):
    """Configuration could not be resolved; fatal at start-up."""


class CertificateError(ConfigError):
    """The CA bundle is unreadable or contains no usable certificate."""


class MetricNotFound(KeyError):
    """A parser asked the registry for a metric key that was never declared."""
