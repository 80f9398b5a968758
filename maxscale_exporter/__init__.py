from .api import MaxScaleClient, build_ssl_context
from .base import BaseParser, CollectionResult, Sample
from .collector import MaxScaleCollector
from .config import ExporterConfig, load_config
from .errors import (
    CertificateError,
    ConfigError,
    DecodeError,
    ExporterError,
    MetricNotFound,
    RemoteStatusError,
    TransportError,
)
from .metrics import MetricDescriptor, MetricKind, MetricRegistry, default_registry
from .parsers import ClusterStatusParser, ServerParser, ServiceParser, WorkerStatusParser

__all__ = [
    "MaxScaleClient",
    "build_ssl_context",
    "BaseParser",
    "CollectionResult",
    "Sample",
    "MaxScaleCollector",
    "ExporterConfig",
    "load_config",
    "CertificateError",
    "ConfigError",
    "DecodeError",
    "ExporterError",
    "MetricNotFound",
    "RemoteStatusError",
    "TransportError",
    "MetricDescriptor",
    "MetricKind",
    "MetricRegistry",
    "default_registry",
    "ClusterStatusParser",
    "ServerParser",
    "ServiceParser",
    "WorkerStatusParser",
]
