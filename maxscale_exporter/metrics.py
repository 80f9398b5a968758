"""Static catalog of every metric the exporter can publish.

Descriptors are grouped by subject (server, service, cluster status,
per-worker status, monitor) so each parser only sees the keys that belong to
its resource. Everything here is built once at import time and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping

from .errors import MetricNotFound

NAMESPACE = "maxctrl"


class MetricKind(str, Enum):
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDescriptor:
    subsystem: str
    name: str
    help: str
    labels: tuple[str, ...]
    kind: MetricKind

    @property
    def fq_name(self) -> str:
        """Fully-qualified Prometheus name, e.g. ``maxctrl_server_up``."""
        return "_".join(part for part in (NAMESPACE, self.subsystem, self.name) if part)


class Catalog:
    """Read-only mapping of catalog key -> descriptor for one subject."""

    def __init__(self, subject: str, descriptors: Mapping[str, MetricDescriptor]) -> None:
        self.subject = subject
        self._descriptors = MappingProxyType(dict(descriptors))

    def lookup(self, key: str) -> MetricDescriptor:
        try:
            return self._descriptors[key]
        except KeyError:
            raise MetricNotFound(f"metric {key!r} is not declared in the {self.subject} catalog") from None

    def __contains__(self, key: object) -> bool:
        return key in self._descriptors

    def __iter__(self) -> Iterator[MetricDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)


def _desc(subsystem: str, name: str, help: str, labels: tuple[str, ...], kind: MetricKind) -> MetricDescriptor:
    return MetricDescriptor(subsystem=subsystem, name=name, help=help, labels=labels, kind=kind)


GAUGE = MetricKind.GAUGE
COUNTER = MetricKind.COUNTER

SERVER_LABELS = ("server", "address")
SERVER_UP_LABELS = ("server", "address", "status")
SERVICE_LABELS = ("name", "router")
MONITOR_LABELS = ("name", "cooperative_monitoring_locks")
CLUSTER_STATUS_LABELS: tuple[str, ...] = ()
WORKER_STATUS_LABELS = ("id",)


SERVER_METRICS = Catalog("server", {
    "server_connections": _desc("server", "connections", "Amount of connections to the server", SERVER_LABELS, GAUGE),
    "server_up": _desc("server", "up", "Is the server up", SERVER_UP_LABELS, GAUGE),
})

SERVICE_METRICS = Catalog("service", {
    "service_current_sessions": _desc("service", "current_sessions", "Amount of sessions currently active", SERVICE_LABELS, GAUGE),
    "service_sessions_total": _desc("service", "total_sessions", "Total amount of sessions", SERVICE_LABELS, COUNTER),
    "service_max_connections": _desc("service", "max_connections", "Max connections allowed", SERVICE_LABELS, GAUGE),
})

CLUSTER_STATUS_METRICS = Catalog("cluster_status", {
    "status_uptime": _desc("status", "uptime", "How long has the server been running", CLUSTER_STATUS_LABELS, GAUGE),
    "status_threads": _desc("status", "threads", "Number of worker threads", CLUSTER_STATUS_LABELS, GAUGE),
    "status_writeq_high_water": _desc("status", "writeq_high_water", "High water mark for network write buffer", CLUSTER_STATUS_LABELS, GAUGE),
    "status_writeq_low_water": _desc("status", "writeq_low_water", "Low water mark for network write buffer", CLUSTER_STATUS_LABELS, GAUGE),
    "status_passive": _desc("status", "passive", "Has passive mode", CLUSTER_STATUS_LABELS, GAUGE),
})

WORKER_STATUS_METRICS = Catalog("worker_status", {
    "status_read_events": _desc("status", "read_events", "How many read events happened", WORKER_STATUS_LABELS, COUNTER),
    "status_write_events": _desc("status", "write_events", "How many write events happened", WORKER_STATUS_LABELS, COUNTER),
    "status_error_events": _desc("status", "error_events", "How many error events happened", WORKER_STATUS_LABELS, COUNTER),
    "status_hangup_events": _desc("status", "hangup_events", "How many hangup events happened", WORKER_STATUS_LABELS, COUNTER),
    "status_accept_events": _desc("status", "accept_events", "How many accept events happened", WORKER_STATUS_LABELS, COUNTER),
    "status_avg_event_queue_length": _desc("status", "avg_event_queue_length", "The average length of the event queue", WORKER_STATUS_LABELS, GAUGE),
    "status_max_event_queue_length": _desc("status", "max_event_queue_length", "The maximum length of the event queue", WORKER_STATUS_LABELS, GAUGE),
    "status_max_event_exec_time": _desc("status", "max_event_exec_time", "The maximum event execution time", WORKER_STATUS_LABELS, GAUGE),
    "status_max_event_queue_time": _desc("status", "max_event_queue_time", "The maximum event queue time", WORKER_STATUS_LABELS, GAUGE),
    "status_current_descriptors": _desc("status", "current_descriptors", "How many current descriptors there are", WORKER_STATUS_LABELS, GAUGE),
    "status_total_descriptors": _desc("status", "total_descriptors", "How many total descriptors there are", WORKER_STATUS_LABELS, COUNTER),
    "status_load_last_second": _desc("status", "load_last_second", "The load during the last measured second", WORKER_STATUS_LABELS, GAUGE),
    "status_load_last_minute": _desc("status", "load_last_minute", "The load during the last measured minute", WORKER_STATUS_LABELS, GAUGE),
    "status_load_last_hour": _desc("status", "load_last_hour", "The load during the last measured hour", WORKER_STATUS_LABELS, GAUGE),
    "status_query_classifier_cache_size": _desc("status", "query_classifier_cache_size", "The query classifier cache size", WORKER_STATUS_LABELS, GAUGE),
    "status_query_classifier_cache_inserts": _desc("status", "query_classifier_cache_inserts", "The number of inserts into the query classifier cache", WORKER_STATUS_LABELS, GAUGE),
    "status_query_classifier_cache_hits": _desc("status", "query_classifier_cache_hits", "The number of hits in the query classifier cache", WORKER_STATUS_LABELS, GAUGE),
    "status_query_classifier_cache_misses": _desc("status", "query_classifier_cache_misses", "The number of misses in the query classifier cache", WORKER_STATUS_LABELS, GAUGE),
    "status_query_classifier_cache_evictions": _desc("status", "query_classifier_cache_evictions", "The number of evictions in the query classifier cache", WORKER_STATUS_LABELS, GAUGE),
})

MONITOR_METRICS = Catalog("monitor", {
    "monitor_primary": _desc("monitor", "primary", "Is a primary node", MONITOR_LABELS, GAUGE),
    "monitor_auto_failover": _desc("monitor", "auto_failover", "Is auto-failover enable", MONITOR_LABELS, COUNTER),
    "monitor_auto_rejoin": _desc("monitor", "auto_rejoin", "Is auto-rejoin enable", MONITOR_LABELS, GAUGE),
})


class MetricRegistry:
    """All catalogs of the exporter, indexed by subject."""

    def __init__(self, catalogs: list[Catalog]) -> None:
        self._catalogs = MappingProxyType({c.subject: c for c in catalogs})

    def catalog(self, subject: str) -> Catalog:
        try:
            return self._catalogs[subject]
        except KeyError:
            raise MetricNotFound(f"no catalog for subject {subject!r}") from None

    def lookup(self, key: str) -> MetricDescriptor:
        for catalog in self._catalogs.values():
            if key in catalog:
                return catalog.lookup(key)
        raise MetricNotFound(f"metric {key!r} is not declared in any catalog")

    def describe(self) -> list[MetricDescriptor]:
        return [desc for catalog in self._catalogs.values() for desc in catalog]


def default_registry() -> MetricRegistry:
    return MetricRegistry([
        SERVER_METRICS,
        SERVICE_METRICS,
        CLUSTER_STATUS_METRICS,
        WORKER_STATUS_METRICS,
        MONITOR_METRICS,
    ])
