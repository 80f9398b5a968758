"""Parsers for the four MaxScale API resources the exporter scrapes."""

from __future__ import annotations

from .api import MaxScaleClient
from .base import BaseParser, Sample
from .metrics import Catalog
from .records import MaxscaleStatus, Servers, Services, ThreadStatus


def normalize_status(state: str) -> str:
    """Turn ``"Master, Running"`` into ``",Master,Running,"``.

    Surrounding the list with the separator lets label matchers test for a
    token without caring about its position.
    """
    return "," + state.replace(", ", ",").strip(",") + ","


def server_up(status: str) -> int:
    """1 if a normalized status says Running and not Down, else 0."""
    if ",Down," in status:
        return 0
    if ",Running," in status:
        return 1
    return 0


class ServerParser(BaseParser):
    resource = "/servers"

    def parse(self) -> list[Sample]:
        servers = self.client.fetch(self.resource, Servers)

        samples: list[Sample] = []
        for server in servers.data:
            address = server.attributes.parameters.address
            samples.append(self.sample(
                "server_connections", server.attributes.statistics.connections, server.id, address,
            ))
            status = normalize_status(server.attributes.state)
            samples.append(self.sample("server_up", server_up(status), server.id, address, status))
        return samples


class ServiceParser(BaseParser):
    resource = "/services"

    def __init__(self, client: MaxScaleClient, catalog: Catalog, max_connections: int | None = None) -> None:
        super().__init__(client, catalog)
        self.max_connections = max_connections

    def parse(self) -> list[Sample]:
        services = self.client.fetch(self.resource, Services)

        samples: list[Sample] = []
        for service in services.data:
            labels = (service.id, service.attributes.router)
            # The API has no cumulative session count, so the counter mirrors
            # the live connection count.
            samples.append(self.sample("service_current_sessions", service.attributes.connections, *labels))
            samples.append(self.sample("service_sessions_total", service.attributes.connections, *labels))
            if self.max_connections is not None:
                samples.append(self.sample("service_max_connections", self.max_connections, *labels))
        return samples


class ClusterStatusParser(BaseParser):
    resource = "/maxscale"

    def parse(self) -> list[Sample]:
        status = self.client.fetch(self.resource, MaxscaleStatus)
        attrs = status.data.attributes
        params = attrs.parameters

        samples = [
            self.sample("status_uptime", attrs.uptime),
            self.sample("status_threads", params.threads),
            self.sample("status_passive", 1 if params.passive else 0),
        ]
        if params.writeq_high_water is not None:
            samples.append(self.sample("status_writeq_high_water", params.writeq_high_water))
        if params.writeq_low_water is not None:
            samples.append(self.sample("status_writeq_low_water", params.writeq_low_water))
        return samples


class WorkerStatusParser(BaseParser):
    resource = "/maxscale/threads"

    def parse(self) -> list[Sample]:
        threads = self.client.fetch(self.resource, ThreadStatus)

        samples: list[Sample] = []
        for thread in threads.data:
            stats = thread.attributes.stats
            qc = stats.query_classifier_cache
            values = [
                ("status_read_events", stats.reads),
                ("status_write_events", stats.writes),
                ("status_error_events", stats.errors),
                ("status_hangup_events", stats.hangups),
                ("status_accept_events", stats.accepts),
                ("status_avg_event_queue_length", stats.avg_event_queue_length),
                ("status_max_event_queue_length", stats.max_event_queue_length),
                ("status_max_event_exec_time", stats.max_exec_time),
                ("status_max_event_queue_time", stats.max_queue_time),
                ("status_current_descriptors", stats.current_descriptors),
                ("status_total_descriptors", stats.total_descriptors),
                ("status_load_last_second", stats.load.last_second),
                ("status_load_last_minute", stats.load.last_minute),
                ("status_load_last_hour", stats.load.last_hour),
                ("status_query_classifier_cache_size", qc.size),
                ("status_query_classifier_cache_inserts", qc.inserts),
                ("status_query_classifier_cache_hits", qc.hits),
                ("status_query_classifier_cache_misses", qc.misses),
                ("status_query_classifier_cache_evictions", qc.evictions),
            ]
            samples.extend(self.sample(key, value, thread.id) for key, value in values)
        return samples
