"""Collection cycle: run every parser, fold failures into one health gauge."""

from __future__ import annotations

import logging
import threading
from typing import Iterator

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from .api import MaxScaleClient
from .base import BaseParser, CollectionResult, Sample
from .errors import ExporterError
from .metrics import NAMESPACE, MetricDescriptor, MetricKind, MetricRegistry, default_registry
from .parsers import ClusterStatusParser, ServerParser, ServiceParser, WorkerStatusParser

logger = logging.getLogger(__name__)

UP_NAME = f"{NAMESPACE}_up"
UP_HELP = "Was the last scrape of MaxScale successful?"
SCRAPES_NAME = f"{NAMESPACE}_exporter_total_scrapes"
SCRAPES_HELP = "Current total MaxScale scrapes"


def _family(descriptor: MetricDescriptor) -> Metric:
    cls = CounterMetricFamily if descriptor.kind is MetricKind.COUNTER else GaugeMetricFamily
    return cls(descriptor.fq_name, descriptor.help, labels=list(descriptor.labels))


class MaxScaleCollector(Collector):
    """Prometheus collector that scrapes MaxScale on every ``collect()``.

    The four parsers run one after another inside the calling thread. A
    parser that raises contributes no samples and flips ``maxctrl_up`` to 0
    for that cycle; the others still report.
    """

    def __init__(
        self,
        client: MaxScaleClient,
        registry: MetricRegistry | None = None,
        max_connections: int | None = None,
        parsers: list[BaseParser] | None = None,
    ) -> None:
        self.client = client
        self.registry = registry or default_registry()
        self.parsers = parsers if parsers is not None else [
            ServerParser(client, self.registry.catalog("server")),
            ServiceParser(client, self.registry.catalog("service"), max_connections=max_connections),
            ClusterStatusParser(client, self.registry.catalog("cluster_status")),
            WorkerStatusParser(client, self.registry.catalog("worker_status")),
        ]
        self._lock = threading.Lock()
        self._total_scrapes = 0
        self._up = 0.0

    @property
    def total_scrapes(self) -> int:
        with self._lock:
            return self._total_scrapes

    @property
    def up(self) -> float:
        with self._lock:
            return self._up

    def collect_cycle(self) -> CollectionResult:
        with self._lock:
            self._total_scrapes += 1

        result = CollectionResult()
        for parser in self.parsers:
            try:
                samples = parser.parse()
            except ExporterError as e:
                result.failed = True
                result.failures[parser.resource] = str(e)
                logger.warning("Scraping %s failed: %s", parser.resource, e)
                continue
            result.samples.extend(samples)

        with self._lock:
            self._up = 0.0 if result.failed else 1.0
            result.up = self._up
            result.total_scrapes = self._total_scrapes
        logger.debug(
            "Scrape finished: %d samples, up=%d, failures=%s",
            len(result.samples), result.up, list(result.failures),
        )
        return result

    def describe(self) -> Iterator[Metric]:
        for descriptor in self.registry.describe():
            yield _family(descriptor)
        yield GaugeMetricFamily(UP_NAME, UP_HELP)
        yield CounterMetricFamily(SCRAPES_NAME, SCRAPES_HELP)

    def collect(self) -> Iterator[Metric]:
        result = self.collect_cycle()
        yield from families(result.samples)
        yield GaugeMetricFamily(UP_NAME, UP_HELP, value=result.up)
        yield CounterMetricFamily(SCRAPES_NAME, SCRAPES_HELP, value=result.total_scrapes)


def families(samples: list[Sample]) -> list[Metric]:
    """Group samples into one metric family per descriptor, first-seen order."""
    grouped: dict[str, Metric] = {}
    for sample in samples:
        name = sample.descriptor.fq_name
        if name not in grouped:
            grouped[name] = _family(sample.descriptor)
        grouped[name].add_metric(list(sample.label_values), sample.value)
    return list(grouped.values())
