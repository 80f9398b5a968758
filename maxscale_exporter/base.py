"""Base parser ABC and shared data types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .api import MaxScaleClient
from .metrics import Catalog, MetricDescriptor


@dataclass(frozen=True)
class Sample:
    descriptor: MetricDescriptor
    value: float
    label_values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.label_values) != len(self.descriptor.labels):
            raise ValueError(
                f"{self.descriptor.fq_name} expects labels {self.descriptor.labels}, "
                f"got {len(self.label_values)} values"
            )

    @property
    def labels(self) -> dict[str, str]:
        return dict(zip(self.descriptor.labels, self.label_values))


@dataclass
class CollectionResult:
    failed: bool = False
    samples: list[Sample] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    up: float = 0.0
    total_scrapes: float = 0.0


class BaseParser(ABC):
    """Abstract base for the per-resource parsers.

    A parser fetches exactly one API resource and turns it into samples. If
    the fetch fails the error propagates before any sample is built.
    """

    resource: str = ""

    def __init__(self, client: MaxScaleClient, catalog: Catalog) -> None:
        self.client = client
        self.catalog = catalog

    def sample(self, key: str, value: float, *label_values: str) -> Sample:
        return Sample(self.catalog.lookup(key), float(value), tuple(label_values))

    @abstractmethod
    def parse(self) -> list[Sample]:
        """Fetch the resource and map it to samples. Raises ExporterError."""
        ...
