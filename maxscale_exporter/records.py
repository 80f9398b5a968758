"""Typed shapes of the MaxScale REST API resources the exporter reads.

Only the attributes used for metric derivation are declared; anything else in
the JSON payload is ignored. Statistics the API leaves out read as
zero; MaxScale releases differ in which ones they report.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# -- /v1/servers -------------------------------------------------------------

class ServerParameters(BaseModel):
    address: str = ""


class ServerStatistics(BaseModel):
    connections: int = 0


class ServerAttributes(BaseModel):
    parameters: ServerParameters = Field(default_factory=ServerParameters)
    state: str = ""
    statistics: ServerStatistics = Field(default_factory=ServerStatistics)


class ServerRecord(BaseModel):
    id: str
    attributes: ServerAttributes


class Servers(BaseModel):
    data: list[ServerRecord]


# -- /v1/services ------------------------------------------------------------

class ServiceAttributes(BaseModel):
    router: str = ""
    connections: int = 0


class ServiceRecord(BaseModel):
    id: str
    attributes: ServiceAttributes


class Services(BaseModel):
    data: list[ServiceRecord]


# -- /v1/maxscale ------------------------------------------------------------

class MaxscaleParameters(BaseModel):
    threads: int = 0
    passive: bool = False
    writeq_high_water: int | None = None
    writeq_low_water: int | None = None


class MaxscaleAttributes(BaseModel):
    parameters: MaxscaleParameters = Field(default_factory=MaxscaleParameters)
    uptime: int = 0


class MaxscaleData(BaseModel):
    attributes: MaxscaleAttributes


class MaxscaleStatus(BaseModel):
    data: MaxscaleData


# -- /v1/maxscale/threads ----------------------------------------------------

class ThreadLoad(BaseModel):
    last_second: float = 0
    last_minute: float = 0
    last_hour: float = 0


class QueryClassifierCache(BaseModel):
    size: int = 0
    inserts: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0


class ThreadStats(BaseModel):
    reads: int = 0
    writes: int = 0
    errors: int = 0
    hangups: int = 0
    accepts: int = 0
    avg_event_queue_length: float = 0
    max_event_queue_length: int = 0
    max_exec_time: int = 0
    max_queue_time: int = 0
    current_descriptors: int = 0
    total_descriptors: int = 0
    load: ThreadLoad = Field(default_factory=ThreadLoad)
    query_classifier_cache: QueryClassifierCache = Field(default_factory=QueryClassifierCache)


class ThreadAttributes(BaseModel):
    stats: ThreadStats = Field(default_factory=ThreadStats)


class ThreadRecord(BaseModel):
    id: str
    attributes: ThreadAttributes


class ThreadStatus(BaseModel):
    data: list[ThreadRecord]
