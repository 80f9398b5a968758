"""Shared test fixtures: canned MaxScale payloads and a mocked API."""

from __future__ import annotations

from typing import Callable, Union

import httpx
import pytest

from maxscale_exporter import MaxScaleClient, MaxScaleCollector

BASE_URL = "http://maxscale.test:8989"

Route = Union[dict, httpx.Response, Exception]


def thread_payload(thread_id: str, base: int = 0) -> dict:
    return {
        "id": thread_id,
        "type": "threads",
        "attributes": {
            "stats": {
                "reads": base + 1,
                "writes": base + 2,
                "errors": base + 3,
                "hangups": base + 4,
                "accepts": base + 5,
                "avg_event_queue_length": base + 6,
                "max_event_queue_length": base + 7,
                "max_exec_time": base + 8,
                "max_queue_time": base + 9,
                "current_descriptors": base + 10,
                "total_descriptors": base + 11,
                "load": {"last_second": base + 12, "last_minute": base + 13, "last_hour": base + 14},
                "query_classifier_cache": {
                    "size": base + 15,
                    "inserts": base + 16,
                    "hits": base + 17,
                    "misses": base + 18,
                    "evictions": base + 19,
                },
            }
        },
        "links": {},
    }


@pytest.fixture
def servers_payload() -> dict:
    return {
        "links": {"self": f"{BASE_URL}/v1/servers/"},
        "data": [
            {
                "id": "s1",
                "type": "servers",
                "relationships": {},
                "attributes": {
                    "parameters": {"address": "10.0.0.1", "port": 3306},
                    "state": "Master, Running",
                    "statistics": {"connections": 5, "total_connections": 99},
                },
                "links": {},
            }
        ],
    }


@pytest.fixture
def services_payload() -> dict:
    return {
        "links": {},
        "data": [
            {
                "id": "Read-Write-Service",
                "type": "services",
                "attributes": {"router": "readwritesplit", "connections": 3, "listeners": []},
                "relationships": {},
                "links": {},
            }
        ],
    }


@pytest.fixture
def maxscale_payload() -> dict:
    return {
        "links": {},
        "data": {
            "id": "maxscale",
            "type": "maxscale",
            "attributes": {
                "parameters": {"threads": 4, "passive": True},
                "uptime": 3600,
                "version": "23.08.1",
            },
        },
    }


@pytest.fixture
def threads_payload() -> dict:
    return {"links": {}, "data": [thread_payload("0"), thread_payload("1", base=100)]}


@pytest.fixture
def routes(servers_payload, services_payload, maxscale_payload, threads_payload) -> dict[str, Route]:
    """Path -> JSON body, prepared response, or exception to raise. Tests mutate it."""
    return {
        "/v1/servers": servers_payload,
        "/v1/services": services_payload,
        "/v1/maxscale": maxscale_payload,
        "/v1/maxscale/threads": threads_payload,
    }


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def transport(routes, requests_seen) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"errors": [{"detail": "not found"}]})
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    return httpx.MockTransport(handler)


@pytest.fixture
def client(transport):
    c = MaxScaleClient(BASE_URL, "admin", "mariadb", transport=transport)
    yield c
    c.close()


@pytest.fixture
def make_collector(client) -> Callable[..., MaxScaleCollector]:
    def factory(**kwargs) -> MaxScaleCollector:
        return MaxScaleCollector(client, **kwargs)

    return factory


def connection_refused(path: str) -> httpx.ConnectError:
    return httpx.ConnectError("[Errno 111] Connection refused", request=httpx.Request("GET", BASE_URL + path))
