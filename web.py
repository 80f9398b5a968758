#!/usr/bin/env python3
"""MaxScale Exporter — Prometheus endpoint for the MaxScale REST API.

Usage:
    python web.py                              # settings from MAXSCALE_* env vars
    python web.py -c exporter.yaml --port 9195 # config file and custom port
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from maxscale_exporter import ConfigError, ExporterConfig, MaxScaleClient, MaxScaleCollector, load_config

logger = logging.getLogger("maxscale_exporter")

METRICS_PATH = "/metrics"

INDEX_HTML = f"""<html>
<head><title>MaxScale Exporter</title></head>
<body>
<h1>MaxScale Exporter</h1>
<p><a href="{METRICS_PATH}">Metrics</a></p>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

def create_app(collector: MaxScaleCollector) -> FastAPI:
    """Build the app around one collector; each scrape runs a fresh cycle."""
    registry = CollectorRegistry()
    registry.register(collector)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        collector.client.close()

    app = FastAPI(title="MaxScale Exporter", lifespan=lifespan)
    app.state.registry = registry
    app.state.collector = collector

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return HTMLResponse(INDEX_HTML)

    # Sync handler: the scrape blocks, so it runs in the threadpool.
    @app.get(METRICS_PATH)
    def metrics():
        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    return app


def build_collector(config: ExporterConfig) -> MaxScaleCollector:
    client = MaxScaleClient(
        config.url,
        config.username,
        config.password,
        ca_certificate=config.ca_certificate,
    )
    return MaxScaleCollector(client, max_connections=config.max_connections)


# ---------------------------------------------------------------------------
# CLI entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="MaxScale Exporter — Prometheus metrics for MaxScale")
    parser.add_argument("-c", "--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: $MAXSCALE_EXPORTER_PORT or 8080)")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        logger.info("Starting MaxScale exporter")
        if config.config_file:
            logger.info("Loaded configuration from %s", config.config_file)
        logger.info("Scraping MaxScale JSON API at: %s", config.url)
        collector = build_collector(config)
    except ConfigError as e:
        logger.error("Failed to start maxscale exporter: %s", e)
        sys.exit(1)

    port = args.port or config.exporter_port
    logger.info("Started MaxScale exporter, listening on %s:%d", args.host, port)
    uvicorn.run(create_app(collector), host=args.host, port=port, log_level=args.log_level)


if __name__ == "__main__":
    main()
