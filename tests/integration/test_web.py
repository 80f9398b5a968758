"""Integration tests for the HTTP endpoints."""

import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from web import create_app, main
from tests.conftest import connection_refused


@pytest.fixture
def web_client(make_collector):
    with TestClient(create_app(make_collector())) as tc:
        yield tc


class TestIndex:
    """Tests for the landing page."""

    def test_links_to_metrics(self, web_client) -> None:
        response = web_client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert '<a href="/metrics">Metrics</a>' in response.text


class TestMetricsEndpoint:
    """Tests for /metrics."""

    def test_server_samples(self, web_client) -> None:
        """A running master shows up with its normalized status."""
        body = web_client.get("/metrics").text
        assert 'maxctrl_server_connections{address="10.0.0.1",server="s1"} 5.0' in body
        assert 'maxctrl_server_up{address="10.0.0.1",server="s1",status=",Master,Running,"} 1.0' in body

    def test_help_and_type_preamble(self, web_client) -> None:
        body = web_client.get("/metrics").text
        assert "# HELP maxctrl_server_up Is the server up" in body
        assert "# TYPE maxctrl_server_up gauge" in body
        assert "# TYPE maxctrl_status_read_events_total counter" in body

    def test_counter_names_carry_total_suffix(self, web_client) -> None:
        """Counter families are exposed under their name plus _total."""
        body = web_client.get("/metrics").text
        for name in (
            "maxctrl_exporter_total_scrapes_total",
            "maxctrl_service_total_sessions_total",
            "maxctrl_status_read_events_total",
            "maxctrl_status_total_descriptors_total",
        ):
            assert f"# TYPE {name} counter" in body
        assert "# TYPE maxctrl_service_total_sessions counter" not in body

    def test_bookkeeping_metrics(self, web_client) -> None:
        body = web_client.get("/metrics").text
        assert "maxctrl_up 1.0" in body
        assert "maxctrl_exporter_total_scrapes_total 1.0" in body

    def test_each_request_is_a_new_scrape(self, web_client) -> None:
        web_client.get("/metrics")
        body = web_client.get("/metrics").text
        assert "maxctrl_exporter_total_scrapes_total 2.0" in body

    def test_content_type(self, web_client) -> None:
        response = web_client.get("/metrics")
        assert response.headers["content-type"].startswith("text/plain")

    def test_degraded_api_still_returns_200(self, web_client, routes) -> None:
        for path in list(routes):
            routes[path] = connection_refused(path)
        response = web_client.get("/metrics")
        assert response.status_code == 200
        assert "maxctrl_up 0.0" in response.text
        assert "maxctrl_exporter_total_scrapes_total 1.0" in response.text
        assert "maxctrl_server_up{" not in response.text

    def test_partial_outage(self, web_client, routes) -> None:
        routes["/v1/maxscale"] = httpx.Response(500)
        body = web_client.get("/metrics").text
        assert "maxctrl_up 0.0" in body
        assert "maxctrl_status_uptime " not in body
        assert 'maxctrl_status_read_events_total{id="0"} 1.0' in body


class TestMain:
    """Tests for the CLI entrypoint."""

    def test_invalid_certificate_exits_non_zero(self, monkeypatch, tmp_path) -> None:
        bundle = tmp_path / "ca.pem"
        bundle.write_text("not a certificate")
        monkeypatch.setenv("MAXSCALE_CA_CERTIFICATE", str(bundle))
        monkeypatch.delenv("MAXCTRL_EXPORTER_CFG_FILE", raising=False)
        monkeypatch.setattr("sys.argv", ["maxscale-exporter"])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1

    def test_missing_config_file_exits_non_zero(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setattr("sys.argv", ["maxscale-exporter", "-c", str(tmp_path / "missing.yaml")])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1

    def test_logs_the_config_file_and_serves(self, monkeypatch, tmp_path, caplog) -> None:
        path = tmp_path / "exporter.yaml"
        path.write_text("exporter_port: 9195\n")
        served = {}
        monkeypatch.delenv("MAXSCALE_CA_CERTIFICATE", raising=False)
        monkeypatch.setattr("web.uvicorn.run", lambda app, **kwargs: served.update(kwargs))
        monkeypatch.setattr("sys.argv", ["maxscale-exporter", "-c", str(path)])
        with caplog.at_level(logging.INFO, logger="maxscale_exporter"):
            main()
        assert f"Loaded configuration from {path}" in caplog.text
        assert served["port"] == 9195
