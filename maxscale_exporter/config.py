"""Resolve exporter settings from the environment and an optional YAML file.

Environment variables are read first, empty values falling back to the
defaults. A config file, when given, overrides every key it contains and
leaves the rest alone.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "MAXCTRL_EXPORTER_CFG_FILE"

# setting -> (environment variable, config-file key, default)
SETTINGS: dict[str, tuple[str, str, str]] = {
    "url": ("MAXSCALE_URL", "url", "http://127.0.0.1:8989"),
    "username": ("MAXSCALE_USERNAME", "username", "admin"),
    "password": ("MAXSCALE_PASSWORD", "password", "mariadb"),
    "exporter_port": ("MAXSCALE_EXPORTER_PORT", "exporter_port", "8080"),
    "ca_certificate": ("MAXSCALE_CA_CERTIFICATE", "caCertificate", ""),
    "max_connections": ("MAXSCALE_MAX_CONNECTIONS", "maxConnections", ""),
}


@dataclass(frozen=True)
class ExporterConfig:
    url: str = "http://127.0.0.1:8989"
    username: str = "admin"
    password: str = "mariadb"
    exporter_port: int = 8080
    ca_certificate: str | None = None
    max_connections: int | None = None
    config_file: str | None = None


def get_env_var(name: str, fallback: str, environ: Mapping[str, str] | None = None) -> str:
    """Value of *name*, or *fallback* when it is unset or empty."""
    env = os.environ if environ is None else environ
    return env.get(name) or fallback


def settings_from_environment(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    return {
        setting: get_env_var(env_name, default, environ)
        for setting, (env_name, _, default) in SETTINGS.items()
    }


def parse_config_file(contents: str, settings: Mapping[str, str]) -> dict[str, str]:
    """Overlay the keys present in a YAML document on top of *settings*."""
    try:
        data = yaml.safe_load(contents) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config file: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping of settings")

    merged = dict(settings)
    for setting, (_, file_key, _) in SETTINGS.items():
        if file_key in data:
            value = data[file_key]
            merged[setting] = "" if value is None else str(value)
    unknown = set(data) - {file_key for _, file_key, _ in SETTINGS.values()}
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(map(str, unknown))))
    return merged


def _to_int(setting: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{setting} must be an integer, got {value!r}") from None


def build_config(settings: Mapping[str, Any], config_file: str | None = None) -> ExporterConfig:
    max_connections = settings["max_connections"]
    return ExporterConfig(
        url=settings["url"],
        username=settings["username"],
        password=settings["password"],
        exporter_port=_to_int("exporter_port", settings["exporter_port"]),
        ca_certificate=settings["ca_certificate"] or None,
        max_connections=_to_int("max_connections", max_connections) if max_connections else None,
        config_file=config_file,
    )


def load_config(
    config_file: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ExporterConfig:
    """Environment first, then *config_file* (or ``$MAXCTRL_EXPORTER_CFG_FILE``)."""
    settings = settings_from_environment(environ)
    config_file = config_file or get_env_var(CONFIG_FILE_ENV, "", environ) or None

    if config_file:
        path = Path(config_file)
        try:
            contents = path.read_text()
        except OSError as e:
            raise ConfigError(f"Config file not found or unreadable: {path}: {e}") from e
        settings = parse_config_file(contents, settings)

    return build_config(settings, config_file)
