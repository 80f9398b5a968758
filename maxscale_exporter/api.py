"""Client for the MaxScale administrative REST API."""

from __future__ import annotations

import logging
import ssl
from typing import Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import CertificateError, DecodeError, RemoteStatusError, TransportError

logger = logging.getLogger(__name__)

API_PREFIX = "/v1"
DEFAULT_TIMEOUT = 10.0

RecordT = TypeVar("RecordT", bound=BaseModel)


def build_ssl_context(ca_certificate: str | None = None) -> ssl.SSLContext:
    """System trust store, extended with the PEM bundle at *ca_certificate*.

    Raises CertificateError when the bundle cannot be read or holds no
    certificate; the caller treats that as fatal.
    """
    context = ssl.create_default_context()
    if not ca_certificate:
        return context
    # OpenSSL reads the file as bytes and skips text between PEM blocks.
    try:
        context.load_verify_locations(cafile=ca_certificate)
    except ssl.SSLError as e:
        raise CertificateError(
            f"Could not append certificate to the root store from file {ca_certificate}: {e}"
        ) from e
    except OSError as e:
        raise CertificateError(f"Failed to open CA certificate file {ca_certificate!r}: {e}") from e
    logger.info("Loaded CA certificate bundle from %s", ca_certificate)
    return context


class MaxScaleClient:
    """Issues authenticated GETs against ``<url>/v1/<path>`` and decodes the body.

    One pooled ``httpx.Client`` is shared by every collection cycle.
    """

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        ca_certificate: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.username = username
        self._http = httpx.Client(
            auth=httpx.BasicAuth(username, password),
            verify=build_ssl_context(ca_certificate),
            timeout=timeout,
            transport=transport,
        )

    def fetch(self, path: str, target_type: Type[RecordT]) -> RecordT:
        url = f"{self.url}{API_PREFIX}{path}"
        try:
            resp = self._http.get(url)
        except httpx.HTTPError as e:
            raise TransportError(f"error while getting {path}: {e}") from e

        if not resp.is_success:
            raise RemoteStatusError(path, resp.status_code, resp.reason_phrase)

        try:
            return target_type.model_validate_json(resp.content)
        except ValidationError as e:
            raise DecodeError(f"unexpected payload from {path}: {e}") from e

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "MaxScaleClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
