"""HTTP transport backed by requests.

The transport is the only component that touches the network. It does not
retry, and it treats every status code as a normal response.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import requests

from http_manager.errors import TransportError
from http_manager.models import TransportResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class Transport(Protocol):
    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        query: Mapping[str, Any] | None,
        body: Any,
    ) -> TransportResponse: ...


class RequestsTransport:
    """Sends requests through a requests.Session."""

    def __init__(self, timeout: float | None = DEFAULT_TIMEOUT, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        query: Mapping[str, Any] | None,
        body: Any,
    ) -> TransportResponse:
        """Send one request and return its response. Raises TransportError if none arrives."""
        logger.debug("Sending %s %s", method, url)
        kwargs: dict[str, Any] = {"headers": dict(headers), "timeout": self.timeout}
        if query:
            kwargs["params"] = query
        if body is not None:
            kwargs["json"] = body

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(method, url, str(e)) from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
        )
