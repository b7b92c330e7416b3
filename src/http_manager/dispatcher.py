"""Maps an HTTP method onto the matching transport call."""

from collections.abc import Mapping
from typing import Any

from http_manager.errors import UnsupportedMethod
from http_manager.models import HttpMethod, TransportResponse
from http_manager.transport import Transport


def resolve_method(method: str) -> HttpMethod:
    normalized = method.upper()
    try:
        return HttpMethod(normalized)
    except ValueError:
        raise UnsupportedMethod(normalized) from None


class Dispatcher:
    def __init__(self, transport: Transport):
        self.transport = transport

    def dispatch(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        query: Mapping[str, Any] | None,
        body: Any,
    ) -> TransportResponse:
        """Send the request with the payload its method allows.

        GET sends only the query; POST, PUT, PATCH and DELETE send only the
        body. Any other method raises UnsupportedMethod before the transport
        is touched.
        """
        http_method = resolve_method(method)
        if http_method is HttpMethod.GET:
            return self.transport.send(http_method.value, url, headers, query, None)
        return self.transport.send(http_method.value, url, headers, None, body)
