"""Builds the outgoing request from validated records."""

from collections.abc import Mapping
from typing import Any

from http_manager.models import ConfigurationValues, Endpoint, PreparedRequest, Provider
from http_manager.templating import CREDENTIAL_DELIMITERS, PATH_DELIMITERS, substitute

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def join_url(base_url: str, path: str) -> str:
    """Join base URL and path with exactly one slash between them."""
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def build_url(base_url: str, path: str, url_params: Mapping[str, Any]) -> str:
    # Unknown {tokens} stay in the URL as-is.
    return substitute(join_url(base_url, path), url_params, PATH_DELIMITERS)


def build_headers(provider: Provider, credential_values: Mapping[str, Any]) -> dict[str, str]:
    """JSON defaults, overridden by the provider's rendered credential headers."""
    headers = dict(DEFAULT_HEADERS)
    for name, template in provider.credential_config.headers.items():
        for existing in [h for h in headers if h.lower() == name.lower()]:
            del headers[existing]
        headers[name] = substitute(template, credential_values, CREDENTIAL_DELIMITERS)
    return headers


def build_request(
    provider: Provider,
    endpoint: Endpoint,
    credential_values: Mapping[str, Any],
    values: ConfigurationValues,
) -> PreparedRequest:
    """Compose URL, headers, query and body. Query and body pass through untouched."""
    return PreparedRequest(
        method=endpoint.method,
        url=build_url(provider.base_url, endpoint.path, values.url_params or {}),
        headers=build_headers(provider, credential_values),
        query=values.query_params or {},
        body=values.body,
    )
