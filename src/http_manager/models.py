"""Data models for provider, credential, endpoint and configuration records.

These are the read-only inputs of a single execution. The catalog loader
builds them from definition documents; callers may also construct them
directly.
"""

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class AuthenticationType(str, Enum):
    """How a provider authenticates. Informational; headers do the work."""

    BEARER = "Bearer"
    API_KEY = "ApiKey"
    BASIC = "Basic"
    CUSTOM = "Custom"


class ParameterType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    def matches(self, value: Any) -> bool:
        """Return True if the runtime type of ``value`` fits this parameter type."""
        return _TYPE_PREDICATES[self](value)


_TYPE_PREDICATES = {
    ParameterType.STRING: lambda v: isinstance(v, str),
    # bool is a subclass of int
    ParameterType.INTEGER: lambda v: isinstance(v, int) and not isinstance(v, bool),
    ParameterType.BOOLEAN: lambda v: isinstance(v, bool),
    ParameterType.ARRAY: lambda v: isinstance(v, (list, tuple)),
    ParameterType.OBJECT: lambda v: isinstance(v, Mapping),
}


def describe_type(value: Any) -> str:
    """Name the runtime type of ``value`` using the schema vocabulary."""
    if value is None:
        return "null"
    for param_type in ParameterType:
        if param_type.matches(value):
            return param_type.value
    if isinstance(value, float):
        return "float"
    return type(value).__name__


class ParameterGroup(str, Enum):
    """Parameter groups, declared in validation order."""

    URL_PARAMS = "url_params"
    QUERY_PARAMS = "query_params"
    BODY = "body"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class ParameterSpec(BaseModel):
    """Declared shape of a single endpoint parameter."""

    type: ParameterType = ParameterType.STRING
    required: bool = False
    description: str = ""
    default: Any = None  # query params only
    properties: dict | None = None  # body params only


class EndpointOptions(BaseModel):
    """Parameter schema of an endpoint, split by group."""

    url_params: dict[str, ParameterSpec] | None = None
    query_params: dict[str, ParameterSpec] | None = None
    body: dict[str, ParameterSpec] | None = None

    def group(self, group: ParameterGroup) -> dict[str, ParameterSpec] | None:
        return getattr(self, group.value)

    def is_empty(self) -> bool:
        return all(not self.group(g) for g in ParameterGroup)


class CredentialConfig(BaseModel):
    """Authentication template of a provider."""

    type: AuthenticationType | None = None
    headers: dict[str, str] = {}


class Provider(BaseModel):
    """An external API: where it lives and how to authenticate against it."""

    id: str
    name: str = ""
    base_url: str
    credential_config: CredentialConfig = CredentialConfig()
    team_id: int | None = None


class Credential(BaseModel):
    """A concrete secret value set belonging to one provider."""

    id: str
    name: str = ""
    provider_id: str | None = None
    config: dict[str, Any] = {}
    team_id: int | None = None


class Endpoint(BaseModel):
    """One operation on a provider."""

    id: str
    name: str = ""
    provider: Provider
    method: str  # GET / POST / PUT / PATCH / DELETE, anything else fails at dispatch
    path: str  # /users/{username}
    options: EndpointOptions | None = None
    team_id: int | None = None

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


class ConfigurationValues(BaseModel):
    """Concrete parameter values, split by group."""

    url_params: dict[str, Any] | None = None
    query_params: dict[str, Any] | None = None
    body: dict[str, Any] | None = None

    def group(self, group: ParameterGroup) -> dict[str, Any]:
        return getattr(self, group.value) or {}


class Configuration(BaseModel):
    """A named value set bound to one endpoint and one credential."""

    id: str
    name: str = ""
    endpoint: Endpoint
    credential: Credential
    values: ConfigurationValues = Field(default_factory=ConfigurationValues)
    team_id: int | None = None

    @property
    def provider(self) -> Provider:
        return self.endpoint.provider


class PreparedRequest(BaseModel):
    """A fully built request, ready for dispatch."""

    method: str
    url: str
    headers: dict[str, str]
    query: dict[str, Any] = {}
    body: dict[str, Any] | None = None


class TransportResponse(BaseModel):
    """What came back from the network. Status codes are data, not errors."""

    status_code: int
    headers: dict[str, str] = {}
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json_body(self) -> Any:
        return json.loads(self.body)
