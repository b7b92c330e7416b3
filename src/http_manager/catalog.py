"""File-backed catalog of providers, credentials, endpoints and configurations.

Reads a YAML (or JSON) definitions document and resolves each configuration
into a fully populated Configuration. The catalog is the repository the
engine uses for ``HttpManager.execute``.
"""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from http_manager.errors import CatalogError, NotFound
from http_manager.models import (
    Configuration,
    ConfigurationValues,
    Credential,
    CredentialConfig,
    Endpoint,
    EndpointOptions,
    Provider,
)

logger = logging.getLogger(__name__)

ENV_REFERENCE = re.compile(r"\$\{(\w+)\}")
JSON_SCALARS = (str, int, float, bool)


class Catalog:
    """Resolved configurations, optionally filtered by team."""

    def __init__(self, configurations: list[Configuration], teams_enabled: bool = False):
        self._configurations = {c.id: c for c in configurations}
        self.teams_enabled = teams_enabled

    def get(self, identifier: str, team_id: int | None = None) -> Configuration:
        """Return the configuration for ``identifier`` or raise NotFound."""
        configuration = self._configurations.get(str(identifier))
        if configuration is None or not self._visible(configuration, team_id):
            raise NotFound(str(identifier))
        return configuration

    def configurations(self, team_id: int | None = None) -> list[Configuration]:
        return [c for c in self._configurations.values() if self._visible(c, team_id)]

    def _visible(self, configuration: Configuration, team_id: int | None) -> bool:
        if not self.teams_enabled or team_id is None:
            return True
        related = (configuration.team_id, configuration.endpoint.team_id, configuration.credential.team_id)
        return configuration.team_id == team_id and all(t in (None, team_id) for t in related)


def load_catalog(file_path: Path, teams_enabled: bool = False) -> Catalog:
    """Load a definitions document from disk."""
    text = file_path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogError(f"{file_path}: {e}") from e
    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise CatalogError(f"{file_path}: expected a mapping at the top level")
    catalog = parse_catalog(doc, teams_enabled=teams_enabled)
    logger.debug("Loaded %d configurations from %s", len(catalog.configurations()), file_path)
    return catalog


def parse_catalog(doc: dict, teams_enabled: bool = False) -> Catalog:
    """Build a Catalog from an already-parsed definitions document."""
    providers: dict[str, Provider] = {}
    credentials: dict[str, Credential] = {}
    endpoints: dict[str, Endpoint] = {}

    for raw_provider in doc.get("providers") or []:
        provider = _parse_provider(raw_provider)
        _add_unique(providers, provider.id, provider, "provider")
        for raw in raw_provider.get("credentials") or []:
            credential = _parse_credential(raw, provider)
            _add_unique(credentials, credential.id, credential, "credential")
        for raw in raw_provider.get("endpoints") or []:
            endpoint = _parse_endpoint(raw, provider)
            _add_unique(endpoints, endpoint.id, endpoint, "endpoint")

    configurations: dict[str, Configuration] = {}
    for raw in doc.get("configurations") or []:
        configuration = _parse_configuration(raw, endpoints, credentials)
        _add_unique(configurations, configuration.id, configuration, "configuration")

    return Catalog(list(configurations.values()), teams_enabled=teams_enabled)


def _add_unique(registry: dict, key: str, value, kind: str) -> None:
    if key in registry:
        raise CatalogError(f"Duplicate {kind} id: {key}")
    registry[key] = value


def _parse_provider(raw: dict) -> Provider:
    identifier = _require_id(raw, "provider")
    credential_config = raw.get("credential_config") or {}
    headers = credential_config.get("headers") if isinstance(credential_config, dict) else None
    if not isinstance(headers, dict) or not headers:
        raise CatalogError(f"Provider {identifier}: credential_config.headers must be a non-empty mapping")
    for name, template in headers.items():
        if not isinstance(template, str):
            raise CatalogError(f"Provider {identifier}: header {name} template must be a string")

    try:
        return Provider(
            id=identifier,
            name=raw.get("name", ""),
            base_url=raw.get("base_url"),
            credential_config=CredentialConfig(**credential_config),
            team_id=raw.get("team_id"),
        )
    except ValidationError as e:
        raise CatalogError(f"Provider {identifier}: {e}") from e


def _parse_credential(raw: dict, provider: Provider) -> Credential:
    identifier = _require_id(raw, "credential")
    config = raw.get("config") or {}
    if not isinstance(config, dict):
        raise CatalogError(f"Credential {identifier}: config must be a mapping")
    try:
        return Credential(
            id=identifier,
            name=raw.get("name", ""),
            provider_id=provider.id,
            config={k: _expand_env(v, identifier) for k, v in config.items()},
            team_id=raw.get("team_id", provider.team_id),
        )
    except ValidationError as e:
        raise CatalogError(f"Credential {identifier}: {e}") from e


def _parse_endpoint(raw: dict, provider: Provider) -> Endpoint:
    identifier = _require_id(raw, "endpoint")
    options = raw.get("options")
    try:
        return Endpoint(
            id=identifier,
            name=raw.get("name", ""),
            provider=provider,
            method=raw.get("method", "GET"),
            path=raw.get("path", ""),
            options=EndpointOptions(**options) if options else None,
            team_id=raw.get("team_id", provider.team_id),
        )
    except (ValidationError, TypeError) as e:
        raise CatalogError(f"Endpoint {identifier}: {e}") from e


def _parse_configuration(
    raw: dict,
    endpoints: dict[str, Endpoint],
    credentials: dict[str, Credential],
) -> Configuration:
    identifier = _require_id(raw, "configuration")
    endpoint = endpoints.get(str(raw.get("endpoint")))
    if endpoint is None:
        raise CatalogError(f"Configuration {identifier}: unknown endpoint {raw.get('endpoint')}")
    credential = credentials.get(str(raw.get("credential")))
    if credential is None:
        raise CatalogError(f"Configuration {identifier}: unknown credential {raw.get('credential')}")
    if credential.provider_id != endpoint.provider.id:
        raise CatalogError(
            f"Configuration {identifier}: credential {credential.id} does not belong to provider {endpoint.provider.id}"
        )

    raw_values = raw.get("values") or {}
    _check_json_compatible(raw_values, "values", identifier)
    try:
        values = ConfigurationValues(**raw_values)
    except (ValidationError, TypeError) as e:
        raise CatalogError(f"Configuration {identifier}: {e}") from e

    return Configuration(
        id=identifier,
        name=raw.get("name", ""),
        endpoint=endpoint,
        credential=credential,
        values=values,
        team_id=_resolve_team(raw, identifier, endpoint, credential),
    )


def _resolve_team(raw: dict, identifier: str, endpoint: Endpoint, credential: Credential) -> int | None:
    """A configuration and its relations must all belong to the same team, if any."""
    own = raw.get("team_id")
    teams = {t for t in (own, endpoint.team_id, credential.team_id) if t is not None}
    if len(teams) > 1:
        raise CatalogError(
            f"Configuration {identifier}: team mismatch between configuration ({own}), "
            f"endpoint {endpoint.id} ({endpoint.team_id}) and credential {credential.id} ({credential.team_id})"
        )
    return teams.pop() if teams else None


def _require_id(raw: dict, kind: str) -> str:
    if not isinstance(raw, dict) or raw.get("id") is None:
        raise CatalogError(f"Every {kind} needs an id")
    return str(raw["id"])


def _expand_env(value, credential_id: str):
    if not isinstance(value, str):
        return value

    def _lookup(match: re.Match) -> str:
        name = match.group(1)
        if name not in os.environ:
            raise CatalogError(f"Credential {credential_id}: environment variable {name} is not set")
        return os.environ[name]

    return ENV_REFERENCE.sub(_lookup, value)


def _check_json_compatible(value, path: str, identifier: str) -> None:
    if value is None or isinstance(value, JSON_SCALARS):
        return
    if isinstance(value, list):
        for index, item in enumerate(value):
            _check_json_compatible(item, f"{path}[{index}]", identifier)
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise CatalogError(f"Configuration {identifier}: {path} has non-string key {key!r}")
            _check_json_compatible(item, f"{path}.{key}", identifier)
        return
    raise CatalogError(
        f"Configuration {identifier}: {path} is not JSON-compatible ({type(value).__name__}); quote it in the document"
    )
