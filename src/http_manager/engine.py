"""Execution engine — validates, builds and dispatches one configuration.

An execution walks a fixed sequence of states and either reaches DONE or
raises at the first failing step. Nothing is retried and nothing is kept
between calls.
"""

import logging
from enum import Enum
from typing import Protocol

from http_manager.builder import build_request
from http_manager.dispatcher import Dispatcher
from http_manager.errors import ValidationFailure
from http_manager.models import Configuration, PreparedRequest, TransportResponse
from http_manager.transport import RequestsTransport, Transport
from http_manager.validators.configuration import validate_configuration
from http_manager.validators.credential import validate_credential

logger = logging.getLogger(__name__)


class ExecutionState(str, Enum):
    LOADED = "loaded"
    CREDENTIAL_VALIDATED = "credential_validated"
    CONFIGURATION_VALIDATED = "configuration_validated"
    BUILT = "built"
    DISPATCHED = "dispatched"
    DONE = "done"


class ConfigurationRepository(Protocol):
    def get(self, identifier: str, team_id: int | None = None) -> Configuration: ...


class HttpManager:
    """Runs stored configurations against their providers."""

    def __init__(self, repository: ConfigurationRepository | None = None, transport: Transport | None = None):
        self.repository = repository
        self._transport = transport
        self._dispatcher: Dispatcher | None = None

    @property
    def dispatcher(self) -> Dispatcher:
        # Created on first dispatch; validate/prepare never open a session.
        if self._dispatcher is None:
            self._dispatcher = Dispatcher(self._transport or RequestsTransport())
        return self._dispatcher

    def execute(self, identifier: str, team_id: int | None = None) -> TransportResponse:
        """Resolve ``identifier`` through the repository and execute it.

        NotFound from the repository propagates unchanged.
        """
        if self.repository is None:
            raise RuntimeError("HttpManager was created without a repository")
        configuration = self.repository.get(identifier, team_id=team_id)
        return self.execute_with_configuration(configuration)

    def execute_with_configuration(self, configuration: Configuration) -> TransportResponse:
        request = self.prepare(configuration)

        response = self.dispatcher.dispatch(
            request.method, request.url, request.headers, request.query, request.body
        )
        self._advance(configuration, ExecutionState.DISPATCHED)
        self._advance(configuration, ExecutionState.DONE)
        return response

    def prepare(self, configuration: Configuration) -> PreparedRequest:
        """Validate and build the request without sending it."""
        self.validate(configuration)
        request = build_request(
            configuration.provider,
            configuration.endpoint,
            configuration.credential.config,
            configuration.values,
        )
        self._advance(configuration, ExecutionState.BUILT)
        return request

    def validate(self, configuration: Configuration) -> None:
        """Run the credential and configuration checks, in that order."""
        self._advance(configuration, ExecutionState.LOADED)
        try:
            validate_credential(configuration.provider, configuration.credential.config)
            self._advance(configuration, ExecutionState.CREDENTIAL_VALIDATED)
            validate_configuration(configuration.endpoint, configuration.values)
            self._advance(configuration, ExecutionState.CONFIGURATION_VALIDATED)
        except ValidationFailure as e:
            logger.info("Configuration %s rejected: %s", configuration.id, e)
            raise

    def _advance(self, configuration: Configuration, state: ExecutionState) -> None:
        logger.debug("Configuration %s: %s", configuration.id, state.value)
