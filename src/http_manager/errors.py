"""Exception types raised while running a configuration.

Every failure carries the structured fields a caller needs to build its own
diagnostic, in addition to a readable message.
"""


class HttpManagerError(Exception):
    """Base class for all http-manager failures."""


class ValidationFailure(HttpManagerError):
    """Stored configuration is incomplete or malformed. Raised before any network call."""


class MissingCredentialValue(ValidationFailure):
    def __init__(self, placeholder: str):
        self.placeholder = placeholder
        super().__init__(f"Missing required credential value: {placeholder}")


class MissingParameter(ValidationFailure):
    def __init__(self, group: str, name: str):
        self.group = group
        self.name = name
        super().__init__(f"Missing required parameter '{name}' in {group}")


class InvalidType(ValidationFailure):
    def __init__(self, group: str, name: str, expected: str, actual: str):
        self.group = group
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid type for parameter '{name}' in {group}. Expected {expected}, got {actual}"
        )


class UnsupportedMethod(HttpManagerError):
    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Unsupported HTTP method: {method}")


class NotFound(HttpManagerError):
    """An identifier did not resolve to a configuration."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Configuration not found: {identifier}")


class TransportError(HttpManagerError):
    """The request never produced a response (connection refused, timeout, ...)."""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        self.reason = reason
        super().__init__(f"{method} {url} failed: {reason}")


class CatalogError(HttpManagerError):
    """A definitions document could not be loaded."""
