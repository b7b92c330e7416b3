"""Checks that a credential supplies every placeholder its provider's headers use."""

from collections.abc import Mapping
from typing import Any

from http_manager.errors import MissingCredentialValue
from http_manager.models import Provider
from http_manager.templating import CREDENTIAL_DELIMITERS, extract_tokens


def required_placeholders(provider: Provider) -> list[str]:
    """List the ``{{name}}`` tokens across all header templates, in header order."""
    placeholders: list[str] = []
    for template in provider.credential_config.headers.values():
        for name in extract_tokens(template, CREDENTIAL_DELIMITERS):
            if name not in placeholders:
                placeholders.append(name)
    return placeholders


def validate_credential(provider: Provider, credential_values: Mapping[str, Any]) -> None:
    """Raise MissingCredentialValue for the first placeholder with no value."""
    for placeholder in required_placeholders(provider):
        if credential_values.get(placeholder) is None:
            raise MissingCredentialValue(placeholder)
