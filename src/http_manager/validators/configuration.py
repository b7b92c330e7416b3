"""Checks configuration values against an endpoint's parameter schema.

Groups are scanned in the order url_params, query_params, body and entries in
declaration order; the first violation wins. Values the schema does not
declare are not checked.
"""

from collections.abc import Mapping
from typing import Any

from http_manager.errors import InvalidType, MissingParameter
from http_manager.models import (
    ConfigurationValues,
    Endpoint,
    ParameterGroup,
    ParameterSpec,
    describe_type,
)


def validate_configuration(endpoint: Endpoint, values: ConfigurationValues) -> None:
    """Raise MissingParameter or InvalidType on the first schema violation.

    An endpoint without a schema accepts anything.
    """
    options = endpoint.options
    if options is None or options.is_empty():
        return

    for group in ParameterGroup:
        schema = options.group(group)
        if schema:
            _validate_group(group, schema, values.group(group))


def _validate_group(group: ParameterGroup, schema: dict[str, ParameterSpec], values: Mapping[str, Any]) -> None:
    for name, spec in schema.items():
        value = values.get(name)
        if value is None:
            if spec.required:
                raise MissingParameter(group.value, name)
            continue
        if not spec.type.matches(value):
            raise InvalidType(group.value, name, spec.type.value, describe_type(value))
