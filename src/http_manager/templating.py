"""Placeholder substitution for path and credential header templates.

Two token syntaxes exist and never overlap: ``{name}`` in endpoint paths and
``{{name}}`` in credential header templates.
"""

import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

PATH_DELIMITERS = ("{", "}")
CREDENTIAL_DELIMITERS = ("{{", "}}")


@lru_cache(maxsize=None)
def _token_pattern(delimiters: tuple[str, str]) -> re.Pattern:
    opening, closing = delimiters
    # Refuse to match when the token is part of a longer delimiter run,
    # so "{name}" never fires inside "{{name}}".
    return re.compile(
        rf"(?<!{re.escape(opening[0])}){re.escape(opening)}(\w+){re.escape(closing)}(?!{re.escape(closing[-1])})"
    )


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def extract_tokens(template: str, delimiters: tuple[str, str]) -> list[str]:
    """Return token names in order of first appearance, without duplicates."""
    names = []
    for match in _token_pattern(delimiters).finditer(template):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


def substitute(template: str, values: Mapping[str, Any], delimiters: tuple[str, str]) -> str:
    """Replace each token that has a key in ``values``.

    Tokens without a matching key are left untouched; checking for missing
    values is the validators' job.
    """

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in values and values[name] is not None:
            return _render(values[name])
        return match.group(0)

    return _token_pattern(delimiters).sub(_replace, template)
