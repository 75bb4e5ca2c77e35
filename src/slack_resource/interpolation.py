"""Environment variable expansion that leaves single-quoted references alone."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

_QUOTED_REFERENCE = re.compile(r"'\$[a-zA-Z0-9]+'")
# `${NAME}`, an unterminated `${`, a one-character special name, or a run of name characters.
_REFERENCE = re.compile(r"\$(?:\{([^}]*)\}|(\{)|([*#$@!?\-0-9])|([A-Za-z0-9_]+))")
_PLACEHOLDER_TEMPLATE = "!?!?{index}!?!?"


def expand_env(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Expand `$VAR` and `${VAR}` references, keeping quoted `'$VAR'` tokens literal.

    Unset variables expand to an empty string. A `$` that is not followed by a
    name is kept as is.
    """

    env = os.environ if environ is None else environ

    placeholders: dict[str, str] = {}
    for match in dict.fromkeys(_QUOTED_REFERENCE.findall(value)):
        placeholder = _unique_placeholder(value, len(placeholders))
        placeholders[placeholder] = match
        value = value.replace(match, placeholder)

    value = _REFERENCE.sub(lambda match: _lookup(match, env), value)

    for placeholder, literal in placeholders.items():
        value = value.replace(placeholder, literal)
    return value


def _lookup(match: re.Match[str], env: Mapping[str, str]) -> str:
    braced, unterminated, special, name = match.groups()
    if unterminated is not None:
        return ""
    key = braced if braced is not None else special or name
    if not key:
        return ""
    return env.get(key, "")


def _unique_placeholder(value: str, index: int) -> str:
    placeholder = _PLACEHOLDER_TEMPLATE.format(index=index)
    while placeholder in value:
        placeholder = f"!?{placeholder}?!"
    return placeholder
