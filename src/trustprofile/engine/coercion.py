"""
Trust Profile Value Coercion

Data block values are written in YAML, where authors often end up with
strings: quoted numbers, stringified JSON, template directives. Coercion
restores the intended type:

    1. strip; a value wrapped in ``{{ }}`` is rendered against the data context
    2. "true"/"false" (any case) -> bool
    3. finite decimal literal -> int when integral, else float
    4. JSON object/array -> parsed, string members coerced recursively

Anything that does not parse stays the string it was.
"""
from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any

from .templates import TemplateRenderer


_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_bool(text: str) -> Any:
    """Case-insensitive true/false, or None."""
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_number(text: str) -> Any:
    """A finite decimal literal as int or float, or None.

    Integral values are ints whatever their spelling (``"1e3"``, ``"42.0"``).
    """
    text = text.strip()
    if not _DECIMAL_RE.match(text):
        return None
    if re.fullmatch(r"[+-]?\d+", text):
        return int(text)
    number = float(text)
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def coerce_value(
    raw: Any,
    data_context: Mapping[str, Any],
    renderer: TemplateRenderer,
) -> Any:
    """
    Coerce one data block value.

    Args:
        raw: Value as written in the profile
        data_context: Context for template directives
        renderer: The run's template renderer

    Returns:
        The coerced value; non-strings pass through unchanged
    """
    if not isinstance(raw, str):
        return raw

    value = raw.strip()
    if renderer.is_directive(value):
        value = renderer.render(value, data_context)

    flag = parse_bool(value)
    if flag is not None:
        return flag

    number = parse_number(value)
    if number is not None:
        return number

    try:
        parsed = json.loads(value)
    except ValueError:
        return value

    if isinstance(parsed, dict):
        return {
            key: coerce_value(member, data_context, renderer) if isinstance(member, str) else member
            for key, member in parsed.items()
        }
    if isinstance(parsed, list):
        return [
            coerce_value(element, data_context, renderer) if isinstance(element, str) else element
            for element in parsed
        ]
    return value
