"""Manifest field type tags and their script-language equivalents."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

JAVASCRIPT_PRIMITIVES = frozenset(
    {"string", "number", "boolean", "bigint", "symbol", "undefined", "object", "null"}
)

_SCRIPT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "boolean": "boolean",
        "bool": "boolean",
        "string": "string",
        "char": "string",
        "integer": "number",
        "int": "number",
        "number": "number",
        "date": "Date",
    }
)

_NULL_MEMBER = re.compile(r"\s*\|\s*null\s*")
_UNDEFINED_MEMBER = re.compile(r"\s*\|\s*undefined\s*")


def map_field_type(raw_type: str) -> str:
    """Map a manifest type tag such as ``integer | null`` to ``number | null``.

    Tags without a known mapping (usually another model's name) pass through.
    """
    field_type = raw_type.strip()
    has_null = "null" in field_type and field_type != "null"
    has_undefined = "undefined" in field_type and field_type != "undefined"
    if has_null:
        field_type = _NULL_MEMBER.sub("", field_type)
    if has_undefined:
        field_type = _UNDEFINED_MEMBER.sub("", field_type)

    script_type = _SCRIPT_TYPES.get(field_type, field_type)
    if has_null:
        script_type = f"{script_type} | null"
    if has_undefined:
        script_type = f"{script_type} | undefined"
    return script_type
