"""Generated type-definitions file for script authors."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from flow_script_builder.manifest_normalization.field_types import map_field_type
from flow_script_builder.manifest_normalization.manifest_models import SimplifiedIntegration
from flow_script_builder.manifest_normalization.manifest_normalizer import EXTENDS_DIRECTIVE

TYPES_FILENAME = "models.ts"
FLOWS_CONSTANT = "NangoFlows"


def interface_name(model_name: str) -> str:
    """``issues`` -> ``Issue``; a trailing ``s`` is dropped before capitalising."""
    singular = model_name[:-1] if model_name.endswith("s") else model_name
    return f"{singular[:1].upper()}{singular[1:]}"


def render_field_type(raw: Any, *, indent: str = "  ") -> str:
    if isinstance(raw, Mapping):
        nested = "\n".join(
            f"{indent}  {name}: {render_field_type(value, indent=indent + '  ')};"
            for name, value in raw.items()
        )
        return f"{{\n{nested}\n{indent}}}"
    return map_field_type("" if raw is None else str(raw))


def build_interface_definitions(models: Mapping[str, Any]) -> list[str]:
    """One ``export interface`` block per model; ``_``-prefixed models are skipped."""
    definitions: list[str] = []
    for model_name, fields in models.items():
        model_name = str(model_name)
        if model_name.startswith("_"):
            continue
        if not isinstance(fields, Mapping):
            fields = {}

        header = f"export interface {interface_name(model_name)}"
        extended = [
            interface_name(name.strip())
            for name in str(fields.get(EXTENDS_DIRECTIVE, "")).split(",")
            if name.strip()
        ]
        if extended:
            header = f"{header} extends {', '.join(extended)}"

        body = "\n".join(
            f"  {field_name}: {render_field_type(field_type)};"
            for field_name, field_type in fields.items()
            if field_name != EXTENDS_DIRECTIVE
        )
        definitions.append(f"{header} {{\n{body}\n}}\n")
    return definitions


def render_type_definitions(
    models: Mapping[str, Any],
    integrations: Iterable[SimplifiedIntegration],
    *,
    host_types: str | None = None,
) -> str:
    """Interfaces, then the host declarations, then the normalized flow config."""
    sections = ["\n".join(build_interface_definitions(models))]
    if host_types:
        sections.append(host_types if host_types.endswith("\n") else f"{host_types}\n")
    flows = json.dumps([integration.to_dict() for integration in integrations], indent=2)
    sections.append(f"export const {FLOWS_CONSTANT} = {flows} as const;\n")
    return "\n".join(sections)


def write_type_definitions(
    project_root: Path,
    models: Mapping[str, Any],
    integrations: Iterable[SimplifiedIntegration],
    *,
    host_types_path: Path | None = None,
) -> Path:
    host_types = host_types_path.read_text(encoding="utf-8") if host_types_path else None
    target = project_root / TYPES_FILENAME
    target.write_text(
        render_type_definitions(models, integrations, host_types=host_types),
        encoding="utf-8",
    )
    return target
