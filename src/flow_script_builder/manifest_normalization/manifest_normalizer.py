"""Manifest to flow descriptor normalization service."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .field_types import JAVASCRIPT_PRIMITIVES, map_field_type
from .manifest_loader import ManifestError
from .manifest_models import (
    FlowDescriptor,
    FlowType,
    Manifest,
    ModelField,
    ModelRef,
    SchemaIssue,
    SimplifiedIntegration,
)

LOGGER = logging.getLogger(__name__)

EXTENDS_DIRECTIVE = "__extends"
PROVIDER_KEY = "provider"


class SchemaCycleError(ManifestError):
    """Raised when ``__extends`` directives reference each other in a loop."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__(f"Model extension cycle detected: {' -> '.join(self.cycle)}")


class DuplicateFlowNameError(ManifestError):
    """Raised when two providers declare a flow with the same name."""

    def __init__(self, flow_name: str) -> None:
        self.flow_name = flow_name
        super().__init__(
            f"The sync name {flow_name} is duplicated in the manifest. "
            "All sync names must be unique."
        )


def normalize_manifest(manifest: Manifest) -> tuple[SimplifiedIntegration, ...]:
    """Flatten the manifest into one integration per provider config key."""
    integrations: list[SimplifiedIntegration] = []
    seen_flow_names: set[str] = set()

    for provider_config_key, section in manifest.integrations.items():
        if section is None:
            section = {}
        if not isinstance(section, Mapping):
            raise ManifestError(f"Integration '{provider_config_key}' must be a mapping of flows.")

        provider = section.get(PROVIDER_KEY)
        syncs: list[FlowDescriptor] = []
        actions: list[FlowDescriptor] = []
        for flow_name, definition in section.items():
            if flow_name == PROVIDER_KEY and isinstance(definition, str):
                continue
            flow_name = str(flow_name)
            if flow_name in seen_flow_names:
                raise DuplicateFlowNameError(flow_name)
            seen_flow_names.add(flow_name)

            descriptor = _build_descriptor(flow_name, definition, manifest.models)
            if descriptor.is_action:
                actions.append(descriptor)
            else:
                syncs.append(descriptor)

        integrations.append(
            SimplifiedIntegration(
                provider_config_key=str(provider_config_key),
                syncs=tuple(syncs),
                actions=tuple(actions),
                provider=provider if isinstance(provider, str) else None,
            )
        )

    return tuple(integrations)


def resolve_model_fields(
    model_name: str, models: Mapping[str, Any]
) -> tuple[ModelField, ...] | None:
    """Resolve the flattened fields of ``model_name``.

    Returns None for builtin primitive names and for models the manifest does
    not define. ``__extends`` entries splice in the referenced models' fields at
    the position the directive appears.
    """
    return _resolve_fields(model_name, models, visiting=())


def validate_descriptors(integrations: Iterable[SimplifiedIntegration]) -> tuple[SchemaIssue, ...]:
    """Report per-flow schema problems without stopping at the first one."""
    issues: list[SchemaIssue] = []
    for integration in integrations:
        for flow in integration.flows:
            issues.extend(_flow_issues(flow))
    for issue in issues:
        LOGGER.error("%s", issue.message)
    return tuple(issues)


def collect_model_names(integrations: Iterable[SimplifiedIntegration]) -> tuple[str, ...]:
    """Names of every resolvable model returned by any flow, first-seen order.

    Models the manifest does not define are left out, so scripts cannot
    reference them.
    """
    names: dict[str, None] = {}
    for integration in integrations:
        for flow in integration.flows:
            for model in flow.models:
                if model.resolved:
                    names.setdefault(model.name, None)
    return tuple(names)


def find_flow(
    integrations: Iterable[SimplifiedIntegration], flow_name: str
) -> tuple[SimplifiedIntegration, FlowDescriptor] | None:
    """Locate a flow and the integration that owns it."""
    for integration in integrations:
        for flow in integration.flows:
            if flow.name == flow_name:
                return integration, flow
    return None


def _build_descriptor(flow_name: str, definition: Any, models: Mapping[str, Any]) -> FlowDescriptor:
    if definition is None:
        definition = {}
    if not isinstance(definition, Mapping):
        LOGGER.warning("Flow '%s' is not a mapping; treating it as an empty definition.", flow_name)
        definition = {}

    returns = _as_string_tuple(definition.get("returns"))
    model_refs = []
    for model_name in returns:
        fields = resolve_model_fields(model_name, models)
        model_refs.append(
            ModelRef(
                name=model_name,
                fields=fields or (),
                resolved=fields is not None or model_name in JAVASCRIPT_PRIMITIVES,
            )
        )

    metadata = definition.get("metadata")
    if not isinstance(metadata, Mapping):
        metadata = {}
    attributes = definition.get("attributes")

    return FlowDescriptor(
        name=flow_name,
        type=str(definition.get("type") or FlowType.SYNC.value),
        cadence=_optional_text(definition.get("runs")),
        track_deletes=bool(definition.get("track_deletes") or False),
        auto_start=definition.get("auto_start") is not False,
        returns=returns,
        models=tuple(model_refs),
        description=str(definition.get("description") or metadata.get("description") or ""),
        scopes=_as_string_tuple(definition.get("scopes") or metadata.get("scopes")),
        attributes=dict(attributes) if isinstance(attributes, Mapping) else {},
    )


def _resolve_fields(
    model_name: str, models: Mapping[str, Any], *, visiting: tuple[str, ...]
) -> tuple[ModelField, ...] | None:
    if model_name in JAVASCRIPT_PRIMITIVES:
        return None

    schema_name = _schema_name(model_name, models)
    if schema_name is None:
        return None
    if schema_name in visiting:
        raise SchemaCycleError(visiting[visiting.index(schema_name) :] + (schema_name,))

    schema = models[schema_name]
    if not isinstance(schema, Mapping):
        return ()

    path = visiting + (schema_name,)
    fields: list[ModelField] = []
    for field_name, field_type in schema.items():
        if field_name == EXTENDS_DIRECTIVE:
            for extended_name in str(field_type).split(","):
                extended_name = extended_name.strip()
                if not extended_name:
                    continue
                fields.extend(_resolve_fields(extended_name, models, visiting=path) or ())
        elif isinstance(field_type, Mapping):
            fields.extend(_flatten_nested(str(field_name), field_type))
        else:
            fields.append(ModelField(name=str(field_name), type=_field_type(field_type)))
    return tuple(fields)


def _flatten_nested(prefix: str, schema: Mapping[str, Any]) -> list[ModelField]:
    fields: list[ModelField] = []
    for field_name, field_type in schema.items():
        path = f"{prefix}.{field_name}"
        if isinstance(field_type, Mapping):
            fields.extend(_flatten_nested(path, field_type))
        else:
            fields.append(ModelField(name=path, type=_field_type(field_type)))
    return fields


def _schema_name(model_name: str, models: Mapping[str, Any]) -> str | None:
    if model_name in models:
        return model_name
    if model_name.endswith("s") and model_name[:-1] in models:
        return model_name[:-1]
    return None


def _field_type(raw: Any) -> str:
    if isinstance(raw, bool):
        return map_field_type(str(raw).lower())
    return map_field_type("" if raw is None else str(raw))


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def _as_string_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        return tuple(str(item).strip() for item in value if str(item).strip())
    return (str(value),)


def _flow_issues(flow: FlowDescriptor) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []
    flow_type = flow.flow_type
    if flow_type is None:
        issues.append(
            SchemaIssue(
                flow_name=flow.name,
                message=(
                    f'The sync {flow.name} has an invalid type "{flow.type}". '
                    f"The type must be either {FlowType.SYNC.value} or {FlowType.ACTION.value}."
                ),
            )
        )
    if flow_type is FlowType.SYNC and not flow.cadence:
        issues.append(
            SchemaIssue(flow.name, f'The sync {flow.name} is missing the "runs" property.')
        )
    if flow_type is FlowType.ACTION and flow.cadence:
        issues.append(
            SchemaIssue(flow.name, f'The action {flow.name} must not declare a "runs" property.')
        )
    if flow_type is FlowType.SYNC and not flow.returns:
        issues.append(
            SchemaIssue(
                flow.name,
                f"The {flow.name} integration is missing a returns property for what models "
                'the sync returns. Make sure you have "returns" instead of "return"',
            )
        )
    for model in flow.models:
        if not model.resolved:
            issues.append(
                SchemaIssue(
                    flow.name,
                    f'The model "{model.name}" returned by {flow.name} is not defined in models.',
                )
            )
    return issues
