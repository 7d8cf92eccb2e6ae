"""Manifest and flow descriptor entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class FlowType(str, Enum):
    """Kinds of flow a manifest can declare."""

    SYNC = "sync"
    ACTION = "action"


@dataclass(frozen=True)
class Manifest:
    """Raw manifest document as read from YAML."""

    integrations: Mapping[str, Any]
    models: Mapping[str, Any]
    text: str = ""
    source_path: Path | None = None


@dataclass(frozen=True)
class ModelField:
    """One flattened model field with its script-language type."""

    name: str
    type: str


@dataclass(frozen=True)
class ModelRef:
    """Resolved schema for a model returned by a flow."""

    name: str
    fields: tuple[ModelField, ...]
    resolved: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "fields": [{"name": item.name, "type": item.type} for item in self.fields],
        }


@dataclass(frozen=True)
class FlowDescriptor:  # pylint: disable=too-many-instance-attributes
    """Normalized view of one sync or action."""

    name: str
    type: str
    cadence: str | None
    track_deletes: bool
    auto_start: bool
    returns: tuple[str, ...]
    models: tuple[ModelRef, ...]
    description: str
    scopes: tuple[str, ...]
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def flow_type(self) -> FlowType | None:
        """Known flow type, or None when the manifest declared something else."""
        try:
            return FlowType(self.type)
        except ValueError:
            return None

    @property
    def is_action(self) -> bool:
        return self.type == FlowType.ACTION.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "runs": self.cadence,
            "track_deletes": self.track_deletes,
            "auto_start": self.auto_start,
            "attributes": dict(self.attributes),
            "returns": list(self.returns),
            "models": [model.to_dict() for model in self.models],
            "description": self.description,
            "scopes": list(self.scopes),
        }


@dataclass(frozen=True)
class SimplifiedIntegration:
    """All flows declared for one provider config key."""

    provider_config_key: str
    syncs: tuple[FlowDescriptor, ...]
    actions: tuple[FlowDescriptor, ...]
    provider: str | None = None

    @property
    def flows(self) -> tuple[FlowDescriptor, ...]:
        return self.syncs + self.actions

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "providerConfigKey": self.provider_config_key,
            "syncs": [flow.to_dict() for flow in self.syncs],
            "actions": [flow.to_dict() for flow in self.actions],
        }
        if self.provider:
            payload["provider"] = self.provider
        return payload


@dataclass(frozen=True)
class SchemaIssue:
    """Per-flow schema problem found after normalization."""

    flow_name: str
    message: str
