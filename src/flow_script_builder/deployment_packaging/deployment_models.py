"""Deployment packaging entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DeploymentUnit:  # pylint: disable=too-many-instance-attributes
    """One compiled flow ready for upload."""

    sync_name: str
    provider_config_key: str
    models: tuple[str, ...]
    version: str
    cadence: str
    track_deletes: bool
    auto_start: bool
    type: str
    compiled_body: str
    source_body: str | None
    model_schema_json: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Wire shape expected by the deploy endpoint."""
        return {
            "syncName": self.sync_name,
            "providerConfigKey": self.provider_config_key,
            "models": list(self.models),
            "version": self.version,
            "runs": self.cadence,
            "track_deletes": self.track_deletes,
            "auto_start": self.auto_start,
            "attributes": dict(self.attributes),
            "metadata": dict(self.metadata),
            "type": self.type,
            "fileBody": {"js": self.compiled_body, "ts": self.source_body},
            "model_schema": self.model_schema_json,
        }


@dataclass(frozen=True)
class DeploymentRequest:
    """Request handed to the deployment client; nothing here is sent."""

    url: str
    headers: Mapping[str, str]
    body: Mapping[str, Any]
