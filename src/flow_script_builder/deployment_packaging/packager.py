"""Deployment packaging service."""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from flow_script_builder.compilation.compile_pipeline import COMPILED_SUFFIX, SCRIPT_SUFFIX
from flow_script_builder.configuration.pipeline_settings import PipelineSettings
from flow_script_builder.interval_resolution.interval_resolver import resolve_interval
from flow_script_builder.manifest_normalization.manifest_models import (
    FlowDescriptor,
    FlowType,
    SimplifiedIntegration,
)

from .deployment_models import DeploymentRequest, DeploymentUnit

LOGGER = logging.getLogger(__name__)

DEPLOY_ENDPOINT = "/sync/deploy"


def package_deployment_units(
    integrations: Iterable[SimplifiedIntegration],
    *,
    output_dir: Path,
    source_dir: Path,
    version: str = "",
    only_sync_name: str | None = None,
    only_action_name: str | None = None,
    now: datetime | None = None,
) -> tuple[DeploymentUnit, ...] | None:
    """Package every eligible flow; None when any sync cadence is unusable.

    Flows without a compiled artifact, without a cadence or returning an
    undefined model are skipped with a logged reason. A cadence that cannot be
    resolved aborts the whole call, since a schedule cannot be partially deployed.
    """
    resolved_now = now or datetime.now(UTC)
    units: list[DeploymentUnit] = []

    for integration in integrations:
        for flow in _select_flows(integration, only_sync_name, only_action_name):
            if flow.flow_type is None:
                LOGGER.error(
                    'The sync %s has an invalid type "%s". The type must be either %s or %s.',
                    flow.name,
                    flow.type,
                    FlowType.SYNC.value,
                    FlowType.ACTION.value,
                )

            if flow.flow_type is FlowType.SYNC:
                if not flow.cadence:
                    LOGGER.error(
                        'The sync %s is missing the "runs" property. Skipping...', flow.name
                    )
                    continue
                resolution = resolve_interval(flow.cadence, resolved_now)
                if resolution.error is not None:
                    LOGGER.error(
                        'The sync %s has an issue with the sync interval "%s": %s',
                        flow.name,
                        flow.cadence,
                        resolution.error.message,
                    )
                    return None

            unresolved = [model.name for model in flow.models if not model.resolved]
            if unresolved:
                LOGGER.error(
                    "The %s flow returns models not defined in the manifest: %s. Skipping...",
                    flow.name,
                    ", ".join(unresolved),
                )
                continue

            compiled_path = output_dir / f"{flow.name}{COMPILED_SUFFIX}"
            if not compiled_path.exists():
                LOGGER.error(
                    "No integration file found for %s at %s. Skipping...", flow.name, compiled_path
                )
                continue
            LOGGER.debug("Integration file found for %s at %s", flow.name, compiled_path)

            source_path = source_dir / f"{flow.name}{SCRIPT_SUFFIX}"
            units.append(
                _build_unit(
                    flow,
                    provider_config_key=integration.provider_config_key,
                    version=version,
                    compiled_body=compiled_path.read_text(encoding="utf-8"),
                    source_body=(
                        source_path.read_text(encoding="utf-8") if source_path.exists() else None
                    ),
                )
            )

    return tuple(units)


def build_deployment_request(
    units: Sequence[DeploymentUnit],
    settings: PipelineSettings,
    *,
    manifest_text: str | None,
    single_deploy_mode: bool = False,
) -> DeploymentRequest:
    """Assemble the deploy call for the external client."""
    return DeploymentRequest(
        url=f"{settings.hostport}{DEPLOY_ENDPOINT}",
        headers=_deployment_headers(settings),
        body={
            "syncs": [unit.to_payload() for unit in units],
            "nangoYamlBody": manifest_text,
            "reconcile": True,
            "debug": settings.debug,
            "singleDeployMode": single_deploy_mode,
        },
    )


def _select_flows(
    integration: SimplifiedIntegration,
    only_sync_name: str | None,
    only_action_name: str | None,
) -> tuple[FlowDescriptor, ...]:
    if not only_sync_name and not only_action_name:
        return integration.flows
    selected_syncs = tuple(flow for flow in integration.syncs if flow.name == only_sync_name)
    selected_actions = tuple(flow for flow in integration.actions if flow.name == only_action_name)
    return selected_syncs + selected_actions


def _build_unit(
    flow: FlowDescriptor,
    *,
    provider_config_key: str,
    version: str,
    compiled_body: str,
    source_body: str | None,
) -> DeploymentUnit:
    metadata: dict[str, Any] = {}
    if flow.description:
        metadata["description"] = flow.description
    metadata["scopes"] = list(flow.scopes)

    return DeploymentUnit(
        sync_name=flow.name,
        provider_config_key=provider_config_key,
        models=flow.returns,
        version=version,
        cadence=flow.cadence or "",
        track_deletes=flow.track_deletes,
        auto_start=flow.auto_start,
        type=flow.type,
        compiled_body=compiled_body,
        source_body=source_body,
        model_schema_json=json.dumps(
            [model.to_dict() for model in flow.models], separators=(",", ":")
        ),
        attributes=dict(flow.attributes),
        metadata=metadata,
    )


def _deployment_headers(settings: PipelineSettings) -> dict[str, str]:
    headers = {"Accept-Encoding": "application/json"}
    if settings.secret_key:
        if settings.is_cloud:
            headers["Authorization"] = f"Bearer {settings.secret_key}"
        else:
            token = base64.b64encode(f"{settings.secret_key}:".encode()).decode("ascii")
            headers["Authorization"] = f"Basic {token}"
    return headers
