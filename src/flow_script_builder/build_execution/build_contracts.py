"""Build execution entities."""

from __future__ import annotations

from dataclasses import dataclass

from flow_script_builder.deployment_packaging.deployment_models import (
    DeploymentRequest,
    DeploymentUnit,
)


@dataclass(frozen=True)
class CompileRequest:
    """Input contract for one compile pass."""

    script_name: str | None = None
    check_manifest_match: bool = False


@dataclass(frozen=True)
class PackageRequest:
    """Input contract for packaging flows for deployment."""

    version: str = ""
    only_sync_name: str | None = None
    only_action_name: str | None = None

    @property
    def single_deploy_mode(self) -> bool:
        return bool(self.only_sync_name or self.only_action_name)


@dataclass(frozen=True)
class PackageOutcome:
    """Output contract for one packaging pass."""

    units: tuple[DeploymentUnit, ...]
    request: DeploymentRequest
    compiled_ok: bool
