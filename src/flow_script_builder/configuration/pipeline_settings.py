"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

CLOUD_HOST = "https://api.nango.dev"
STAGING_HOST = "https://api.staging.nango.dev"
LOCAL_HOST = "http://localhost:3003"


@dataclass(frozen=True)
class PipelineSettings:  # pylint: disable=too-many-instance-attributes
    """Settings resolved once per invocation and passed to every component."""

    hostport: str
    secret_key: str | None
    environment_tag: str
    project_root: Path
    output_dir: Path
    compiler_options_path: Path | None
    host_types_path: Path | None
    debug: bool = False

    @property
    def is_cloud(self) -> bool:
        return self.hostport in (CLOUD_HOST, STAGING_HOST)
