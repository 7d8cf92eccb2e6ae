"""Pipeline settings resolution.

Nothing here reads ``os.environ``; the caller passes the environment mapping in
so that every value the pipeline uses is visible in one place.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from .pipeline_settings import CLOUD_HOST, LOCAL_HOST, STAGING_HOST, PipelineSettings

DEFAULT_OUTPUT_DIR_NAME = "dist"
DEFAULT_COMPILER_OPTIONS_FILENAME = "tsconfig.json"
HOST_TYPES_ENV = "NANGO_HOST_TYPES_PATH"


class SettingsError(Exception):
    """Raised when pipeline settings are invalid."""


def resolve_pipeline_settings(
    *,
    environment_tag: str,
    environ: Mapping[str, str],
    project_root: Path | str = ".",
    compiler_options_path: Path | str | None = None,
    host_types_path: Path | str | None = None,
    debug: bool = False,
) -> PipelineSettings:
    """Build the immutable settings value for one pipeline invocation."""
    root = Path(project_root).resolve()
    if not root.is_dir():
        raise SettingsError(f"Project directory not found: {root}")

    tag = environment_tag.strip()
    if not tag:
        raise SettingsError("Environment tag must not be empty.")

    return PipelineSettings(
        hostport=resolve_hostport(tag, environ),
        secret_key=resolve_secret_key(tag, environ),
        environment_tag=tag,
        project_root=root,
        output_dir=root / DEFAULT_OUTPUT_DIR_NAME,
        compiler_options_path=_resolve_compiler_options_path(root, compiler_options_path),
        host_types_path=_resolve_host_types_path(root, host_types_path, environ),
        debug=debug,
    )


def resolve_hostport(environment_tag: str, environ: Mapping[str, str]) -> str:
    """Explicit ``NANGO_HOSTPORT`` wins, otherwise the tag picks a known host."""
    explicit = (environ.get("NANGO_HOSTPORT") or "").strip()
    if explicit:
        hostport = explicit
    elif environment_tag == "local":
        hostport = LOCAL_HOST
    elif environment_tag == "staging":
        hostport = STAGING_HOST
    else:
        hostport = CLOUD_HOST
    return hostport[:-1] if hostport.endswith("/") else hostport


def resolve_secret_key(environment_tag: str, environ: Mapping[str, str]) -> str | None:
    scoped = {
        "prod": environ.get("NANGO_SECRET_KEY_PROD"),
        "dev": environ.get("NANGO_SECRET_KEY_DEV"),
    }.get(environment_tag)
    secret = (scoped or environ.get("NANGO_SECRET_KEY") or "").strip()
    return secret or None


def _resolve_compiler_options_path(root: Path, explicit: Path | str | None) -> Path | None:
    if explicit is not None:
        return _resolve_path(root, explicit)
    candidate = root / DEFAULT_COMPILER_OPTIONS_FILENAME
    return candidate if candidate.exists() else None


def _resolve_host_types_path(
    root: Path, explicit: Path | str | None, environ: Mapping[str, str]
) -> Path | None:
    raw = explicit if explicit is not None else environ.get(HOST_TYPES_ENV)
    if not raw:
        return None
    path = _resolve_path(root, raw)
    if not path.exists():
        raise SettingsError(f"Host type declarations not found: {path}")
    return path


def _resolve_path(base_path: Path, raw_path: Path | str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate
