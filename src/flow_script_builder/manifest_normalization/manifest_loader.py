"""Manifest file loader."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import yaml

from .manifest_models import Manifest

MANIFEST_FILENAME = "nango.yaml"


class ManifestError(Exception):
    """Raised when the manifest cannot be loaded or normalized."""


def load_manifest(project_root: Path | str) -> Manifest:
    """Read and parse the manifest found in ``project_root``."""
    path = Path(project_root) / MANIFEST_FILENAME
    if not path.exists():
        raise ManifestError(f"No {MANIFEST_FILENAME} manifest found at {path}")
    return parse_manifest(path.read_text(encoding="utf-8"), source_path=path)


def parse_manifest(text: str, *, source_path: Path | None = None) -> Manifest:
    """Parse manifest YAML text into its raw sections."""
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestError(f"Failed to parse {MANIFEST_FILENAME}: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        raise ManifestError(f"{MANIFEST_FILENAME} root must be a mapping.")

    integrations = parsed.get("integrations") or {}
    models = parsed.get("models") or {}
    if not isinstance(integrations, Mapping):
        raise ManifestError("Manifest section 'integrations' must be a mapping.")
    if not isinstance(models, Mapping):
        raise ManifestError("Manifest section 'models' must be a mapping.")

    return Manifest(
        integrations=integrations,
        models=models,
        text=text,
        source_path=source_path,
    )
