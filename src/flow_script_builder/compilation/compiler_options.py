"""Compiler options document loading."""

from __future__ import annotations

import json
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

DEFAULT_COMPILER_OPTIONS_RESOURCE = "tsconfig.dev.json"


class CompilerOptionsError(Exception):
    """Raised when the compiler options document is missing or malformed."""


def load_compiler_options(path: Path | str | None = None) -> dict[str, Any]:
    """Return the ``compilerOptions`` mapping of a tsconfig-style document.

    Without a path the packaged development defaults are used. The mapping is
    handed to the compiler unchanged.
    """
    if path is None:
        text = (
            resources.files("flow_script_builder.resources")
            .joinpath(DEFAULT_COMPILER_OPTIONS_RESOURCE)
            .read_text(encoding="utf-8")
        )
        label = DEFAULT_COMPILER_OPTIONS_RESOURCE
    else:
        options_path = Path(path)
        if not options_path.exists():
            raise CompilerOptionsError(f"Compiler options file not found: {options_path}")
        text = options_path.read_text(encoding="utf-8")
        label = str(options_path)

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CompilerOptionsError(f"Invalid compiler options in {label}: {exc}") from exc
    if not isinstance(document, Mapping):
        raise CompilerOptionsError(f"Compiler options document {label} must be an object.")

    options = document.get("compilerOptions", {})
    if not isinstance(options, Mapping):
        raise CompilerOptionsError(f"compilerOptions in {label} must be an object.")
    return dict(options)
