"""Boundary tests for the linter and resolver cores."""

from __future__ import annotations

from pathlib import Path


def _package_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "src" / "flow_script_builder"


def test_linter_core_does_not_import_pipeline_stages() -> None:
    linting_dir = _package_dir() / "script_linting"
    forbidden_import_fragments = (
        "flow_script_builder.compilation",
        "flow_script_builder.deployment_packaging",
        "flow_script_builder.build_execution",
        "flow_script_builder.cli",
    )

    for module_path in sorted(linting_dir.glob("*.py")):
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert fragment not in text, f"Forbidden core dependency in {module_path}: {fragment}"


def test_interval_resolution_depends_on_no_other_domain() -> None:
    for module_path in sorted((_package_dir() / "interval_resolution").glob("*.py")):
        text = module_path.read_text(encoding="utf-8")
        assert "from flow_script_builder." not in text, module_path
