"""Generated type definitions tests."""

from __future__ import annotations

from pathlib import Path

from flow_script_builder.compilation import (
    TYPES_FILENAME,
    build_interface_definitions,
    render_type_definitions,
    write_type_definitions,
)
from flow_script_builder.compilation.type_definitions import interface_name
from flow_script_builder.manifest_normalization import normalize_manifest, parse_manifest

_MODELS = {
    "issues": {
        "__extends": "base",
        "id": "integer",
        "author": {"login": "string"},
    },
    "_internal": {"secret": "string"},
    "base": {"created_at": "date | null"},
}


def test_interface_names_are_singular_and_capitalised() -> None:
    assert interface_name("issues") == "Issue"
    assert interface_name("githubUser") == "GithubUser"
    assert interface_name("Comment") == "Comment"


def test_interfaces_skip_private_models_and_render_extends() -> None:
    definitions = build_interface_definitions(_MODELS)

    assert definitions == [
        "export interface Issue extends Base {\n"
        "  id: number;\n"
        "  author: {\n"
        "    login: string;\n"
        "  };\n"
        "}\n",
        "export interface Base {\n  created_at: Date | null;\n}\n",
    ]


def test_rendered_file_ends_with_flow_constant() -> None:
    manifest = parse_manifest(
        "integrations:\n  demo:\n    issues:\n      runs: every day\n      returns: issues\n"
    )
    integrations = normalize_manifest(manifest)

    text = render_type_definitions(
        _MODELS, integrations, host_types="export declare class NangoSync {}"
    )

    assert text.index("export interface Issue") < text.index("export declare class NangoSync")
    assert text.index("export declare class NangoSync") < text.index("export const NangoFlows")
    assert '"providerConfigKey": "demo"' in text
    assert text.endswith("] as const;\n")


def test_write_type_definitions_includes_host_declarations(tmp_path: Path) -> None:
    host_types = tmp_path / "host.d.ts"
    host_types.write_text("export declare class NangoAction {}\n", encoding="utf-8")

    target = write_type_definitions(
        tmp_path, {"Widget": {"id": "string"}}, (), host_types_path=host_types
    )

    assert target == tmp_path / TYPES_FILENAME
    content = target.read_text(encoding="utf-8")
    assert "export interface Widget {\n  id: string;\n}\n" in content
    assert "export declare class NangoAction {}" in content
    assert "export const NangoFlows = [] as const;" in content
