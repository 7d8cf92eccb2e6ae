"""Manifest loader and field type tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from flow_script_builder.manifest_normalization import (
    MANIFEST_FILENAME,
    ManifestError,
    load_manifest,
    map_field_type,
    parse_manifest,
)


def test_load_manifest_reads_sections_and_keeps_text(tmp_path: Path) -> None:
    text = "integrations:\n  demo: {}\nmodels:\n  Widget:\n    id: string\n"
    (tmp_path / MANIFEST_FILENAME).write_text(text, encoding="utf-8")

    manifest = load_manifest(tmp_path)

    assert manifest.integrations == {"demo": {}}
    assert manifest.models == {"Widget": {"id": "string"}}
    assert manifest.text == text
    assert manifest.source_path == tmp_path / MANIFEST_FILENAME


def test_load_manifest_errors_when_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="No nango.yaml manifest found"):
        load_manifest(tmp_path)


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("integrations: [\n", "Failed to parse"),
        ("- just\n- a list\n", "root must be a mapping"),
        ("integrations: [a, b]\n", "'integrations' must be a mapping"),
        ("models: nope\n", "'models' must be a mapping"),
    ],
)
def test_parse_manifest_rejects_malformed_documents(text: str, message: str) -> None:
    with pytest.raises(ManifestError, match=message):
        parse_manifest(text)


def test_empty_manifest_has_no_integrations() -> None:
    manifest = parse_manifest("")

    assert manifest.integrations == {}
    assert manifest.models == {}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("integer", "number"),
        ("int", "number"),
        ("number", "number"),
        ("bool", "boolean"),
        ("char", "string"),
        ("date", "Date"),
        ("string | null", "string | null"),
        ("integer | undefined", "number | undefined"),
        ("date | null | undefined", "Date | null | undefined"),
        ("GithubIssue", "GithubIssue"),
    ],
)
def test_map_field_type(raw: str, expected: str) -> None:
    assert map_field_type(raw) == expected
