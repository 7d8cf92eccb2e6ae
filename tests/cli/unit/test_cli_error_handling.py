"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from flow_script_builder.cli import main


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["compile", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option" in captured.err
    assert "--bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_argument_returns_clean_click_error(capsys) -> None:
    exit_code = main(["resolve-interval"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing argument" in captured.err


def test_invalid_cadence_is_reported_without_traceback(capsys) -> None:
    exit_code = main(["resolve-interval", "every 2 minutes"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "is too short. The minimum interval is 5 minutes." in captured.err
    assert "Traceback" not in captured.err


def test_missing_manifest_is_reported_as_cli_error(tmp_path: Path, capsys) -> None:
    exit_code = main(["--project-dir", str(tmp_path), "generate-types"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "No nango.yaml manifest found" in captured.err


def test_missing_project_directory_is_reported(tmp_path: Path, capsys) -> None:
    exit_code = main(["--project-dir", str(tmp_path / "absent"), "compile"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Project directory not found" in captured.err
