"""Esbuild compiler command tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from flow_script_builder.compilation import CompilationError, EsbuildCompiler


def test_compiler_pipes_source_through_the_configured_command() -> None:
    captured: list[tuple[tuple[str, ...], str]] = []

    def _fake_run(command: tuple[str, ...], source: str) -> str:
        captured.append((command, source))
        return "module.exports = {};\n"

    compiler = EsbuildCompiler({"strict": True}, executable="npx-esbuild", run_command=_fake_run)

    output = compiler.compile("export default 1;\n", Path("/project/widgets.ts"))

    assert output == "module.exports = {};\n"
    command, source = captured[0]
    assert source == "export default 1;\n"
    assert command[:4] == ("npx-esbuild", "--loader=ts", "--format=cjs", "--sourcefile=widgets.ts")
    assert command[4].startswith("--tsconfig-raw=")
    assert json.loads(command[4].removeprefix("--tsconfig-raw=")) == {
        "compilerOptions": {"strict": True}
    }


def test_runner_errors_propagate_as_compilation_errors() -> None:
    def _failing_run(command: tuple[str, ...], source: str) -> str:
        raise CompilationError("Compiler failed with exit code 1")

    compiler = EsbuildCompiler({}, run_command=_failing_run)

    with pytest.raises(CompilationError, match="exit code 1"):
        compiler.compile("", Path("widgets.ts"))


def test_missing_executable_raises_compilation_error(tmp_path: Path) -> None:
    compiler = EsbuildCompiler({}, executable=str(tmp_path / "no-such-esbuild"))

    with pytest.raises(CompilationError, match="Compiler command not found"):
        compiler.compile("export {};\n", tmp_path / "widgets.ts")
