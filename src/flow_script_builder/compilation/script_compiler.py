"""TypeScript to JavaScript compilation through esbuild."""

from __future__ import annotations

import json
import shlex
import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

CommandRunner = Callable[[tuple[str, ...], str], str]


class CompilationError(Exception):
    """Raised when a script cannot be compiled."""


class ScriptCompiler(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for compilers used by the compile pipeline."""

    def compile(self, source: str, script_path: Path) -> str: ...


class EsbuildCompiler:  # pylint: disable=too-few-public-methods
    """Compile one script at a time by piping its source through esbuild."""

    def __init__(
        self,
        compiler_options: Mapping[str, Any],
        *,
        executable: str = "esbuild",
        run_command: CommandRunner | None = None,
    ) -> None:
        self._compiler_options = dict(compiler_options)
        self._executable = executable
        self._run_command = run_command or _run_compiler_command

    def compile(self, source: str, script_path: Path) -> str:
        return self._run_command(self.command_for(script_path), source)

    def command_for(self, script_path: Path) -> tuple[str, ...]:
        tsconfig_raw = json.dumps({"compilerOptions": self._compiler_options}, sort_keys=True)
        return (
            self._executable,
            "--loader=ts",
            "--format=cjs",
            f"--sourcefile={script_path.name}",
            f"--tsconfig-raw={tsconfig_raw}",
        )


def _run_compiler_command(command: tuple[str, ...], source: str) -> str:
    """Run the compiler with ``source`` on stdin and return what it emits."""
    try:
        completed = subprocess.run(
            list(command),
            input=source,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise CompilationError(f"Compiler command not found: {command[0]}") from exc
    except subprocess.CalledProcessError as exc:
        details = (exc.stderr or "").strip()
        raise CompilationError(
            f"Compiler failed with exit code {exc.returncode}: {shlex.join(command[:4])}"
            + (f"\n{details}" if details else "")
        ) from exc
    return completed.stdout
