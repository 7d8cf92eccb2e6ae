"""Lint-gated compilation of integration scripts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from flow_script_builder.manifest_normalization.manifest_models import (
    FlowDescriptor,
    SimplifiedIntegration,
)
from flow_script_builder.manifest_normalization.manifest_normalizer import find_flow
from flow_script_builder.script_linting.lint_outcomes import ValidationResult
from flow_script_builder.script_linting.script_linter import lint_script
from flow_script_builder.script_linting.syntax_tree import ScriptParseError

from .script_compiler import CompilationError, ScriptCompiler
from .type_definitions import TYPES_FILENAME

LOGGER = logging.getLogger(__name__)

SCRIPT_SUFFIX = ".ts"
COMPILED_SUFFIX = ".js"


@dataclass(frozen=True)
class BuildContext:
    """Everything a single compile needs; rebuilt whenever the manifest changes."""

    project_root: Path
    output_dir: Path
    integrations: tuple[SimplifiedIntegration, ...]
    known_model_names: tuple[str, ...]
    compiler: ScriptCompiler

    def flow_for(self, script_path: Path) -> FlowDescriptor | None:
        located = find_flow(self.integrations, script_path.stem)
        return located[1] if located else None


class FileCompileStatus(str, Enum):
    """What happened to one script during a compile pass."""

    COMPILED = "compiled"
    NOT_IN_MANIFEST = "not_in_manifest"
    BLOCKED = "blocked"
    FAILED = "failed"


@dataclass(frozen=True)
class FileCompileResult:
    """Outcome of compiling one script."""

    script_path: Path
    status: FileCompileStatus
    output_path: Path | None = None
    validation: ValidationResult | None = None
    error_message: str | None = None


def discover_script_files(project_root: Path) -> tuple[Path, ...]:
    """Script files at the top level of the project, excluding generated types."""
    return tuple(
        path
        for path in sorted(project_root.glob(f"*{SCRIPT_SUFFIX}"))
        if path.name != TYPES_FILENAME and not path.name.endswith(".d.ts")
    )


def output_path_for(script_path: Path, context: BuildContext) -> Path:
    return context.output_dir / f"{script_path.stem}{COMPILED_SUFFIX}"


def compile_script_file(script_path: Path, context: BuildContext) -> FileCompileResult:
    """Lint and compile one script, writing its artifact to the output directory.

    Scripts without a manifest flow are skipped. Lint usage errors block the
    write; compile and I/O failures are logged and reported as FAILED.
    """
    flow_name = script_path.stem
    flow = context.flow_for(script_path)
    if flow is None:
        LOGGER.debug("Skipping %s: no flow named %s in the manifest.", script_path, flow_name)
        return FileCompileResult(script_path=script_path, status=FileCompileStatus.NOT_IN_MANIFEST)

    try:
        source = script_path.read_text(encoding="utf-8")
        validation = lint_script(
            source,
            flow.type,
            context.known_model_names,
            file_label=str(script_path),
        )
        if not validation.build_eligible:
            return FileCompileResult(
                script_path=script_path,
                status=FileCompileStatus.BLOCKED,
                validation=validation,
            )
        compiled = context.compiler.compile(source, script_path)
        output_path = output_path_for(script_path, context)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(compiled, encoding="utf-8")
    except (CompilationError, ScriptParseError, OSError, UnicodeDecodeError) as exc:
        LOGGER.error('Error compiling "%s": %s', script_path, exc)
        return FileCompileResult(
            script_path=script_path,
            status=FileCompileStatus.FAILED,
            error_message=str(exc),
        )

    LOGGER.info('Compiled "%s" successfully', script_path)
    return FileCompileResult(
        script_path=script_path,
        status=FileCompileStatus.COMPILED,
        output_path=output_path,
        validation=validation,
    )


def compile_all(
    script_paths: Iterable[Path],
    context: BuildContext,
    *,
    requested_script: str | None = None,
) -> bool:
    """Compile every script in order; one failure never stops the rest.

    Returns False when any script failed, or when the explicitly requested
    script was blocked by the linter.
    """
    success = True
    for script_path in script_paths:
        result = compile_script_file(script_path, context)
        if result.status is FileCompileStatus.FAILED:
            success = False
        elif result.status is FileCompileStatus.BLOCKED and requested_script == script_path.stem:
            success = False
    return success


def remove_compiled_artifact(script_path: Path, context: BuildContext) -> bool:
    """Delete the artifact of a removed script; False when there was none."""
    output_path = output_path_for(script_path, context)
    if not output_path.exists():
        LOGGER.warning("No compiled artifact to remove for %s at %s", script_path, output_path)
        return False
    output_path.unlink()
    LOGGER.info("Removed %s", output_path)
    return True


def verify_scripts_match_manifest(
    integrations: Sequence[SimplifiedIntegration], script_paths: Iterable[Path]
) -> None:
    """Raise when a flow has no script or a script has no flow."""
    flow_names = [flow.name for integration in integrations for flow in integration.flows]
    script_names = [path.stem for path in script_paths if path.name != TYPES_FILENAME]

    missing = [name for name in flow_names if name not in script_names]
    extra = [name for name in script_names if name not in flow_names]
    problems = []
    if missing:
        problems.append(
            f"The following syncs are missing a corresponding {SCRIPT_SUFFIX} file: "
            f"{', '.join(missing)}"
        )
    if extra:
        problems.append(
            f"The following {SCRIPT_SUFFIX} files do not have a corresponding sync in the "
            f"config: {', '.join(extra)}"
        )
    if problems:
        raise CompilationError("\n".join(problems))
