"""Build execution use-case service."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path

from flow_script_builder.compilation.compile_pipeline import (
    SCRIPT_SUFFIX,
    BuildContext,
    compile_all,
    discover_script_files,
    verify_scripts_match_manifest,
)
from flow_script_builder.compilation.compiler_options import (
    CompilerOptionsError,
    load_compiler_options,
)
from flow_script_builder.compilation.script_compiler import (
    CompilationError,
    EsbuildCompiler,
    ScriptCompiler,
)
from flow_script_builder.compilation.type_definitions import (
    TYPES_FILENAME,
    write_type_definitions,
)
from flow_script_builder.compilation.watch_loop import ScriptWatchHandler, watch_project
from flow_script_builder.configuration.pipeline_settings import PipelineSettings
from flow_script_builder.deployment_packaging.packager import (
    build_deployment_request,
    package_deployment_units,
)
from flow_script_builder.manifest_normalization.manifest_loader import ManifestError, load_manifest
from flow_script_builder.manifest_normalization.manifest_models import (
    Manifest,
    SimplifiedIntegration,
)
from flow_script_builder.manifest_normalization.manifest_normalizer import (
    collect_model_names,
    normalize_manifest,
    validate_descriptors,
)

from .build_contracts import CompileRequest, PackageOutcome, PackageRequest

LOGGER = logging.getLogger(__name__)


class BuildExecutionError(Exception):
    """Raised when a build use case cannot be completed."""


def prepare_build_context(
    settings: PipelineSettings,
    *,
    compiler: ScriptCompiler | None = None,
    refresh_types: bool = False,
) -> BuildContext:
    """Load and normalize the manifest and wire up the compiler.

    The type-definitions file is written when missing, or always with
    ``refresh_types``. Raises ManifestError or CompilerOptionsError.
    """
    return _prepare(settings, compiler=compiler, refresh_types=refresh_types)[1]


def _prepare(
    settings: PipelineSettings,
    *,
    compiler: ScriptCompiler | None,
    refresh_types: bool,
) -> tuple[Manifest, BuildContext]:
    manifest, integrations = _load_integrations(settings)
    types_path = settings.project_root / TYPES_FILENAME
    if refresh_types or not types_path.exists():
        write_type_definitions(
            settings.project_root,
            manifest.models,
            integrations,
            host_types_path=settings.host_types_path,
        )
        LOGGER.debug("Type definitions written to %s", types_path)

    return manifest, BuildContext(
        project_root=settings.project_root,
        output_dir=settings.output_dir,
        integrations=integrations,
        known_model_names=collect_model_names(integrations),
        compiler=compiler or _default_compiler(settings),
    )


def execute_compile(
    settings: PipelineSettings,
    request: CompileRequest | None = None,
    *,
    compiler: ScriptCompiler | None = None,
) -> bool:
    """Compile one named script or every script of the project."""
    return _compile(settings, request or CompileRequest(), compiler=compiler)[2]


def _compile(
    settings: PipelineSettings,
    resolved_request: CompileRequest,
    *,
    compiler: ScriptCompiler | None,
) -> tuple[Manifest, BuildContext, bool]:
    try:
        manifest, context = _prepare(settings, compiler=compiler, refresh_types=False)
        script_paths = _script_paths(settings.project_root, resolved_request.script_name)
        if resolved_request.check_manifest_match:
            verify_scripts_match_manifest(
                context.integrations, discover_script_files(settings.project_root)
            )
    except (ManifestError, CompilerOptionsError, CompilationError, OSError) as exc:
        raise BuildExecutionError(str(exc)) from exc

    settings.output_dir.mkdir(parents=True, exist_ok=True)
    compiled_ok = compile_all(
        script_paths, context, requested_script=resolved_request.script_name
    )
    return manifest, context, compiled_ok


def execute_package(
    settings: PipelineSettings,
    request: PackageRequest | None = None,
    *,
    compiler: ScriptCompiler | None = None,
    now: datetime | None = None,
) -> PackageOutcome:
    """Compile, then package flows into a deployment request."""
    resolved_request = request or PackageRequest()
    manifest, context, compiled_ok = _compile(settings, CompileRequest(), compiler=compiler)
    if not compiled_ok:
        LOGGER.warning("Some scripts did not compile; packaging what is available.")

    units = package_deployment_units(
        context.integrations,
        output_dir=settings.output_dir,
        source_dir=settings.project_root,
        version=resolved_request.version,
        only_sync_name=resolved_request.only_sync_name,
        only_action_name=resolved_request.only_action_name,
        now=now,
    )
    if units is None:
        raise BuildExecutionError("Packaging aborted because a sync interval is invalid.")

    return PackageOutcome(
        units=units,
        request=build_deployment_request(
            units,
            settings,
            manifest_text=manifest.text,
            single_deploy_mode=resolved_request.single_deploy_mode,
        ),
        compiled_ok=compiled_ok,
    )


def execute_watch(
    settings: PipelineSettings,
    *,
    compiler: ScriptCompiler | None = None,
    stop_event: threading.Event | None = None,
) -> None:
    """Compile on every script or manifest change until the process is stopped."""
    try:
        resolved_compiler = compiler or _default_compiler(settings)
        context = prepare_build_context(settings, compiler=resolved_compiler)
    except (ManifestError, CompilerOptionsError, OSError) as exc:
        raise BuildExecutionError(str(exc)) from exc

    settings.output_dir.mkdir(parents=True, exist_ok=True)
    handler = ScriptWatchHandler(
        context,
        load_context=lambda: prepare_build_context(
            settings, compiler=resolved_compiler, refresh_types=True
        ),
    )
    watch_project(handler, settings.project_root, stop_event=stop_event)


def execute_generate_types(settings: PipelineSettings) -> Path:
    """Regenerate the type-definitions file from the manifest."""
    try:
        manifest, integrations = _load_integrations(settings)
        return write_type_definitions(
            settings.project_root,
            manifest.models,
            integrations,
            host_types_path=settings.host_types_path,
        )
    except (ManifestError, OSError) as exc:
        raise BuildExecutionError(str(exc)) from exc


def _load_integrations(
    settings: PipelineSettings,
) -> tuple[Manifest, tuple[SimplifiedIntegration, ...]]:
    manifest = load_manifest(settings.project_root)
    integrations = normalize_manifest(manifest)
    validate_descriptors(integrations)
    return manifest, integrations


def _default_compiler(settings: PipelineSettings) -> ScriptCompiler:
    options = load_compiler_options(settings.compiler_options_path)
    if settings.debug:
        LOGGER.debug("Compiler options: %s", options)
    return EsbuildCompiler(options)


def _script_paths(project_root: Path, script_name: str | None) -> tuple[Path, ...]:
    if script_name is None:
        return discover_script_files(project_root)
    script_path = project_root / f"{script_name}{SCRIPT_SUFFIX}"
    if not script_path.exists():
        raise BuildExecutionError(f"Script file not found: {script_path}")
    return (script_path,)
