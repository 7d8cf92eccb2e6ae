"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

import click

from flow_script_builder.build_execution import (
    BuildExecutionError,
    CompileRequest,
    PackageRequest,
    execute_compile,
    execute_generate_types,
    execute_package,
    execute_watch,
)
from flow_script_builder.configuration import (
    PipelineSettings,
    SettingsError,
    resolve_pipeline_settings,
)
from flow_script_builder.interval_resolution import resolve_interval
from flow_script_builder.manifest_normalization import (
    ManifestError,
    collect_model_names,
    find_flow,
    load_manifest,
    normalize_manifest,
)
from flow_script_builder.script_linting import ScriptParseError, lint_script_file


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="flow-script-builder")
@click.option(
    "--project-dir",
    "project_dir",
    default=".",
    show_default=True,
    type=click.Path(path_type=str),
    help="Directory holding nango.yaml and the integration scripts",
)
@click.option(
    "--env",
    "environment_tag",
    default="dev",
    show_default=True,
    help="Environment tag used to pick the deployment host and secret key",
)
@click.option(
    "--compiler-options",
    "compiler_options_path",
    required=False,
    type=click.Path(path_type=str),
    help="tsconfig-style JSON document whose compilerOptions are passed to the compiler",
)
@click.option("--debug", is_flag=True, default=False, help="Log debug details.")
@click.pass_context
def cli(
    ctx: click.Context,
    project_dir: str,
    environment_tag: str,
    compiler_options_path: str | None,
    debug: bool,
) -> None:
    """Normalize, lint, compile and package integration scripts."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s %(message)s",
        stream=sys.stderr,
        force=True,
    )
    ctx.obj = {
        "project_dir": project_dir,
        "environment_tag": environment_tag,
        "compiler_options_path": compiler_options_path,
        "debug": debug,
    }


@cli.command(name="compile")
@click.option("--script", "script_name", required=False, help="Compile only this flow's script")
@click.option(
    "--check-manifest",
    is_flag=True,
    default=False,
    help="Fail when scripts and manifest flows do not correspond one to one.",
)
@click.pass_context
def compile_scripts(ctx: click.Context, script_name: str | None, check_manifest: bool) -> None:
    """Lint and compile integration scripts into the dist directory."""
    settings = _settings(ctx)
    try:
        success = execute_compile(
            settings,
            CompileRequest(script_name=script_name, check_manifest_match=check_manifest),
        )
    except BuildExecutionError as exc:
        raise CliError(str(exc)) from exc
    if not success:
        raise CliError("The scripts did not compile successfully.")
    click.echo(str(settings.output_dir))


@cli.command(name="watch")
@click.pass_context
def watch_scripts(ctx: click.Context) -> None:
    """Recompile scripts whenever they or the manifest change."""
    try:
        execute_watch(_settings(ctx))
    except BuildExecutionError as exc:
        raise CliError(str(exc)) from exc


@cli.command(name="lint")
@click.argument("script_path", type=click.Path(path_type=str))
@click.pass_context
def lint(ctx: click.Context, script_path: str) -> None:
    """Check host call usage in one script against the manifest."""
    settings = _settings(ctx)
    path = Path(script_path)
    try:
        integrations = normalize_manifest(load_manifest(settings.project_root))
        located = find_flow(integrations, path.stem)
        if located is None:
            raise CliError(f"No flow named {path.stem} in the manifest.")
        result = lint_script_file(path, located[1].type, collect_model_names(integrations))
    except (ManifestError, ScriptParseError, OSError) as exc:
        raise CliError(str(exc)) from exc

    click.echo(f"{path}: {len(result.errors)} error(s), {len(result.warnings)} warning(s)")
    if not result.build_eligible:
        raise CliError(f"{path} cannot be compiled until its errors are fixed.")


@cli.command(name="generate-types")
@click.pass_context
def generate_types(ctx: click.Context) -> None:
    """Regenerate the type-definitions file from the manifest."""
    try:
        output_path = execute_generate_types(_settings(ctx))
    except BuildExecutionError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(output_path))


@cli.command(name="package")
@click.option("--version", "version", default="", help="Version to stamp on every flow")
@click.option("--sync", "only_sync_name", required=False, help="Package only this sync")
@click.option("--action", "only_action_name", required=False, help="Package only this action")
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Write the deployment request here instead of stdout",
)
@click.pass_context
def package(
    ctx: click.Context,
    version: str,
    only_sync_name: str | None,
    only_action_name: str | None,
    output_path: str | None,
) -> None:
    """Compile and package flows into a deployment request."""
    try:
        outcome = execute_package(
            _settings(ctx),
            PackageRequest(
                version=version,
                only_sync_name=only_sync_name,
                only_action_name=only_action_name,
            ),
        )
    except BuildExecutionError as exc:
        raise CliError(str(exc)) from exc

    document = json.dumps({"url": outcome.request.url, "body": outcome.request.body}, indent=2)
    if output_path is None:
        click.echo(document)
        return
    try:
        Path(output_path).write_text(document, encoding="utf-8")
    except OSError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(Path(output_path).resolve()))


@cli.command(name="resolve-interval")
@click.argument("cadence")
def resolve_interval_command(cadence: str) -> None:
    """Show the interval and phase offset a cadence resolves to right now."""
    resolution = resolve_interval(cadence, datetime.now(UTC))
    if resolution.error is not None:
        raise CliError(resolution.error.message)
    assert resolution.spec is not None
    click.echo(
        json.dumps(
            {
                "interval": resolution.spec.interval,
                "interval_ms": resolution.spec.interval_ms,
                "offset_ms": resolution.spec.offset_ms,
            }
        )
    )


def _settings(ctx: click.Context) -> PipelineSettings:
    options = ctx.find_root().obj
    try:
        return resolve_pipeline_settings(
            environment_tag=options["environment_tag"],
            environ=dict(os.environ),
            project_root=options["project_dir"],
            compiler_options_path=options["compiler_options_path"],
            debug=options["debug"],
        )
    except SettingsError as exc:
        raise CliError(str(exc)) from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
