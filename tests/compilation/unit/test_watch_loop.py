"""Watch handler tests driven with synthetic events."""

from __future__ import annotations

from pathlib import Path

from flow_script_builder.compilation import (
    BuildContext,
    ScriptWatchHandler,
    WatchEvent,
    WatchEventKind,
)
from flow_script_builder.compilation.watch_loop import to_watch_events
from flow_script_builder.manifest_normalization import (
    ManifestError,
    collect_model_names,
    normalize_manifest,
    parse_manifest,
)
from watchfiles import Change

_SCRIPT = "export default async function fetchData(nango: any) {\n    await nango.log('x');\n}\n"


class _RecordingCompiler:
    def __init__(self) -> None:
        self.compiled: list[str] = []

    def compile(self, source: str, script_path: Path) -> str:
        self.compiled.append(script_path.name)
        return source


def _context(tmp_path: Path, flows: tuple[str, ...], compiler: _RecordingCompiler) -> BuildContext:
    lines = ["integrations:", "  demo:"]
    for flow in flows:
        lines += [f"    {flow}:", "      runs: every hour", "      returns: Widget"]
    lines += ["models:", "  Widget:", "    id: string"]
    integrations = normalize_manifest(parse_manifest("\n".join(lines) + "\n"))
    return BuildContext(
        project_root=tmp_path,
        output_dir=tmp_path / "dist",
        integrations=integrations,
        known_model_names=collect_model_names(integrations),
        compiler=compiler,
    )


def _write_script(tmp_path: Path, name: str) -> Path:
    path = tmp_path / name
    path.write_text(_SCRIPT, encoding="utf-8")
    return path


def test_added_and_changed_scripts_are_recompiled(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    handler = ScriptWatchHandler(_context(tmp_path, ("widgets",), compiler), load_context=_unused)
    script = _write_script(tmp_path, "widgets.ts")

    handler.handle(WatchEvent(WatchEventKind.ADDED, script))
    handler.handle(WatchEvent(WatchEventKind.CHANGED, script))

    assert compiler.compiled == ["widgets.ts", "widgets.ts"]
    assert (tmp_path / "dist" / "widgets.js").exists()


def test_removed_script_deletes_its_artifact(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    handler = ScriptWatchHandler(_context(tmp_path, ("widgets",), compiler), load_context=_unused)
    script = _write_script(tmp_path, "widgets.ts")
    handler.handle(WatchEvent(WatchEventKind.ADDED, script))
    script.unlink()

    handler.handle(WatchEvent(WatchEventKind.REMOVED, script))

    assert not (tmp_path / "dist" / "widgets.js").exists()


def test_generated_types_and_other_files_are_ignored(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    handler = ScriptWatchHandler(_context(tmp_path, ("models",), compiler), load_context=_unused)

    handler.handle(WatchEvent(WatchEventKind.CHANGED, _write_script(tmp_path, "models.ts")))
    handler.handle(WatchEvent(WatchEventKind.CHANGED, tmp_path / "README.md"))

    assert compiler.compiled == []


def test_manifest_change_reloads_context_and_recompiles_everything(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    _write_script(tmp_path, "widgets.ts")
    _write_script(tmp_path, "gadgets.ts")
    reloaded = _context(tmp_path, ("widgets", "gadgets"), compiler)
    handler = ScriptWatchHandler(
        _context(tmp_path, ("widgets",), compiler), load_context=lambda: reloaded
    )

    handler.handle(WatchEvent(WatchEventKind.CHANGED, tmp_path / "nango.yaml"))

    assert handler.context is reloaded
    assert compiler.compiled == ["gadgets.ts", "widgets.ts"]


def test_manifest_reload_failure_keeps_previous_context(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    _write_script(tmp_path, "widgets.ts")
    original = _context(tmp_path, ("widgets",), compiler)

    def _broken() -> BuildContext:
        raise ManifestError("Failed to parse nango.yaml")

    handler = ScriptWatchHandler(original, load_context=_broken)

    handler.handle(WatchEvent(WatchEventKind.CHANGED, tmp_path / "nango.yaml"))

    assert handler.context is original
    assert compiler.compiled == ["widgets.ts"]


def test_raw_changes_are_ordered_with_manifest_last(tmp_path: Path) -> None:
    _write_script(tmp_path, "a.ts")
    (tmp_path / "nango.yaml").write_text("integrations: {}\n", encoding="utf-8")

    events = to_watch_events(
        {
            (Change.modified, str(tmp_path / "nango.yaml")),
            (Change.deleted, str(tmp_path / "b.ts")),
            (Change.added, str(tmp_path / "a.ts")),
        }
    )

    assert events == [
        WatchEvent(WatchEventKind.ADDED, tmp_path / "a.ts"),
        WatchEvent(WatchEventKind.REMOVED, tmp_path / "b.ts"),
        WatchEvent(WatchEventKind.CHANGED, tmp_path / "nango.yaml"),
    ]


def test_delete_and_recreate_in_one_batch_recompiles_the_script(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    handler = ScriptWatchHandler(_context(tmp_path, ("widgets",), compiler), load_context=_unused)
    script = _write_script(tmp_path, "widgets.ts")
    handler.handle(WatchEvent(WatchEventKind.ADDED, script))

    events = to_watch_events({(Change.deleted, str(script)), (Change.added, str(script))})
    for event in events:
        handler.handle(event)

    assert events == [WatchEvent(WatchEventKind.CHANGED, script)]
    assert (tmp_path / "dist" / "widgets.js").exists()
    assert compiler.compiled == ["widgets.ts", "widgets.ts"]


def test_delete_and_recreate_of_manifest_reloads_context(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    manifest = tmp_path / "nango.yaml"
    manifest.write_text("integrations: {}\n", encoding="utf-8")
    reloaded = _context(tmp_path, ("widgets",), compiler)
    calls: list[str] = []

    def _reload() -> BuildContext:
        calls.append("reload")
        return reloaded

    handler = ScriptWatchHandler(_context(tmp_path, (), compiler), load_context=_reload)

    for event in to_watch_events({(Change.deleted, str(manifest)), (Change.added, str(manifest))}):
        handler.handle(event)

    assert calls == ["reload"]
    assert handler.context is reloaded


def test_added_manifest_event_reloads_context(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    reloaded = _context(tmp_path, ("widgets",), compiler)
    handler = ScriptWatchHandler(_context(tmp_path, (), compiler), load_context=lambda: reloaded)

    handler.handle(WatchEvent(WatchEventKind.ADDED, tmp_path / "nango.yaml"))

    assert handler.context is reloaded


def test_reload_failing_on_disk_keeps_previous_context(tmp_path: Path) -> None:
    compiler = _RecordingCompiler()
    _write_script(tmp_path, "widgets.ts")
    original = _context(tmp_path, ("widgets",), compiler)

    def _missing_host_types() -> BuildContext:
        raise FileNotFoundError("host.d.ts")

    handler = ScriptWatchHandler(original, load_context=_missing_host_types)

    handler.handle(WatchEvent(WatchEventKind.CHANGED, tmp_path / "nango.yaml"))

    assert handler.context is original
    assert compiler.compiled == ["widgets.ts"]


def _unused() -> BuildContext:
    raise AssertionError("the manifest did not change")
