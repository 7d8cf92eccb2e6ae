"""Watch-driven incremental recompilation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from watchfiles import Change, watch

from flow_script_builder.manifest_normalization.manifest_loader import (
    MANIFEST_FILENAME,
    ManifestError,
)

from .compile_pipeline import (
    SCRIPT_SUFFIX,
    BuildContext,
    compile_script_file,
    discover_script_files,
    remove_compiled_artifact,
)
from .type_definitions import TYPES_FILENAME

LOGGER = logging.getLogger(__name__)

ContextLoader = Callable[[], BuildContext]


class WatchEventKind(str, Enum):
    """File-system event kinds the watch loop reacts to."""

    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class WatchEvent:
    """One file event, reduced from the watcher's raw change set."""

    kind: WatchEventKind
    path: Path


class ScriptWatchHandler:
    """Apply watch events one at a time to the output directory.

    A manifest change reloads the build context through ``load_context`` so
    every script is recompiled against freshly normalized descriptors. When the
    manifest cannot be loaded, or the reload fails on disk, the previous context
    stays in use.
    """

    def __init__(self, context: BuildContext, load_context: ContextLoader) -> None:
        self._context = context
        self._load_context = load_context

    @property
    def context(self) -> BuildContext:
        return self._context

    def handle(self, event: WatchEvent) -> None:
        if event.path.name == MANIFEST_FILENAME:
            if event.kind is not WatchEventKind.REMOVED:
                self._reload_and_recompile()
            return
        if not is_watched_script(event.path):
            return
        if event.kind is WatchEventKind.REMOVED:
            remove_compiled_artifact(event.path, self._context)
            return
        compile_script_file(event.path, self._context)

    def compile_existing(self) -> None:
        for script_path in discover_script_files(self._context.project_root):
            compile_script_file(script_path, self._context)

    def _reload_and_recompile(self) -> None:
        try:
            self._context = self._load_context()
        except (ManifestError, OSError) as exc:
            LOGGER.error("Keeping the previous configuration: %s", exc)
        else:
            LOGGER.info("The %s was updated; recompiling every script.", MANIFEST_FILENAME)
        self.compile_existing()


def is_watched_script(path: Path) -> bool:
    return path.suffix == SCRIPT_SUFFIX and path.name != TYPES_FILENAME


def to_watch_events(changes: Iterable[tuple[Change, str]]) -> list[WatchEvent]:
    """Collapse a raw change set to one event per path, manifest changes last.

    A batch is unordered and editors that save by delete-and-recreate report
    both changes for one path, so the file's presence on disk decides the event.
    """
    changes_by_path: dict[Path, set[Change]] = {}
    for change, raw_path in changes:
        changes_by_path.setdefault(Path(raw_path), set()).add(change)
    events = [
        WatchEvent(kind=_collapsed_kind(path, seen), path=path)
        for path, seen in changes_by_path.items()
    ]
    return sorted(
        events, key=lambda event: (event.path.name == MANIFEST_FILENAME, str(event.path))
    )


def _collapsed_kind(path: Path, seen: set[Change]) -> WatchEventKind:
    if not path.exists():
        return WatchEventKind.REMOVED
    if seen == {Change.added}:
        return WatchEventKind.ADDED
    return WatchEventKind.CHANGED


def watch_project(
    handler: ScriptWatchHandler,
    project_root: Path,
    *,
    stop_event: threading.Event | None = None,
) -> None:
    """Compile existing scripts, then dispatch file events until stopped."""

    def _accepts(change: Change, raw_path: str) -> bool:
        path = Path(raw_path)
        if path.parent.resolve() != project_root.resolve():
            return False
        return path.name == MANIFEST_FILENAME or is_watched_script(path)

    LOGGER.debug("Watching %s for *%s and %s", project_root, SCRIPT_SUFFIX, MANIFEST_FILENAME)
    handler.compile_existing()
    for changes in watch(project_root, watch_filter=_accepts, stop_event=stop_event):
        for event in to_watch_events(changes):
            handler.handle(event)
