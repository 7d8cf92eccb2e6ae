"""Compilation domain exports."""

from .compile_pipeline import (
    BuildContext,
    FileCompileResult,
    FileCompileStatus,
    compile_all,
    compile_script_file,
    discover_script_files,
    output_path_for,
    remove_compiled_artifact,
    verify_scripts_match_manifest,
)
from .compiler_options import CompilerOptionsError, load_compiler_options
from .script_compiler import CompilationError, EsbuildCompiler, ScriptCompiler
from .type_definitions import (
    TYPES_FILENAME,
    build_interface_definitions,
    render_type_definitions,
    write_type_definitions,
)
from .watch_loop import ScriptWatchHandler, WatchEvent, WatchEventKind, watch_project

__all__ = [
    "BuildContext",
    "CompilationError",
    "CompilerOptionsError",
    "EsbuildCompiler",
    "FileCompileResult",
    "FileCompileStatus",
    "ScriptCompiler",
    "ScriptWatchHandler",
    "TYPES_FILENAME",
    "WatchEvent",
    "WatchEventKind",
    "build_interface_definitions",
    "compile_all",
    "compile_script_file",
    "discover_script_files",
    "load_compiler_options",
    "output_path_for",
    "remove_compiled_artifact",
    "render_type_definitions",
    "verify_scripts_match_manifest",
    "watch_project",
    "write_type_definitions",
]
