"""Script linting exports."""

from .host_calls import (
    DEPRECATED_CALLS,
    DISALLOWED_IN_ACTION,
    HOST_OBJECT_IDENTIFIER,
    MODEL_REFERENCING_CALLS,
    HostCall,
)
from .lint_outcomes import Diagnostic, DiagnosticCode, Severity, ValidationResult
from .script_linter import lint_script, lint_script_file
from .syntax_tree import NodeKind, ScriptParseError, parse_module

__all__ = [
    "DEPRECATED_CALLS",
    "DISALLOWED_IN_ACTION",
    "Diagnostic",
    "DiagnosticCode",
    "HOST_OBJECT_IDENTIFIER",
    "HostCall",
    "MODEL_REFERENCING_CALLS",
    "NodeKind",
    "ScriptParseError",
    "Severity",
    "ValidationResult",
    "lint_script",
    "lint_script_file",
    "parse_module",
]
