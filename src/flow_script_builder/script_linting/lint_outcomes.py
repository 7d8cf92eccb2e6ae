"""Script linting entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """How a diagnostic affects the build."""

    WARNING = "warning"
    ERROR = "error"


class DiagnosticCode(str, Enum):
    """Contract a diagnostic reports on."""

    MISSING_AWAIT = "missing_await"
    DISALLOWED_IN_ACTION = "disallowed_in_action"
    DEPRECATED_CALL = "deprecated_call"
    INVALID_MODEL_REFERENCE = "invalid_model_reference"
    UNVERIFIED_MODEL_REFERENCE = "unverified_model_reference"


@dataclass(frozen=True)
class Diagnostic:
    """One finding at a host call site."""

    code: DiagnosticCode
    severity: Severity
    call: str
    line: int
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Lint outcome for one script."""

    awaited_correctly: bool
    used_correctly: bool
    diagnostics: tuple[Diagnostic, ...]

    @property
    def build_eligible(self) -> bool:
        """Only usage errors block compilation; await findings are advisory."""
        return self.used_correctly

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if item.severity is Severity.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if item.severity is Severity.WARNING)
