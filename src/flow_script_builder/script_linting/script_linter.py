"""Host call contract linter.

Walks every call expression of a script and checks the calls made against the
host capability object: each must be awaited (or continued with ``.then`` /
``.catch``), actions may not mutate sync state, deprecated calls are flagged,
and calls that name a model must name one the manifest returns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import assert_never

from tree_sitter import Node

from flow_script_builder.manifest_normalization.manifest_models import FlowType

from .host_calls import (
    DEPRECATED_CALLS,
    DISALLOWED_IN_ACTION,
    HOST_OBJECT_IDENTIFIER,
    MODEL_REFERENCING_CALLS,
    HostCall,
)
from .lint_outcomes import Diagnostic, DiagnosticCode, Severity, ValidationResult
from .syntax_tree import (
    NodeKind,
    call_arguments,
    line_number,
    node_kind,
    node_text,
    parse_module,
    string_literal_value,
)

LOGGER = logging.getLogger(__name__)

_CONTINUATIONS = frozenset({"then", "catch"})


@dataclass(frozen=True)
class _Scope:
    """What the enclosing expressions say about a call."""

    awaited: bool = False
    continued: bool = False


@dataclass(frozen=True)
class _HostCallSite:
    call: HostCall
    node: Node
    scope: _Scope

    @property
    def line(self) -> int:
        return line_number(self.node)


def lint_script_file(
    script_path: Path | str,
    flow_type: FlowType | str,
    known_model_names: Sequence[str],
) -> ValidationResult:
    """Lint a script file; the path is used as the diagnostic label."""
    path = Path(script_path)
    return lint_script(
        path.read_text(encoding="utf-8"),
        flow_type,
        known_model_names,
        file_label=str(path),
    )


def lint_script(
    source: str,
    flow_type: FlowType | str,
    known_model_names: Sequence[str],
    *,
    file_label: str = "<script>",
) -> ValidationResult:
    """Check host call usage in ``source`` for a script of ``flow_type``."""
    root = parse_module(source, file_label=file_label)
    is_action = flow_type == FlowType.ACTION

    diagnostics: list[Diagnostic] = []
    for site in _host_call_sites(root):
        for diagnostic in _check_site(site, is_action, known_model_names, file_label):
            _report(diagnostic)
            diagnostics.append(diagnostic)

    return ValidationResult(
        awaited_correctly=not any(
            item.code is DiagnosticCode.MISSING_AWAIT for item in diagnostics
        ),
        used_correctly=not any(item.severity is Severity.ERROR for item in diagnostics),
        diagnostics=tuple(diagnostics),
    )


def _host_call_sites(root: Node) -> Iterator[_HostCallSite]:
    stack: list[tuple[Node, _Scope]] = [(root, _Scope())]
    while stack:
        node, scope = stack.pop()
        kind = node_kind(node)
        if kind is NodeKind.CALL:
            host_call = _host_call_of(node)
            if host_call is not None:
                yield _HostCallSite(call=host_call, node=node, scope=scope)
        child_scope = _child_scope(kind, node, scope)
        stack.extend((child, child_scope) for child in reversed(node.named_children))


def _child_scope(kind: NodeKind, node: Node, scope: _Scope) -> _Scope:
    if kind is NodeKind.AWAIT:
        return replace(scope, awaited=True)
    if kind is NodeKind.MEMBER:
        if _member_property(node) in _CONTINUATIONS:
            return replace(scope, continued=True)
        return scope
    if kind is NodeKind.CALL or kind is NodeKind.IDENTIFIER or kind is NodeKind.STRING:
        return scope
    if kind is NodeKind.OTHER:
        return scope
    assert_never(kind)


def _host_call_of(call: Node) -> HostCall | None:
    callee = call.child_by_field_name("function")
    if callee is None or node_kind(callee) is not NodeKind.MEMBER:
        return None
    receiver = callee.child_by_field_name("object")
    if receiver is None or node_kind(receiver) is not NodeKind.IDENTIFIER:
        return None
    if node_text(receiver) != HOST_OBJECT_IDENTIFIER:
        return None
    member = _member_property(callee)
    return HostCall.from_member(member) if member else None


def _member_property(member: Node) -> str | None:
    prop = member.child_by_field_name("property")
    if prop is None or prop.type != "property_identifier":
        return None
    return node_text(prop)


def _check_site(
    site: _HostCallSite,
    is_action: bool,
    known_model_names: Sequence[str],
    file_label: str,
) -> list[Diagnostic]:
    findings: list[Diagnostic] = []
    name = site.call.value

    replacement = DEPRECATED_CALLS.get(site.call)
    if replacement is not None:
        findings.append(
            Diagnostic(
                code=DiagnosticCode.DEPRECATED_CALL,
                severity=Severity.WARNING,
                call=name,
                line=site.line,
                message=(
                    f"{HOST_OBJECT_IDENTIFIER}.{name}() used at line {site.line} is deprecated. "
                    f"Use {HOST_OBJECT_IDENTIFIER}.{replacement.value}() instead."
                ),
            )
        )

    if is_action and site.call in DISALLOWED_IN_ACTION:
        findings.append(
            Diagnostic(
                code=DiagnosticCode.DISALLOWED_IN_ACTION,
                severity=Severity.ERROR,
                call=name,
                line=site.line,
                message=(
                    f"{HOST_OBJECT_IDENTIFIER}.{name}() calls are not allowed in an action "
                    f'script. Please remove it at "{file_label}:{site.line}".'
                ),
            )
        )

    if not site.scope.awaited and not site.scope.continued:
        findings.append(
            Diagnostic(
                code=DiagnosticCode.MISSING_AWAIT,
                severity=Severity.WARNING,
                call=name,
                line=site.line,
                message=(
                    f'{HOST_OBJECT_IDENTIFIER}.{name}() calls must be awaited in "{file_label}:'
                    f'{site.line}". Not awaiting can lead to unexpected results.'
                ),
            )
        )

    if site.call in MODEL_REFERENCING_CALLS:
        model_finding = _check_model_reference(site, known_model_names, file_label)
        if model_finding is not None:
            findings.append(model_finding)

    return findings


def _check_model_reference(
    site: _HostCallSite, known_model_names: Sequence[str], file_label: str
) -> Diagnostic | None:
    arguments = call_arguments(site.node)
    name = site.call.value
    model_name = string_literal_value(arguments[-1]) if arguments else None
    if model_name is None:
        return Diagnostic(
            code=DiagnosticCode.UNVERIFIED_MODEL_REFERENCE,
            severity=Severity.WARNING,
            call=name,
            line=site.line,
            message=(
                f"{HOST_OBJECT_IDENTIFIER}.{name}() at \"{file_label}:{site.line}\" does not pass "
                "the model name as a string literal, so it cannot be checked."
            ),
        )
    if model_name in known_model_names:
        return None
    return Diagnostic(
        code=DiagnosticCode.INVALID_MODEL_REFERENCE,
        severity=Severity.ERROR,
        call=name,
        line=site.line,
        message=(
            f'"{model_name}" is not a valid model name. Please check "{file_label}:{site.line}". '
            f"The possible model names are: {', '.join(known_model_names)}"
        ),
    )


def _report(diagnostic: Diagnostic) -> None:
    if diagnostic.severity is Severity.ERROR:
        LOGGER.error("%s", diagnostic.message)
    else:
        LOGGER.warning("%s", diagnostic.message)
