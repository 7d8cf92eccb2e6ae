"""TypeScript syntax tree access for the linter."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

_TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())


class ScriptParseError(Exception):
    """Raised when a script's source cannot be parsed."""


class NodeKind(str, Enum):
    """Node kinds the linter distinguishes; everything else is OTHER."""

    CALL = "call_expression"
    MEMBER = "member_expression"
    AWAIT = "await_expression"
    IDENTIFIER = "identifier"
    STRING = "string"
    OTHER = "other"


_KINDS_BY_TYPE: Mapping[str, NodeKind] = MappingProxyType(
    {kind.value: kind for kind in NodeKind if kind is not NodeKind.OTHER}
)


def node_kind(node: Node) -> NodeKind:
    return _KINDS_BY_TYPE.get(node.type, NodeKind.OTHER)


def parse_module(source: str, *, file_label: str = "<script>") -> Node:
    """Parse TypeScript module source and return the root node."""
    parser = Parser(_TYPESCRIPT)
    tree = parser.parse(source.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        error_node = _first_error(root)
        line = error_node.start_point[0] + 1 if error_node is not None else 1
        raise ScriptParseError(f'Failed to parse "{file_label}": syntax error at line {line}.')
    return root


def node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def line_number(node: Node) -> int:
    return node.start_point[0] + 1


def string_literal_value(node: Node) -> str | None:
    """Value of a plain string literal, None for any other expression."""
    if node_kind(node) is not NodeKind.STRING:
        return None
    return node_text(node)[1:-1]


def call_arguments(call: Node) -> list[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type != "comment"]


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
