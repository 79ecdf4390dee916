"""Tree construction helpers for tests that do not go through the parser."""

from __future__ import annotations

from intlpass import builders as t
from intlpass.models import SourceLocation
from intlpass.tree import Node, NodePath

TRANSLATE_SOURCE = "skybase-core/utils/translate"
REACT_INTL = "react-intl"


def named_import(source: str, *names: str) -> Node:
    """``import { a, b } from 'source'``."""
    return t.import_declaration(
        [t.import_specifier(t.identifier(n), t.identifier(n)) for n in names],
        t.string_literal(source),
    )


def program(*body: Node) -> Node:
    return Node("Program", body=list(body))


def expression_statement(expression: Node, line: int = 1) -> Node:
    return Node("ExpressionStatement", SourceLocation(line), expression=expression)


def call(name: str, *args: Node, line: int = 1) -> Node:
    return Node(
        "CallExpression",
        SourceLocation(line),
        callee=t.identifier(name),
        arguments=list(args),
    )


def descriptor_object(**values: str) -> Node:
    """Object literal ``{ id: '...', defaultMessage: '...' }``."""
    return t.object_expression(
        [t.object_property(t.identifier(k), t.string_literal(v)) for k, v in values.items()]
    )


def find_paths(root: Node, node_type: str) -> list[NodePath]:
    """All paths of a node type, depth first."""
    found: list[NodePath] = []

    def walk(path: NodePath) -> None:
        if path.node.type == node_type:
            found.append(path)
        for key, value in path.node.child_slots():
            if isinstance(value, Node):
                walk(NodePath(value, path, key))
            else:
                for i, item in enumerate(value):
                    if isinstance(item, Node):
                        walk(NodePath(item, path, key, i))

    walk(NodePath(root))
    return found
