"""Node builders, mirroring the shape of Babel's ``types`` helpers."""

from __future__ import annotations

import re
from typing import Any

from intlpass.tree import Node

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


def identifier(name: str) -> Node:
    return Node("Identifier", name=name)


def jsx_identifier(name: str) -> Node:
    return Node("JSXIdentifier", name=name)


def string_literal(value: str) -> Node:
    return Node("StringLiteral", value=value)


def numeric_literal(value: int | float) -> Node:
    return Node("NumericLiteral", value=value)


def boolean_literal(value: bool) -> Node:
    return Node("BooleanLiteral", value=value)


def null_literal() -> Node:
    return Node("NullLiteral")


def this_expression() -> Node:
    return Node("ThisExpression")


def member_expression(obj: Node, prop: Node, computed: bool = False) -> Node:
    return Node("MemberExpression", object=obj, property=prop, computed=computed)


def call_expression(callee: Node, arguments: list[Node]) -> Node:
    return Node("CallExpression", callee=callee, arguments=list(arguments))


def object_property(key: Node, value: Node, computed: bool = False) -> Node:
    return Node("ObjectProperty", key=key, value=value, computed=computed, shorthand=False)


def object_expression(properties: list[Node] | None = None) -> Node:
    return Node("ObjectExpression", properties=list(properties or []))


def array_expression(elements: list[Node] | None = None) -> Node:
    return Node("ArrayExpression", elements=list(elements or []))


def jsx_attribute(name: Node, value: Node | None = None) -> Node:
    return Node("JSXAttribute", name=name, value=value)


def import_specifier(local: Node, imported: Node) -> Node:
    return Node("ImportSpecifier", local=local, imported=imported)


def import_declaration(specifiers: list[Node], source: Node) -> Node:
    return Node("ImportDeclaration", specifiers=list(specifiers), source=source)


def variable_declarator(id: Node, init: Node | None = None) -> Node:
    return Node("VariableDeclarator", id=id, init=init)


def variable_declaration(kind: str, declarations: list[Node]) -> Node:
    return Node("VariableDeclaration", kind=kind, declarations=list(declarations))


def export_named_declaration(
    declaration: Node | None,
    specifiers: list[Node] | None = None,
    source: Node | None = None,
) -> Node:
    return Node(
        "ExportNamedDeclaration",
        declaration=declaration,
        specifiers=list(specifiers or []),
        source=source,
    )


def property_key(name: str) -> Node:
    """Object key node: identifier when possible, string literal otherwise."""
    if is_valid_identifier(name):
        return identifier(name)
    return string_literal(name)


def value_to_node(value: Any) -> Node:
    """Build a literal node tree for a plain Python value."""
    if value is None:
        return null_literal()
    if isinstance(value, bool):
        return boolean_literal(value)
    if isinstance(value, (int, float)):
        return numeric_literal(value)
    if isinstance(value, str):
        return string_literal(value)
    if isinstance(value, (list, tuple)):
        return array_expression([value_to_node(v) for v in value])
    if isinstance(value, dict):
        return object_expression(
            [object_property(property_key(str(k)), value_to_node(v)) for k, v in value.items()]
        )
    raise TypeError(f"Cannot convert {type(value).__name__} to a node")
