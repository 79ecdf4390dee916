"""Component detection and injectIntl wrapping of exported components.

Detection is a heuristic over declaration shape, not a type analysis:

- class components are named classes extending ``Component`` (or one of the
  configured base names), directly or as ``React.Component``;
- function components are single ``const Name = (...) => { ...; return <jsx/> }``
  declarations with an uppercase initial. Only the final statement is
  inspected, so early returns and expression-bodied arrows are missed.
"""

from __future__ import annotations

import logging

from intlpass import builders as t
from intlpass.config import PassOptions
from intlpass.models import ComponentKind, ComponentRecord
from intlpass.session import TraversalSession
from intlpass.tree import Node, NodePath, is_node

logger = logging.getLogger(__name__)

_FUNCTION_INITS = ("ArrowFunctionExpression", "FunctionExpression")


def _unwrap_parens(node: Node | None) -> Node | None:
    while is_node(node, "ParenthesizedExpression"):
        node = node.expression
    return node


def extends_component(super_class: Node | None, base_names: tuple[str, ...]) -> bool:
    """Shallow check that a superclass reference names a UI component base."""
    if is_node(super_class, "Identifier"):
        return super_class.name in base_names
    if is_node(super_class, "MemberExpression") and not super_class.get("computed"):
        obj, prop = super_class.object, super_class.property
        return (
            is_node(obj, "Identifier")
            and obj.name == "React"
            and is_node(prop, "Identifier")
            and prop.name in base_names
        )
    return False


def returns_markup(function: Node) -> bool:
    """True when a function body is a block whose last statement returns JSX."""
    body = function.get("body")
    if not is_node(body, "BlockStatement") or not body.body:
        return False
    last = body.body[-1]
    if not is_node(last, "ReturnStatement"):
        return False
    return is_node(_unwrap_parens(last.get("argument")), "JSXElement")


def declaration_kind(export: Node) -> ComponentKind | None:
    """Component kind implied by the declaration shape alone."""
    declaration = export.get("declaration")
    if is_node(declaration, "ClassDeclaration"):
        return ComponentKind.CLASS_COMPONENT
    if is_node(declaration, "VariableDeclaration"):
        return ComponentKind.FUNCTION_COMPONENT
    return None


def classify_export(export: Node, options: PassOptions) -> ComponentRecord:
    """Classify an ``export`` declaration as a class, function or no component."""
    declaration = export.get("declaration")
    prefix = options.internal_prefix

    if is_node(declaration, "ClassDeclaration"):
        class_id = declaration.get("id")
        if class_id is None:
            return ComponentRecord(None, ComponentKind.NOT_A_COMPONENT)
        name = class_id.name
        if name.startswith(prefix) or not extends_component(
            declaration.get("superClass"), options.component_base_names
        ):
            return ComponentRecord(name, ComponentKind.NOT_A_COMPONENT)
        return ComponentRecord(name, ComponentKind.CLASS_COMPONENT)

    if is_node(declaration, "VariableDeclaration"):
        declarators = declaration.declarations
        if len(declarators) != 1 or not is_node(declarators[0].id, "Identifier"):
            return ComponentRecord(None, ComponentKind.NOT_A_COMPONENT)
        name = declarators[0].id.name
        init = declarators[0].get("init")
        if (
            not name[:1].isupper()
            or not is_node(init, *_FUNCTION_INITS)
            or not returns_markup(init)
        ):
            return ComponentRecord(name, ComponentKind.NOT_A_COMPONENT)
        return ComponentRecord(name, ComponentKind.FUNCTION_COMPONENT)

    return ComponentRecord(None, ComponentKind.NOT_A_COMPONENT)


def has_wrapper_import(program: Node, options: PassOptions) -> bool:
    """Check whether the file already imports the wrapping function."""
    for stmt in program.body:
        if not is_node(stmt, "ImportDeclaration") or stmt.source.value != options.wrapper_source_name:
            continue
        for spec in stmt.specifiers:
            if spec.type == "ImportSpecifier" and spec.local.name == options.wrapper_name:
                return True
    return False


def _binding_identifier(export: Node) -> Node:
    declaration = export.declaration
    if declaration.type == "ClassDeclaration":
        return declaration.id
    return declaration.declarations[0].id


class WrapperInjector:
    """Renames an exported component and re-exports it wrapped."""

    def __init__(self, options: PassOptions) -> None:
        self.options = options

    def visit(self, path: NodePath, session: TraversalSession) -> ComponentRecord:
        record = classify_export(path.node, self.options)
        if record.is_component:
            self.inject(path, record, session)
        return record

    def inject(self, path: NodePath, record: ComponentRecord, session: TraversalSession) -> None:
        name = record.declared_name
        if session.is_converted(name):
            return
        if name == self.options.excluded_component_name:
            logger.info("Skipped %s: base component wrapping is not supported", name)
            return

        wrapper = self.options.wrapper_name
        internal_name = self.options.internal_prefix + name
        _binding_identifier(path.node).name = internal_name

        if not session.wrapper_imported:
            path.insert_before(
                t.import_declaration(
                    [t.import_specifier(t.identifier(wrapper), t.identifier(wrapper))],
                    t.string_literal(self.options.wrapper_source_name),
                )
            )
            session.wrapper_imported = True

        path.insert_after(
            t.export_named_declaration(
                t.variable_declaration(
                    "const",
                    [
                        t.variable_declarator(
                            t.identifier(name),
                            t.call_expression(t.identifier(wrapper), [t.identifier(internal_name)]),
                        )
                    ],
                )
            )
        )
        session.mark_converted(record, name, internal_name)
        logger.debug("Injected %s into %s (%s)", wrapper, name, record.kind.value)
