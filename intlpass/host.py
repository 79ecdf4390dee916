"""Capabilities the pass borrows from its host pipeline.

The pass never resolves scopes or evaluates expressions itself; it goes
through the interfaces below. ``ModuleBindingResolver`` and
``ConfidentEvaluator`` are the reference implementations used by the CLI.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from intlpass.models import Binding, Evaluation, ImportBinding
from intlpass.tree import Node, NodePath, is_node

logger = logging.getLogger(__name__)

_FUNCTION_TYPES = (
    "ArrowFunctionExpression",
    "FunctionExpression",
    "FunctionDeclaration",
)


class BindingResolver(ABC):
    """Resolves an identifier reference to its declaration."""

    @abstractmethod
    def get_binding(self, path: NodePath) -> Binding | None:
        """
        Find the binding an identifier path refers to.

        Args:
            path: Path of an ``Identifier`` or ``JSXIdentifier`` node.

        Returns:
            The binding, or None when the name is not declared in the file.
        """


class StaticEvaluator(ABC):
    """Evaluates expressions whose value is known at compile time."""

    @abstractmethod
    def evaluate(self, target: NodePath | Node) -> Evaluation:
        """
        Evaluate an expression.

        Returns:
            ``Evaluation(confident=True, value=...)`` when the value is known,
            ``Evaluation(confident=False)`` otherwise.
        """


@dataclass
class FileContext:
    """Identity and result slots for the file being transformed."""

    filename: str
    basename: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.basename:
            self.basename = Path(self.filename).stem

    def warn(self, message: str) -> None:
        """Report a non-fatal diagnostic for this file."""
        self.warnings.append(message)
        logger.warning("%s: %s", self.filename, message)


def _pattern_names(pattern: Any) -> set[str]:  # type: ignore
    """Names bound by a parameter or declarator pattern."""
    if is_node(pattern, "Identifier"):
        return {pattern.name}
    if is_node(pattern, "AssignmentPattern"):
        return _pattern_names(pattern.left)
    if is_node(pattern, "RestElement"):
        return _pattern_names(pattern.argument)
    if is_node(pattern, "ObjectPattern"):
        names: set[str] = set()
        for prop in pattern.properties:
            names |= _pattern_names(prop.value if is_node(prop, "ObjectProperty") else prop)
        return names
    if is_node(pattern, "ArrayPattern"):
        names = set()
        for element in pattern.elements:
            names |= _pattern_names(element)
        return names
    if not is_node(pattern, "Raw"):
        return set()

    # Destructuring kept as source text by the front end
    children = [p for p in pattern.parts if is_node(p)]
    kind = pattern.kind
    if kind == "shorthand_property_identifier_pattern":
        return {"".join(p for p in pattern.parts if isinstance(p, str)).strip()}
    if kind == "pair_pattern":
        return _pattern_names(children[-1]) if children else set()
    if kind in ("assignment_pattern", "object_assignment_pattern"):
        return _pattern_names(children[0]) if children else set()
    if kind in ("object_pattern", "array_pattern", "rest_pattern"):
        names = set()
        for child in children:
            names |= _pattern_names(child)
        return names
    return set()


def _param_names(params: list[Any]) -> set[str]:
    names: set[str] = set()
    for param in params:
        names |= _pattern_names(param)
    return names


def _declared_in(statements: list[Any], name: str) -> tuple[str, Node] | None:
    for stmt in statements:
        decl = stmt
        if is_node(stmt, "ExportNamedDeclaration"):
            decl = stmt.get("declaration")
        if not is_node(decl, "VariableDeclaration"):
            continue
        for declarator in decl.declarations:
            if name in _pattern_names(declarator.id):
                return decl.kind, declarator
    return None


class ModuleBindingResolver(BindingResolver):
    """
    Binding lookup over a single module.

    Knows module-level imports and variable declarations. Function parameters
    and block-level declarations between the reference and the module scope
    shadow module bindings, destructured names included. Anything more
    elaborate (hoisting, catch clauses) is not modelled.
    """

    def __init__(self) -> None:
        self._root: Node | None = None
        self._imports: dict[str, ImportBinding] = {}

    def get_binding(self, path: NodePath) -> Binding | None:
        name = path.node.get("name")
        if not isinstance(name, str):
            return None

        for ancestor in path.ancestors():
            node = ancestor.node
            if node.type in _FUNCTION_TYPES and name in _param_names(node.get("params", [])):
                return Binding(name=name, kind="param", node=node)
            if node.type == "BlockStatement":
                found = _declared_in(node.body, name)
                if found is not None:
                    kind, declarator = found
                    return Binding(name=name, kind=kind, node=declarator)

        root = path.root().node
        if root.type != "Program":
            return None

        imports = self._module_imports(root)
        if name in imports:
            specifier, import_binding = imports[name]
            return Binding(name=name, kind="module", node=specifier, import_binding=import_binding)

        found = _declared_in(root.body, name)
        if found is not None:
            kind, declarator = found
            return Binding(name=name, kind=kind, node=declarator)
        return None

    def _module_imports(self, program: Node) -> dict[str, tuple[Node, ImportBinding]]:
        if self._root is program:
            return self._imports

        imports: dict[str, tuple[Node, ImportBinding]] = {}
        for stmt in program.body:
            if not is_node(stmt, "ImportDeclaration"):
                continue
            source = stmt.source.value
            for spec in stmt.specifiers:
                local = spec.local.name
                if spec.type == "ImportDefaultSpecifier":
                    imported = "default"
                elif spec.type == "ImportNamespaceSpecifier":
                    imported = "*"
                else:
                    imported_node = spec.imported
                    imported = imported_node.get("name") or imported_node.get("value")
                imports[local] = (spec, ImportBinding(local, source, imported))

        self._root = program
        self._imports = imports
        return imports


def _js_string(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ConfidentEvaluator(StaticEvaluator):
    """Evaluates literals and simple constant expressions."""

    def __init__(self, bindings: BindingResolver | None = None) -> None:
        self._bindings = bindings

    def evaluate(self, target: NodePath | Node) -> Evaluation:
        path = target if isinstance(target, NodePath) else NodePath(target)
        try:
            return Evaluation(True, self._eval(path, frozenset()))
        except _NotConfident:
            return Evaluation(False)

    def _eval(self, path: NodePath, seen: frozenset[str]) -> Any:
        node = path.node
        kind = node.type

        if kind in ("StringLiteral", "NumericLiteral", "BooleanLiteral"):
            return node.value
        if kind == "NullLiteral":
            return None
        if kind in ("ParenthesizedExpression", "JSXExpressionContainer"):
            return self._eval(path.get("expression"), seen)
        if kind == "TemplateLiteral":
            values = [self._eval(p, seen) for p in path.get("expressions")]
            parts = [node.quasis[0]]
            for value, quasi in zip(values, node.quasis[1:]):
                parts.append(_js_string(value))
                parts.append(quasi)
            return "".join(parts)
        if kind == "BinaryExpression":
            return self._binary(
                node.operator,
                self._eval(path.get("left"), seen),
                self._eval(path.get("right"), seen),
            )
        if kind == "UnaryExpression":
            value = self._eval(path.get("argument"), seen)
            if node.operator == "!":
                return not value
            if node.operator in ("-", "+") and _is_number(value):
                return -value if node.operator == "-" else value
            raise _NotConfident
        if kind == "ArrayExpression":
            return [self._eval(p, seen) for p in path.get("elements")]
        if kind == "ObjectExpression":
            return self._object(path, seen)
        if kind == "Identifier":
            return self._identifier(path, seen)
        raise _NotConfident

    def _binary(self, operator: str, left: Any, right: Any) -> Any:
        if operator == "+":
            if isinstance(left, str) or isinstance(right, str):
                return _js_string(left) + _js_string(right)
            if _is_number(left) and _is_number(right):
                return left + right
        elif operator in ("-", "*") and _is_number(left) and _is_number(right):
            return left - right if operator == "-" else left * right
        raise _NotConfident

    def _object(self, path: NodePath, seen: frozenset[str]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for prop in path.get("properties"):
            if not prop.is_("ObjectProperty") or prop.node.get("computed"):
                raise _NotConfident
            key = prop.node.key
            if key.type == "Identifier":
                name = key.name
            elif key.type in ("StringLiteral", "NumericLiteral"):
                name = _js_string(key.value)
            else:
                raise _NotConfident
            result[name] = self._eval(prop.get("value"), seen)
        return result

    def _identifier(self, path: NodePath, seen: frozenset[str]) -> Any:
        name = path.node.name
        if name == "undefined":
            return None
        if self._bindings is None or name in seen:
            raise _NotConfident
        binding = self._bindings.get_binding(path)
        if binding is None or binding.kind != "const" or binding.node is None:
            raise _NotConfident
        if not is_node(binding.node.get("id"), "Identifier"):
            raise _NotConfident  # destructured
        init = binding.node.get("init")
        if init is None:
            raise _NotConfident
        init_path = NodePath(init, NodePath(binding.node, path.root(), "declarations"), "init")
        return self._eval(init_path, seen | {name})


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class _NotConfident(Exception):
    """Internal signal: the expression has no static value."""
