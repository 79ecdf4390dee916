"""Prints pass trees back to JavaScript source.

Structured nodes are printed with two-space indentation; ``Raw`` nodes
reproduce their original text around their (possibly rewritten) children.
Blank lines between statements are kept when both statements carry a
source location.
"""

from __future__ import annotations

import logging
from typing import Any

from intlpass.tree import Node, is_node

logger = logging.getLogger(__name__)

INDENT = "  "
MAX_INLINE_WIDTH = 80

_JS_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\0": "\\0",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def quote_js(value: str, quote: str = "'") -> str:
    """Render value as a JavaScript string literal."""
    out = []
    for char in value:
        if char == quote:
            out.append("\\" + char)
        else:
            out.append(_JS_ESCAPES.get(char, char))
    return quote + "".join(out) + quote


def _template_chunk(value: str) -> str:
    return value.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def _has_comments(node: Node) -> bool:
    return bool(node.get("leadingComments") or node.get("trailingComments"))


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


class CodeGenerator:
    """Turns a Node tree into source text."""

    def __init__(self, indent: str = INDENT) -> None:
        self.indent_unit = indent
        self.level = 0
        self.base = ""

    def generate(self, node: Node) -> str:
        printer = getattr(self, f"_print_{node.type}", None)
        if printer is None:
            raise ValueError(f"Cannot print node type {node.type}")
        return printer(node)

    def _opt(self, node: Node | None) -> str:
        return self.generate(node) if node is not None else ""

    @property
    def _pad(self) -> str:
        return self.base + self.indent_unit * self.level

    def _statements(self, statements: list[Node], suffix: Any = None) -> list[str]:
        """Print statements one per line at the current level."""
        lines: list[str] = []
        # Inserted statements have no location and stick to the one before.
        last_end: int | None = None
        for stmt in statements:
            loc = stmt.loc
            if loc is not None and last_end is not None and loc.line > last_end + 1:
                lines.append("")
            text = self.generate(stmt)
            if suffix is not None:
                text += suffix(stmt)
            lines.append(self._pad + text)
            if loc is not None:
                last_end = loc.end_line if loc.end_line is not None else loc.line
        return lines

    def _block(self, statements: list[Node], suffix: Any = None) -> str:
        if not statements:
            return "{}"
        self.level += 1
        try:
            lines = self._statements(statements, suffix)
        finally:
            self.level -= 1
        return "{\n" + "\n".join(lines) + "\n" + self._pad + "}"

    def _sequence(
        self,
        open_: str,
        items: list[Node],
        close: str,
        pad_inline: bool,
        comments: list[str] | None = None,
    ) -> str:
        if comments or any(_has_comments(item) for item in items):
            return self._commented_sequence(open_, items, close, comments or [])
        if not items:
            return open_ + close
        self.level += 1
        try:
            parts = [self.generate(item) for item in items]
            inner_pad = self._pad
        finally:
            self.level -= 1
        inline = ", ".join(parts)
        space = " " if pad_inline else ""
        if "\n" not in inline and len(inline) + self.level * len(self.indent_unit) <= MAX_INLINE_WIDTH:
            return f"{open_}{space}{inline}{space}{close}"
        body = ",\n".join(inner_pad + p for p in parts)
        return f"{open_}\n{body}\n{self._pad}{close}"

    def _commented_sequence(
        self, open_: str, items: list[Node], close: str, comments: list[str]
    ) -> str:
        """One entry per line, comments on their own line or after the comma."""
        lines: list[str] = []
        self.level += 1
        try:
            inner_pad = self._pad
            for i, item in enumerate(items):
                lines.extend(inner_pad + c for c in item.get("leadingComments") or [])
                text = inner_pad + self.generate(item)
                if i < len(items) - 1:
                    text += ","
                for comment in item.get("trailingComments") or []:
                    text += " " + comment
                lines.append(text)
            lines.extend(inner_pad + c for c in comments)
        finally:
            self.level -= 1
        return open_ + "\n" + "\n".join(lines) + "\n" + self._pad + close

    def _arguments(self, items: list[Node], comments: list[str] | None) -> str:
        if comments or any(_has_comments(item) for item in items):
            return self._sequence("(", items, ")", pad_inline=False, comments=comments)
        return "(" + ", ".join(self.generate(item) for item in items) + ")"

    # === Program and statements ===

    def _print_Program(self, node: Node) -> str:
        lines = self._statements(node.body)
        return "\n".join(lines) + "\n" if lines else ""

    def _print_BlockStatement(self, node: Node) -> str:
        return self._block(node.body)

    def _print_ExpressionStatement(self, node: Node) -> str:
        return self.generate(node.expression) + ";"

    def _print_ReturnStatement(self, node: Node) -> str:
        argument = node.get("argument")
        if argument is None:
            return "return;"
        return f"return {self.generate(argument)};"

    def _print_ImportDeclaration(self, node: Node) -> str:
        if node.get("text") is not None:
            return node.text
        source = quote_js(node.source.value)
        if not node.specifiers:
            return f"import {source};"
        default: list[str] = []
        named: list[str] = []
        for spec in node.specifiers:
            if spec.type == "ImportDefaultSpecifier":
                default.append(spec.local.name)
            elif spec.type == "ImportNamespaceSpecifier":
                default.append(f"* as {spec.local.name}")
            else:
                imported = self.generate(spec.imported)
                local = spec.local.name
                named.append(imported if imported == local else f"{imported} as {local}")
        clause = default[:]
        if named:
            clause.append("{ " + ", ".join(named) + " }")
        return f"import {', '.join(clause)} from {source};"

    def _print_ImportDefaultSpecifier(self, node: Node) -> str:
        return node.local.name

    def _print_ExportNamedDeclaration(self, node: Node) -> str:
        return "export " + self.generate(node.declaration)

    def _print_ExportDefaultDeclaration(self, node: Node) -> str:
        declaration = node.declaration
        text = self.generate(declaration)
        if is_node(
            declaration, "ClassDeclaration", "ClassExpression", "FunctionDeclaration", "FunctionExpression"
        ):
            return "export default " + text
        return f"export default {text};"

    def _print_VariableDeclaration(self, node: Node) -> str:
        declarators = ", ".join(self.generate(d) for d in node.declarations)
        return f"{node.kind} {declarators};"

    def _print_VariableDeclarator(self, node: Node) -> str:
        init = node.get("init")
        if init is None:
            return self.generate(node.id)
        return f"{self.generate(node.id)} = {self.generate(init)}"

    def _print_ClassDeclaration(self, node: Node) -> str:
        text = "class"
        if node.get("id") is not None:
            text += " " + self.generate(node.id)
        if node.get("superClass") is not None:
            text += " extends " + self.generate(node.superClass)
        return text + " " + self.generate(node.body)

    def _print_ClassExpression(self, node: Node) -> str:
        return self._print_ClassDeclaration(node)

    def _print_ClassBody(self, node: Node) -> str:
        def suffix(member: Node) -> str:
            if member.type == "Raw" and member.kind == "field_definition":
                return ";"
            return ""

        return self._block(node.body, suffix)

    def _function(self, node: Node) -> str:
        text = "async " if node.get("async") else ""
        text += "function*" if node.get("generator") else "function"
        if node.get("id") is not None:
            text += " " + self.generate(node.id)
        params = self._arguments(node.params, node.get("paramComments"))
        return f"{text}{params} {self.generate(node.body)}"

    def _print_FunctionDeclaration(self, node: Node) -> str:
        return self._function(node)

    def _print_FunctionExpression(self, node: Node) -> str:
        return self._function(node)

    def _print_ArrowFunctionExpression(self, node: Node) -> str:
        prefix = "async " if node.get("async") else ""
        params = self._arguments(node.params, node.get("paramComments"))
        body = self.generate(node.body)
        if is_node(node.body, "ObjectExpression"):
            body = f"({body})"
        return f"{prefix}{params} => {body}"

    # === Expressions ===

    def _print_Identifier(self, node: Node) -> str:
        return node.name

    def _print_ThisExpression(self, node: Node) -> str:
        return "this"

    def _print_NullLiteral(self, node: Node) -> str:
        return "null"

    def _print_BooleanLiteral(self, node: Node) -> str:
        return "true" if node.value else "false"

    def _print_NumericLiteral(self, node: Node) -> str:
        raw = node.get("raw")
        return raw if raw is not None else _format_number(node.value)

    def _print_StringLiteral(self, node: Node) -> str:
        return quote_js(node.value)

    def _print_TemplateLiteral(self, node: Node) -> str:
        quasis = node.get("raw_quasis") or [_template_chunk(q) for q in node.quasis]
        out = [quasis[0]]
        for expression, quasi in zip(node.expressions, quasis[1:]):
            out.append("${" + self.generate(expression) + "}")
            out.append(quasi)
        return "`" + "".join(out) + "`"

    def _print_BinaryExpression(self, node: Node) -> str:
        return f"{self.generate(node.left)} {node.operator} {self.generate(node.right)}"

    def _print_UnaryExpression(self, node: Node) -> str:
        operator = node.operator
        space = " " if operator.isalpha() else ""
        return f"{operator}{space}{self.generate(node.argument)}"

    def _print_ParenthesizedExpression(self, node: Node) -> str:
        return f"({self.generate(node.expression)})"

    def _print_CallExpression(self, node: Node) -> str:
        args = self._arguments(node.arguments, node.get("argumentComments"))
        return self.generate(node.callee) + args

    def _print_MemberExpression(self, node: Node) -> str:
        obj = self.generate(node.object)
        if node.get("computed"):
            return f"{obj}[{self.generate(node.property)}]"
        return f"{obj}.{self.generate(node.property)}"

    def _print_ObjectExpression(self, node: Node) -> str:
        return self._sequence("{", node.properties, "}", pad_inline=True, comments=node.get("comments"))

    def _print_ObjectProperty(self, node: Node) -> str:
        key = self.generate(node.key)
        if node.get("shorthand"):
            return key
        if node.get("computed"):
            key = f"[{key}]"
        return f"{key}: {self.generate(node.value)}"

    def _print_ArrayExpression(self, node: Node) -> str:
        return self._sequence("[", node.elements, "]", pad_inline=False, comments=node.get("comments"))

    def _print_SpreadElement(self, node: Node) -> str:
        return "..." + self.generate(node.argument)

    def _print_Raw(self, node: Node) -> str:
        out: list[str] = []
        line_indent: str | None = None
        for part in node.parts:
            if isinstance(part, str):
                out.append(part)
                if "\n" in part:
                    tail = part.rsplit("\n", 1)[1]
                    line_indent = tail[: len(tail) - len(tail.lstrip(" \t"))]
                continue
            if line_indent is None:
                out.append(self.generate(part))
                continue
            # Children on a line of their own nest relative to that line's indent
            saved = self.base, self.level
            self.base, self.level = line_indent, 0
            try:
                out.append(self.generate(part))
            finally:
                self.base, self.level = saved
        return "".join(out)

    # === JSX ===

    def _print_JSXElement(self, node: Node) -> str:
        text = self.generate(node.openingElement)
        if node.openingElement.get("selfClosing"):
            return text
        text += "".join(self.generate(c) for c in node.children)
        closing = node.get("closingElement")
        if closing is not None:
            text += self.generate(closing)
        return text

    def _print_JSXOpeningElement(self, node: Node) -> str:
        name = self._opt(node.get("name"))
        attributes = "".join(" " + self.generate(a) for a in node.attributes)
        end = " />" if node.get("selfClosing") else ">"
        return f"<{name}{attributes}{end}"

    def _print_JSXClosingElement(self, node: Node) -> str:
        return f"</{self._opt(node.get('name'))}>"

    def _print_JSXIdentifier(self, node: Node) -> str:
        return node.name

    def _print_JSXMemberExpression(self, node: Node) -> str:
        return f"{self.generate(node.object)}.{self.generate(node.property)}"

    def _print_JSXAttribute(self, node: Node) -> str:
        name = self.generate(node.name)
        value = node.get("value")
        if value is None:
            return name
        if is_node(value, "StringLiteral"):
            text = value.value
            if '"' not in text:
                return f'{name}="{text}"'
            if "'" not in text:
                return f"{name}='{text}'"
            return f"{name}={{{quote_js(text)}}}"
        return f"{name}={self.generate(value)}"

    def _print_JSXSpreadAttribute(self, node: Node) -> str:
        return "{..." + self.generate(node.argument) + "}"

    def _print_JSXExpressionContainer(self, node: Node) -> str:
        return "{" + self.generate(node.expression) + "}"

    def _print_JSXEmptyExpression(self, node: Node) -> str:
        return ""

    def _print_JSXText(self, node: Node) -> str:
        return node.value


def generate(node: Node) -> str:
    """Print a tree with the default settings."""
    return CodeGenerator().generate(node)
