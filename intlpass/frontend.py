"""JavaScript/JSX front end using tree-sitter.

Converts tree-sitter syntax trees into ``intlpass.tree.Node`` trees. The
constructs the pass looks at (imports, exports, classes, arrow functions,
calls, objects, JSX...) get structured Babel-style nodes. Everything else
becomes a ``Raw`` node that keeps its source text around its children, so
rewrites below an unsupported construct still reach the printed output.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import tree_sitter_javascript as ts_js
from tree_sitter import Language, Parser

from intlpass.models import SourceLocation, SourceParseError
from intlpass.tree import Node

logger = logging.getLogger(__name__)

FILE_EXTENSIONS = (".js", ".jsx", ".mjs")

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\n": "",
    "\r\n": "",
}


def unescape_js(text: str) -> str:
    """Decode the escape sequences of a JavaScript string literal body."""

    def replace(match: re.Match[str]) -> str:
        seq = match.group(1)
        if seq in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[seq]
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] in "ux" and len(seq) > 1:
            return chr(int(seq[1:], 16))
        return seq

    decoded = _ESCAPE_RE.sub(replace, text)
    # \uD83D\uDE00 style pairs decode to one code point
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16")


class JavaScriptFrontend:
    """
    Parses JavaScript/JSX source into pass trees.

    tree-sitter is error tolerant; a tree with error nodes is rejected
    rather than transformed.
    """

    def __init__(self) -> None:
        self._parser = Parser(Language(ts_js.language()))

    def get_file_extensions(self) -> list[str]:
        return list(FILE_EXTENSIONS)

    def parse(self, source: str, filename: str = "<source>") -> Node:
        """Parse source text into a Program node."""
        data = source.encode("utf-8")
        tree = self._parser.parse(data)
        root = tree.root_node
        if root.has_error:
            error = _first_error(root)
            loc = _loc(error) if error is not None else None
            raise SourceParseError("Unable to parse source", loc, filename)
        return _Converter(data).convert(root)


def _first_error(node: Any) -> Any:  # type: ignore
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _loc(node: Any) -> SourceLocation:  # type: ignore
    return SourceLocation(
        line=node.start_point[0] + 1,
        column=node.start_point[1],
        end_line=node.end_point[0] + 1,
        end_column=node.end_point[1],
    )


def _named(node: Any) -> list[Any]:  # type: ignore
    """Named children without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def _has_comment(node: Any) -> bool:  # type: ignore
    return any(c.type == "comment" for c in node.named_children)


_COMMENT_AWARE = frozenset(
    ("program", "statement_block", "object", "array", "import_statement", "jsx_expression")
)


class _Converter:
    """Maps tree-sitter nodes to pass nodes."""

    def __init__(self, source: bytes) -> None:
        self.source = source

    def _get_text(self, node: Any) -> str:  # type: ignore
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def _slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8")

    def _node(self, type: str, ts_node: Any, **fields: Any) -> Node:  # type: ignore
        return Node(type, _loc(ts_node), **fields)

    def convert(self, node: Any) -> Node:  # type: ignore
        converter = getattr(self, f"_convert_{node.type}", None)
        # Only these converters place comments themselves
        if node.type not in _COMMENT_AWARE and _has_comment(node):
            converter = None
        if converter is not None:
            result = converter(node)
            if result is not None:
                return result
        return self._raw(node)

    def _opt(self, node: Any) -> Node | None:  # type: ignore
        return self.convert(node) if node is not None else None

    def _raw(self, node: Any) -> Node:  # type: ignore
        """Source text with named children converted in place."""
        parts: list[Any] = []
        cursor = node.start_byte
        for child in node.children:
            if not child.is_named:
                continue
            if child.start_byte > cursor:
                parts.append(self._slice(cursor, child.start_byte))
            parts.append(self.convert(child))
            cursor = child.end_byte
        if node.end_byte > cursor:
            parts.append(self._slice(cursor, node.end_byte))
        return self._node("Raw", node, kind=node.type, parts=parts)

    def _items(self, children: list[Any], convert: Any = None) -> tuple[list[Node], list[str]]:  # type: ignore
        """
        Convert the entries of a comma separated sequence.

        Comments are attached to the entries around them: a comment starting
        on the row where the previous entry ends trails that entry, any
        other comment leads the next one. Comments after the last entry are
        returned separately.
        """
        convert = convert or self.convert
        items: list[Node] = []
        pending: list[str] = []
        last_row = -1
        for child in children:
            if child.type == "comment":
                text = self._get_text(child)
                if items and not pending and child.start_point[0] == last_row:
                    items[-1].fields.setdefault("trailingComments", []).append(text)
                else:
                    pending.append(text)
                continue
            item = convert(child)
            if pending:
                item.leadingComments = pending
                pending = []
            items.append(item)
            last_row = child.end_point[0]
        return items, pending

    # === Program and statements ===

    def _convert_program(self, node: Any) -> Node:  # type: ignore
        return self._node("Program", node, body=[self.convert(c) for c in node.named_children])

    def _convert_statement_block(self, node: Any) -> Node:  # type: ignore
        return self._node(
            "BlockStatement", node, body=[self.convert(c) for c in node.named_children]
        )

    def _convert_expression_statement(self, node: Any) -> Node | None:  # type: ignore
        named = _named(node)
        if len(named) != 1:
            return None
        return self._node("ExpressionStatement", node, expression=self.convert(named[0]))

    def _convert_return_statement(self, node: Any) -> Node:  # type: ignore
        named = _named(node)
        argument = self.convert(named[0]) if named else None
        return self._node("ReturnStatement", node, argument=argument)

    # === Imports and exports ===

    def _convert_import_statement(self, node: Any) -> Node | None:  # type: ignore
        if any(c.type == "import_attribute" for c in node.children):
            return None
        source = node.child_by_field_name("source")
        if source is None:
            return None

        specifiers: list[Node] = []
        for child in node.named_children:
            if child.type != "import_clause":
                continue
            for part in child.named_children:
                if part.type == "identifier":
                    specifiers.append(
                        self._node("ImportDefaultSpecifier", part, local=self.convert(part))
                    )
                elif part.type == "namespace_import":
                    ident = _named(part)[-1]
                    specifiers.append(
                        self._node("ImportNamespaceSpecifier", part, local=self.convert(ident))
                    )
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type != "import_specifier":
                            continue
                        name = spec.child_by_field_name("name")
                        alias = spec.child_by_field_name("alias")
                        imported = self.convert(name)
                        local = self.convert(alias) if alias is not None else self.convert(name)
                        if local.type != "Identifier":
                            return None
                        specifiers.append(
                            self._node("ImportSpecifier", spec, local=local, imported=imported)
                        )

        declaration = self._node(
            "ImportDeclaration", node, specifiers=specifiers, source=self.convert(source)
        )
        clauses = [c for c in node.named_children if c.type == "import_clause"]
        if _has_comment(node) or any(
            _has_comment(c) or any(_has_comment(p) for p in c.named_children) for c in clauses
        ):
            # Imports are never rewritten; keep the commented text as written
            declaration.text = self._get_text(node)
        return declaration

    def _convert_export_statement(self, node: Any) -> Node | None:  # type: ignore
        if any(c.type == "decorator" for c in node.children):
            return None
        declaration = node.child_by_field_name("declaration")
        if any(c.type == "default" for c in node.children):
            target = declaration or node.child_by_field_name("value")
            if target is None:
                return None
            return self._node("ExportDefaultDeclaration", node, declaration=self.convert(target))
        if declaration is not None and node.child_by_field_name("source") is None:
            return self._node(
                "ExportNamedDeclaration",
                node,
                declaration=self.convert(declaration),
                specifiers=[],
                source=None,
            )
        return None

    # === Declarations ===

    def _convert_lexical_declaration(self, node: Any) -> Node | None:  # type: ignore
        if any(_has_comment(c) for c in node.named_children):
            return None
        kind = self._get_text(node.children[0])
        declarators = [
            self._convert_variable_declarator(c)
            for c in node.named_children
            if c.type == "variable_declarator"
        ]
        return self._node("VariableDeclaration", node, kind=kind, declarations=declarators)

    _convert_variable_declaration = _convert_lexical_declaration

    def _convert_variable_declarator(self, node: Any) -> Node:  # type: ignore
        return self._node(
            "VariableDeclarator",
            node,
            id=self.convert(node.child_by_field_name("name")),
            init=self._opt(node.child_by_field_name("value")),
        )

    def _convert_class_declaration(self, node: Any, type: str = "ClassDeclaration") -> Node | None:  # type: ignore
        if any(c.type == "decorator" for c in node.children):
            return None
        name = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        super_class = None
        for child in node.named_children:
            if child.type == "class_heritage":
                target = _named(child)[0]
                # TypeScript-style grammars nest the expression in extends_clause
                if target.type == "extends_clause":
                    target = _named(target)[0]
                super_class = self.convert(target)
        members = [self.convert(m) for m in body.named_children]
        return self._node(
            type,
            node,
            id=self._opt(name),
            superClass=super_class,
            body=self._node("ClassBody", body, body=members),
        )

    def _convert_class(self, node: Any) -> Node | None:  # type: ignore
        return self._convert_class_declaration(node, "ClassExpression")

    def _function_fields(self, node: Any) -> dict[str, Any]:  # type: ignore
        parameters = node.child_by_field_name("parameters")
        single = node.child_by_field_name("parameter")
        comments: list[str] = []
        if single is not None:
            params = [self.convert(single)]
        elif parameters is not None:
            params, comments = self._items(parameters.named_children)
        else:
            params = []
        fields = {
            "params": params,
            "body": self.convert(node.child_by_field_name("body")),
            "async": any(c.type == "async" for c in node.children),
            "generator": any(c.type == "*" for c in node.children),
        }
        if comments:
            fields["paramComments"] = comments
        return fields

    def _convert_function_declaration(self, node: Any) -> Node:  # type: ignore
        return self._node(
            "FunctionDeclaration",
            node,
            id=self._opt(node.child_by_field_name("name")),
            **self._function_fields(node),
        )

    def _convert_function_expression(self, node: Any) -> Node:  # type: ignore
        return self._node(
            "FunctionExpression",
            node,
            id=self._opt(node.child_by_field_name("name")),
            **self._function_fields(node),
        )

    # Older grammar versions name function expressions "function"
    _convert_function = _convert_function_expression

    def _convert_arrow_function(self, node: Any) -> Node:  # type: ignore
        fields = self._function_fields(node)
        fields.pop("generator")
        return self._node("ArrowFunctionExpression", node, **fields)

    # === Expressions ===

    def _convert_identifier(self, node: Any) -> Node:  # type: ignore
        return self._node("Identifier", node, name=self._get_text(node))

    _convert_property_identifier = _convert_identifier
    _convert_shorthand_property_identifier = _convert_identifier

    def _convert_undefined(self, node: Any) -> Node:  # type: ignore
        return self._node("Identifier", node, name="undefined")

    def _convert_this(self, node: Any) -> Node:  # type: ignore
        return self._node("ThisExpression", node)

    def _convert_null(self, node: Any) -> Node:  # type: ignore
        return self._node("NullLiteral", node)

    def _convert_true(self, node: Any) -> Node:  # type: ignore
        return self._node("BooleanLiteral", node, value=True)

    def _convert_false(self, node: Any) -> Node:  # type: ignore
        return self._node("BooleanLiteral", node, value=False)

    def _convert_number(self, node: Any) -> Node | None:  # type: ignore
        text = self._get_text(node)
        cleaned = text.replace("_", "")
        try:
            if cleaned.isdigit():
                value: int | float = int(cleaned)
            else:
                value = float(cleaned)
        except ValueError:
            return None  # hex, octal, bigint
        return self._node("NumericLiteral", node, value=value, raw=text)

    def _convert_string(self, node: Any) -> Node:  # type: ignore
        body = self._get_text(node)[1:-1]
        return self._node("StringLiteral", node, value=unescape_js(body))

    def _convert_template_string(self, node: Any) -> Node | None:  # type: ignore
        raw_quasis: list[str] = []
        expressions: list[Node] = []
        cursor = node.start_byte + 1
        for child in node.children:
            if child.type != "template_substitution":
                continue
            named = _named(child)
            if len(named) != 1 or _has_comment(child):
                return None
            raw_quasis.append(self._slice(cursor, child.start_byte))
            expressions.append(self.convert(named[0]))
            cursor = child.end_byte
        raw_quasis.append(self._slice(cursor, node.end_byte - 1))
        return self._node(
            "TemplateLiteral",
            node,
            quasis=[unescape_js(q) for q in raw_quasis],
            raw_quasis=raw_quasis,
            expressions=expressions,
        )

    def _convert_binary_expression(self, node: Any) -> Node:  # type: ignore
        return self._node(
            "BinaryExpression",
            node,
            operator=self._get_text(node.child_by_field_name("operator")),
            left=self.convert(node.child_by_field_name("left")),
            right=self.convert(node.child_by_field_name("right")),
        )

    def _convert_unary_expression(self, node: Any) -> Node:  # type: ignore
        return self._node(
            "UnaryExpression",
            node,
            operator=self._get_text(node.child_by_field_name("operator")),
            argument=self.convert(node.child_by_field_name("argument")),
        )

    def _convert_parenthesized_expression(self, node: Any) -> Node | None:  # type: ignore
        named = _named(node)
        if len(named) != 1:
            return None
        return self._node("ParenthesizedExpression", node, expression=self.convert(named[0]))

    def _convert_call_expression(self, node: Any) -> Node | None:  # type: ignore
        arguments = node.child_by_field_name("arguments")
        if arguments is None or arguments.type != "arguments":
            return None  # tagged template
        if any(c.type == "optional_chain" for c in node.children):
            return None
        args, comments = self._items(arguments.named_children)
        call = self._node(
            "CallExpression",
            node,
            callee=self.convert(node.child_by_field_name("function")),
            arguments=args,
        )
        if comments:
            call.argumentComments = comments
        return call

    def _convert_member_expression(self, node: Any) -> Node | None:  # type: ignore
        if any(c.type == "optional_chain" for c in node.children):
            return None
        prop = node.child_by_field_name("property")
        if prop is None or prop.type != "property_identifier":
            return None
        return self._node(
            "MemberExpression",
            node,
            object=self.convert(node.child_by_field_name("object")),
            property=self.convert(prop),
            computed=False,
        )

    def _convert_object(self, node: Any) -> Node:  # type: ignore
        properties, comments = self._items(node.named_children, self._object_member)
        obj = self._node("ObjectExpression", node, properties=properties)
        if comments:
            obj.comments = comments
        return obj

    def _object_member(self, child: Any) -> Node:  # type: ignore
        if child.type == "pair" and not _has_comment(child):
            key_node = child.child_by_field_name("key")
            computed = key_node.type == "computed_property_name"
            key = self.convert(_named(key_node)[0]) if computed else self.convert(key_node)
            return self._node(
                "ObjectProperty",
                child,
                key=key,
                value=self.convert(child.child_by_field_name("value")),
                computed=computed,
                shorthand=False,
            )
        if child.type == "shorthand_property_identifier":
            return self._node(
                "ObjectProperty",
                child,
                key=self.convert(child),
                value=self.convert(child),
                computed=False,
                shorthand=True,
            )
        return self.convert(child)

    def _convert_array(self, node: Any) -> Node:  # type: ignore
        elements, comments = self._items(node.named_children)
        array = self._node("ArrayExpression", node, elements=elements)
        if comments:
            array.comments = comments
        return array

    def _convert_spread_element(self, node: Any) -> Node:  # type: ignore
        return self._node("SpreadElement", node, argument=self.convert(_named(node)[0]))

    # === JSX ===

    def _convert_jsx_element(self, node: Any) -> Node:  # type: ignore
        open_tag = node.child_by_field_name("open_tag")
        close_tag = node.child_by_field_name("close_tag")
        end = close_tag.start_byte if close_tag is not None else node.end_byte

        # jsx_text excludes surrounding whitespace; gaps are kept as text
        children: list[Node] = []
        cursor = open_tag.end_byte
        for child in node.named_children:
            if child.start_byte < open_tag.end_byte or child.end_byte > end:
                continue
            if child.start_byte > cursor:
                self._append_jsx_text(children, self._slice(cursor, child.start_byte), child)
            converted = self._jsx_child(child)
            if converted.type == "JSXText":
                self._append_jsx_text(children, converted.value, child)
            else:
                children.append(converted)
            cursor = child.end_byte
        if end > cursor:
            self._append_jsx_text(children, self._slice(cursor, end), node)

        closing = None
        if close_tag is not None:
            closing = self._node(
                "JSXClosingElement", close_tag, name=self._jsx_name(close_tag.child_by_field_name("name"))
            )
        return self._node(
            "JSXElement",
            node,
            openingElement=self._jsx_opening(open_tag, self_closing=False),
            closingElement=closing,
            children=children,
        )

    def _append_jsx_text(self, children: list[Node], text: str, ts_node: Any) -> None:  # type: ignore
        if children and children[-1].type == "JSXText":
            children[-1].value += text
        else:
            children.append(self._node("JSXText", ts_node, value=text))

    def _convert_jsx_self_closing_element(self, node: Any) -> Node:  # type: ignore
        return self._node(
            "JSXElement",
            node,
            openingElement=self._jsx_opening(node, self_closing=True),
            closingElement=None,
            children=[],
        )

    def _jsx_opening(self, node: Any, self_closing: bool) -> Node:  # type: ignore
        attributes: list[Node] = []
        for attr in node.children_by_field_name("attribute"):
            if attr.type == "jsx_attribute":
                attributes.append(self._jsx_attribute(attr))
            elif attr.type == "jsx_expression":
                attributes.append(self._jsx_expression(attr, attribute=True))
        return self._node(
            "JSXOpeningElement",
            node,
            name=self._jsx_name(node.child_by_field_name("name")),
            attributes=attributes,
            selfClosing=self_closing,
        )

    def _jsx_name(self, node: Any) -> Node | None:  # type: ignore
        if node is None:
            return None  # fragment
        if node.type in ("identifier", "jsx_identifier", "property_identifier"):
            return self._node("JSXIdentifier", node, name=self._get_text(node))
        if node.type in ("member_expression", "nested_identifier"):
            named = _named(node)
            return self._node(
                "JSXMemberExpression",
                node,
                object=self._jsx_name(named[0]),
                property=self._jsx_name(named[-1]),
            )
        return self._raw(node)

    def _jsx_attribute(self, node: Any) -> Node:  # type: ignore
        named = _named(node)
        name = named[0]
        if name.type == "property_identifier":
            name_node = self._node("JSXIdentifier", name, name=self._get_text(name))
        else:
            name_node = self._raw(name)

        value = None
        if len(named) > 1:
            value_ts = named[1]
            if value_ts.type == "string":
                # JSX attribute strings have no escape sequences
                value = self._node("StringLiteral", value_ts, value=self._get_text(value_ts)[1:-1])
            elif value_ts.type == "jsx_expression":
                value = self._jsx_expression(value_ts)
            else:
                value = self.convert(value_ts)
        return self._node("JSXAttribute", node, name=name_node, value=value)

    def _jsx_expression(self, node: Any, attribute: bool = False) -> Node:  # type: ignore
        named = _named(node)
        if _has_comment(node):
            return self._raw(node)  # {/* comment */}
        if not named:
            return self._node(
                "JSXExpressionContainer", node, expression=self._node("JSXEmptyExpression", node)
            )
        if named[0].type == "spread_element":
            if not attribute:
                return self._raw(node)
            return self._node(
                "JSXSpreadAttribute", node, argument=self.convert(_named(named[0])[0])
            )
        return self._node("JSXExpressionContainer", node, expression=self.convert(named[0]))

    def _jsx_child(self, node: Any) -> Node:  # type: ignore
        if node.type in ("jsx_text", "html_character_reference"):
            return self._node("JSXText", node, value=self._get_text(node))
        if node.type == "jsx_expression":
            return self._jsx_expression(node)
        return self.convert(node)
