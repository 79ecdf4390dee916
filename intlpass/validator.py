"""Message text validation against the ICU MessageFormat grammar."""

from __future__ import annotations

import logging
from typing import Any

from pyicumessageformat import Parser

from intlpass.models import MessageSyntaxError, SourceLocation

logger = logging.getLogger(__name__)

SYNTAX_GUIDE_URL = "https://formatjs.io/docs/core-concepts/icu-syntax"
JSX_GOTCHAS_URL = "https://legacy.reactjs.org/docs/jsx-in-depth.html#string-literals"

_SPECIAL = "{}"
_PLURAL_SPECIAL = "{}#"
_PLURAL_TYPES = ("plural", "selectordinal")

_parser = Parser()


def validate_message(
    text: str,
    *,
    loc: SourceLocation | None = None,
    jsx_literal: bool = False,
) -> str:
    """
    Parse message text and return it in normalized form.

    Args:
        text: Message text (argument placeholders, plural/select, ...).
        loc: Location attached to a raised MessageSyntaxError.
        jsx_literal: The text came from a markup string literal, where
            backslashes are not escape characters.

    Returns:
        The message re-printed from its parsed form.
    """
    try:
        ast = _parser.parse(text)
    except Exception as e:
        if jsx_literal and "\\\\" in text:
            raise MessageSyntaxError(
                "Message failed to parse. It looks like `\\`s were used for escaping, "
                "this won't work with JSX string literals. Wrap with `{}`. "
                f"See: {JSX_GOTCHAS_URL}",
                loc,
                hint="Wrap the text in an expression container, e.g. defaultMessage={'...'}",
            ) from e
        raise MessageSyntaxError(
            f"Message failed to parse: {e}. See: {SYNTAX_GUIDE_URL}", loc
        ) from e
    return print_message(ast)


def print_message(ast: list[Any], in_plural: bool = False) -> str:
    """Print a parsed message back to ICU MessageFormat text."""
    out: list[str] = []
    for i, part in enumerate(ast):
        if isinstance(part, str):
            followed_by_node = i + 1 < len(ast) and not isinstance(ast[i + 1], str)
            out.append(_escape(part, in_plural, followed_by_node))
        elif part.get("hash"):
            out.append("#")
        else:
            out.append(_print_argument(part))
    return "".join(out)


def _print_argument(arg: dict[str, Any]) -> str:
    name = arg["name"]
    arg_type = arg.get("type")
    if not arg_type:
        return "{" + str(name) + "}"

    options = arg.get("options")
    if options is None:
        fmt = arg.get("format")
        if fmt:
            return f"{{{name}, {arg_type}, {_format_style(fmt)}}}"
        return f"{{{name}, {arg_type}}}"

    in_plural = arg_type in _PLURAL_TYPES
    parts = [f"{name}, {arg_type},"]
    offset = arg.get("offset")
    if offset:
        parts.append(f"offset:{offset}")
    for selector, sub in options.items():
        parts.append(f"{selector} {{{print_message(sub, in_plural)}}}")
    return "{" + " ".join(parts) + "}"


def _format_style(fmt: Any) -> str:
    if isinstance(fmt, list):
        return print_message(fmt).strip()
    return str(fmt).strip()


def _escape(text: str, in_plural: bool, followed_by_node: bool) -> str:
    special = _PLURAL_SPECIAL if in_plural else _SPECIAL
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in special:
            j = i
            while j < len(text) and text[j] in special:
                j += 1
            out.append("'" + text[i:j] + "'")
            i = j
            continue
        if ch == "'":
            nxt = text[i + 1] if i + 1 < len(text) else None
            if nxt == "'" or (nxt is not None and nxt in special) or (
                nxt is None and followed_by_node
            ):
                out.append("''")
            else:
                out.append("'")
        else:
            out.append(ch)
        i += 1
    return "".join(out)
