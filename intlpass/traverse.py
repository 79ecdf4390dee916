"""Depth-first tree walker dispatching ``enter_<Type>``/``exit_<Type>`` events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from intlpass.host import FileContext
from intlpass.models import IntlError, MessageDescriptor
from intlpass.tree import Node, NodePath

if TYPE_CHECKING:
    from intlpass.plugin import IntlPass

logger = logging.getLogger(__name__)


class Walker:
    """
    Visits every node once, parents before children.

    Visitors are plain objects; a method named ``enter_CallExpression`` is
    called with ``(path, state)`` when a CallExpression is entered, and
    ``exit_CallExpression`` after its children. Siblings inserted after the
    current node are visited; siblings inserted before it are not.
    """

    def __init__(self, visitors: list[Any]) -> None:
        self.visitors = visitors
        self._cache: dict[str, list[Any]] = {}

    def walk(self, root: Node, state: Any = None) -> None:
        self._visit(NodePath(root), state)

    def _handlers(self, event: str) -> list[Any]:
        handlers = self._cache.get(event)
        if handlers is None:
            handlers = [
                getattr(v, event) for v in self.visitors if callable(getattr(v, event, None))
            ]
            self._cache[event] = handlers
        return handlers

    def _visit(self, path: NodePath, state: Any) -> None:
        for handler in self._handlers(f"enter_{path.node.type}"):
            handler(path, state)

        node = path.node
        for key, value in list(node.child_slots()):
            if isinstance(value, Node):
                self._visit(NodePath(value, path, key), state)
                continue
            i = 0
            while i < len(value):
                child = value[i]
                if not isinstance(child, Node):
                    i += 1
                    continue
                child_path = NodePath(child, path, key, i)
                self._visit(child_path, state)
                i = child_path.index + 1

        for handler in self._handlers(f"exit_{path.node.type}"):
            handler(path, state)


def traverse(root: Node, visitors: list[Any], state: Any = None) -> None:
    """Walk root with the given visitors."""
    Walker(visitors).walk(root, state)


def transform(tree: Node, file: FileContext, intl_pass: IntlPass) -> list[MessageDescriptor]:
    """
    Run the pass over one file's tree, mutating it in place.

    Returns:
        The descriptors extracted from the file, in registration order.

    Raises:
        IntlError: Any extraction error, tagged with the file name.
    """
    if tree.type != "Program":
        raise ValueError(f"Expected a Program node, got {tree.type}")
    try:
        traverse(tree, [intl_pass], file)
    except IntlError as e:
        intl_pass.abort(e)
        raise
    return intl_pass.last_messages
