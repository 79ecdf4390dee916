"""Generic syntax tree used by the pass.

Nodes follow the Babel/ESTree naming (``CallExpression``,
``JSXOpeningElement``...). A node is a type name plus an ordered mapping of
fields; a field holds a child ``Node``, a list of nodes, or a plain value.
``NodePath`` links a node to its parent slot so visitors can rewrite the tree
in place.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from intlpass.models import SourceLocation


class Node:
    """A syntax tree node with attribute access to its fields."""

    __slots__ = ("type", "fields", "loc")

    def __init__(self, type: str, loc: SourceLocation | None = None, **fields: Any) -> None:
        object.__setattr__(self, "type", type)
        object.__setattr__(self, "loc", loc)
        object.__setattr__(self, "fields", dict(fields))

    def __getattr__(self, name: str) -> Any:
        if name == "fields":
            raise AttributeError(name)
        try:
            return self.fields[name]
        except KeyError:
            raise AttributeError(f"{self.type} node has no field {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in Node.__slots__:
            object.__setattr__(self, name, value)
        else:
            self.fields[name] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.type == other.type and self.fields == other.fields

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.fields.items())
        return f"{self.type}({inner})"

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def is_(self, *types: str) -> bool:
        return self.type in types

    def child_slots(self) -> Iterator[tuple[str, Any]]:
        """Yield (field, value) pairs whose value is a node or a list of nodes."""
        for key, value in self.fields.items():
            if isinstance(value, Node):
                yield key, value
            elif isinstance(value, list) and any(isinstance(v, Node) for v in value):
                yield key, value


def is_node(value: Any, *types: str) -> bool:
    """Check that value is a Node, optionally of one of the given types."""
    if not isinstance(value, Node):
        return False
    return not types or value.type in types


class NodePath:
    """A node together with the parent slot that holds it."""

    def __init__(
        self,
        node: Node,
        parent: NodePath | None = None,
        key: str | None = None,
        index: int | None = None,
    ) -> None:
        self.node = node
        self.parent = parent
        self.key = key
        self.index = index

    def __repr__(self) -> str:
        return f"NodePath({self.node.type}, key={self.key!r}, index={self.index!r})"

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def parent_node(self) -> Node | None:
        return self.parent.node if self.parent is not None else None

    @property
    def container(self) -> list[Node] | None:
        """The list holding this node, if it lives in one."""
        if self.parent is None or self.index is None:
            return None
        return self.parent.node.fields[self.key]

    def is_(self, *types: str) -> bool:
        return self.node.type in types

    def get(self, key: str) -> Any:
        """Return a child path (or list of child paths) for a field."""
        value = self.node.get(key)
        if isinstance(value, Node):
            return NodePath(value, self, key)
        if isinstance(value, list):
            return [
                NodePath(item, self, key, i)
                for i, item in enumerate(value)
                if isinstance(item, Node)
            ]
        return None

    def replace_with(self, node: Node) -> NodePath:
        """Put node in this path's slot."""
        if self.parent is None:
            raise ValueError("Cannot replace the root node")
        # Comments attached to the old node stay in the slot
        for key in ("leadingComments", "trailingComments"):
            if key in self.node.fields and key not in node.fields:
                node.fields[key] = self.node.fields[key]
        container = self.container
        if container is not None:
            container[self.index] = node
        else:
            self.parent.node.fields[self.key] = node
        self.node = node
        return self

    def insert_before(self, nodes: Node | list[Node]) -> list[NodePath]:
        """Insert sibling nodes before this one."""
        container = self._require_container()
        new_nodes = nodes if isinstance(nodes, list) else [nodes]
        start = self.index
        container[start:start] = new_nodes
        self.index = start + len(new_nodes)
        return [
            NodePath(n, self.parent, self.key, start + i) for i, n in enumerate(new_nodes)
        ]

    def insert_after(self, nodes: Node | list[Node]) -> list[NodePath]:
        """Insert sibling nodes after this one."""
        container = self._require_container()
        new_nodes = nodes if isinstance(nodes, list) else [nodes]
        start = self.index + 1
        container[start:start] = new_nodes
        return [
            NodePath(n, self.parent, self.key, start + i) for i, n in enumerate(new_nodes)
        ]

    def find_parent(self, predicate: Callable[[NodePath], bool]) -> NodePath | None:
        """Return the closest ancestor path matching predicate."""
        current = self.parent
        while current is not None:
            if predicate(current):
                return current
            current = current.parent
        return None

    def ancestors(self) -> Iterator[NodePath]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def root(self) -> NodePath:
        current = self
        while current.parent is not None:
            current = current.parent
        return current

    def _require_container(self) -> list[Node]:
        container = self.container
        if container is None:
            raise ValueError(f"{self.node.type} is not inside a statement list")
        return container
