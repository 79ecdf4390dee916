"""Per-file traversal state."""

from __future__ import annotations

from dataclasses import dataclass, field

from intlpass.host import FileContext
from intlpass.models import ComponentKind, ComponentRecord
from intlpass.registry import DescriptorRegistry


@dataclass
class TraversalSession:
    """
    Everything mutable while one file is transformed.

    Created when the Program is entered and dropped when it is exited, so
    nothing leaks between files even when one pass object handles many.
    """

    file: FileContext
    registry: DescriptorRegistry = field(default_factory=DescriptorRegistry)
    converted_names: set[str] = field(default_factory=set)
    components: list[ComponentRecord] = field(default_factory=list)
    wrapper_imported: bool = False
    current_kind: ComponentKind | None = None
    _kind_stack: list[ComponentKind | None] = field(default_factory=list, repr=False)

    def is_converted(self, name: str) -> bool:
        return name in self.converted_names

    def mark_converted(self, record: ComponentRecord, *names: str) -> None:
        record.converted = True
        self.components.append(record)
        self.converted_names.update(names)

    def push_kind(self, kind: ComponentKind | None) -> None:
        self._kind_stack.append(self.current_kind)
        self.current_kind = kind

    def pop_kind(self) -> None:
        self.current_kind = self._kind_stack.pop() if self._kind_stack else None
