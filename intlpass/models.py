"""Data models for intlpass message extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ComponentKind(Enum):
    """Classification of an exported declaration."""

    CLASS_COMPONENT = "class_component"
    FUNCTION_COMPONENT = "function_component"
    NOT_A_COMPONENT = "not_a_component"


class MarkupMode(Enum):
    """How descriptors are read from markup elements."""

    ATTRIBUTE = "attribute"  # Literal id/description attributes only
    DESCRIPTOR = "descriptor"  # Every attribute, statically evaluated


@dataclass(frozen=True)
class SourceLocation:
    """Position of a node in its source file (1-based line, 0-based column)."""

    line: int
    column: int = 0
    end_line: int | None = None
    end_column: int | None = None

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass
class MessageDescriptor:
    """One localizable message."""

    id: str | None
    description: str | None = None
    default_message: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Serialize with camelCase keys, omitting absent fields."""
        data: dict[str, str] = {}
        if self.id is not None:
            data["id"] = self.id
        if self.description is not None:
            data["description"] = self.description
        if self.default_message is not None:
            data["defaultMessage"] = self.default_message
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageDescriptor:
        """Deserialize from a catalog entry."""
        return cls(
            id=data.get("id"),
            description=data.get("description"),
            default_message=data.get("defaultMessage"),
        )


@dataclass(frozen=True)
class ImportBinding:
    """Where an imported local name comes from."""

    local_name: str
    module_path: str
    imported_name: str  # External name, "default" or "*"


@dataclass(frozen=True)
class Binding:
    """A resolved declaration for an identifier."""

    name: str
    kind: str  # "module" | "const" | "let" | "var" | "param"
    node: Any = None  # Declarator/specifier node, when known
    import_binding: ImportBinding | None = None

    @property
    def is_import(self) -> bool:
        return self.kind == "module" and self.import_binding is not None


@dataclass
class ComponentRecord:
    """An exported declaration and how it was classified."""

    declared_name: str | None
    kind: ComponentKind
    converted: bool = False

    @property
    def is_component(self) -> bool:
        return self.kind is not ComponentKind.NOT_A_COMPONENT


@dataclass
class Evaluation:
    """Result of static evaluation."""

    confident: bool
    value: Any = None


@dataclass
class TransformResult:
    """Output of transforming one source file."""

    filename: str
    code: str
    messages: list[MessageDescriptor] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    catalog_path: str | None = None


@dataclass
class ExtractResult:
    """Summary of an extraction run over many files."""

    results: list[TransformResult] = field(default_factory=list)
    errors: list[IntlError] = field(default_factory=list)

    @property
    def message_count(self) -> int:
        return sum(len(r.messages) for r in self.results)


# Custom exceptions


class IntlError(Exception):
    """Base exception for intlpass errors."""

    def __init__(
        self,
        message: str,
        loc: SourceLocation | None = None,
        filename: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.loc = loc
        self.filename = filename

    def __str__(self) -> str:
        prefix = ""
        if self.filename:
            prefix = self.filename
        if self.loc is not None:
            prefix = f"{prefix}:{self.loc}" if prefix else str(self.loc)
        return f"{prefix}: {self.message}" if prefix else self.message


class ConfigError(IntlError):
    """Raised when pass options are invalid."""


class SourceParseError(IntlError):
    """Raised when source text cannot be parsed into a tree."""


class MissingIdError(IntlError):
    """Raised when a message descriptor has no id."""


class MissingDefaultMessageError(IntlError):
    """Raised when a descriptor requires a defaultMessage and has none."""


class DescriptionRequiredError(IntlError):
    """Raised when descriptions are enforced and one is missing."""


class DuplicateIdConflictError(IntlError):
    """Raised when an id is registered twice with different content."""


class StaticEvaluationError(IntlError):
    """Raised when a message value cannot be evaluated statically."""


class InvalidArgumentShapeError(IntlError):
    """Raised when a bulk descriptor call has an unsupported argument."""


class MessageSyntaxError(IntlError):
    """Raised when message text does not parse as ICU MessageFormat."""

    def __init__(
        self,
        message: str,
        loc: SourceLocation | None = None,
        filename: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, loc, filename)
        self.hint = hint
