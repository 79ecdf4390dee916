"""Descriptor extraction from markup elements such as <FormattedMessage>."""

from __future__ import annotations

import logging
from typing import Any

from intlpass import builders as t
from intlpass.config import PassOptions
from intlpass.host import StaticEvaluator
from intlpass.models import MarkupMode, MessageDescriptor, StaticEvaluationError
from intlpass.resolver import ImportReferenceResolver
from intlpass.session import TraversalSession
from intlpass.tree import Node, NodePath, is_node
from intlpass.validator import validate_message

logger = logging.getLogger(__name__)

DESCRIPTOR_PROPS = ("id", "description", "defaultMessage")


def find_attribute(opening: Node, name: str) -> Node | None:
    """Return the first ``name=...`` attribute of an opening element."""
    for attr in opening.attributes:
        if (
            is_node(attr, "JSXAttribute")
            and is_node(attr.name, "JSXIdentifier")
            and attr.name.name == name
        ):
            return attr
    return None


def literal_attribute_value(attr: Node | None) -> str | None:
    """String value of ``a="x"`` or ``a={'x'}``; None for anything else."""
    if attr is None:
        return None
    value = attr.get("value")
    if is_node(value, "JSXExpressionContainer"):
        value = value.expression
    if is_node(value, "StringLiteral"):
        return value.value
    return None


class AttributeExtraction:
    """
    Literal ``id``/``description`` attributes; defaultMessage mirrors the id.

    Elements without a literal id are left alone.
    """

    def __init__(self, options: PassOptions) -> None:
        self.options = options

    def extract(self, path: NodePath, session: TraversalSession) -> None:
        opening = path.node
        message_id = literal_attribute_value(find_attribute(opening, "id"))
        if not message_id:
            return
        description = literal_attribute_value(find_attribute(opening, "description"))

        if find_attribute(opening, "defaultMessage") is None:
            opening.attributes.append(
                t.jsx_attribute(t.jsx_identifier("defaultMessage"), t.string_literal(message_id))
            )

        session.registry.register(
            MessageDescriptor(id=message_id, description=description),
            require_description=self.options.enforce_descriptions,
            loc=opening.loc,
        )


class DescriptorObjectExtraction:
    """Descriptor fields read from statically evaluated attributes."""

    def __init__(self, options: PassOptions, evaluator: StaticEvaluator) -> None:
        self.options = options
        self.evaluator = evaluator

    def extract(self, path: NodePath, session: TraversalSession) -> None:
        opening = path.node
        attribute_paths = [a for a in path.get("attributes") if a.is_("JSXAttribute")]
        if not attribute_paths:
            # Spread of a descriptor built elsewhere; its call site registers it.
            return

        values: dict[str, str] = {}
        literal_fields: set[str] = set()
        for attr_path in attribute_paths:
            name = attr_path.node.name
            if not is_node(name, "JSXIdentifier") or name.name not in DESCRIPTOR_PROPS:
                continue
            value_path = attr_path.get("value")
            values[name.name] = self._evaluate(value_path, attr_path.node)
            if value_path is not None and value_path.is_("StringLiteral"):
                literal_fields.add(name.name)

        message_id = values.get("id")
        if not message_id:
            return

        if "defaultMessage" not in values:
            values["defaultMessage"] = message_id
            opening.attributes.append(
                t.jsx_attribute(t.jsx_identifier("defaultMessage"), t.string_literal(message_id))
            )

        field = self.options.normalize_field
        values[field] = validate_message(
            values[field], loc=opening.loc, jsx_literal=field in literal_fields
        )

        session.registry.register(
            MessageDescriptor(
                id=values["id"],
                description=values.get("description"),
                default_message=values["defaultMessage"],
            ),
            require_description=self.options.enforce_descriptions,
            loc=opening.loc,
        )

    def _evaluate(self, value_path: NodePath | None, attr: Node) -> str:
        if value_path is None:
            raise StaticEvaluationError(
                "Messages must be statically evaluate-able for extraction.", attr.loc
            )
        evaluation = self.evaluator.evaluate(value_path)
        if not evaluation.confident or not isinstance(evaluation.value, str):
            raise StaticEvaluationError(
                "Messages must be statically evaluate-able for extraction.", attr.loc
            )
        return evaluation.value.strip()


class MarkupExtractor:
    """Routes opening elements to the configured extraction strategy."""

    def __init__(
        self,
        options: PassOptions,
        resolver: ImportReferenceResolver,
        evaluator: StaticEvaluator,
    ) -> None:
        self.options = options
        self.resolver = resolver
        self.strategy: Any
        if options.markup_mode is MarkupMode.DESCRIPTOR:
            self.strategy = DescriptorObjectExtraction(options, evaluator)
        else:
            self.strategy = AttributeExtraction(options)

    def visit(self, path: NodePath, session: TraversalSession) -> None:
        name = path.get("name")
        source = self.options.markup_source_name

        if self.resolver.references_import(name, source, self.options.deprecated_component_names):
            line = path.node.loc.line if path.node.loc else "?"
            tag = name.node.name
            session.file.warn(
                f"Line {line}: Default messages are not extracted from "
                f"<{tag}>, use <{self.options.component_names[0]}> instead."
            )
            return

        if self.resolver.references_import(name, source, self.options.component_names):
            self.strategy.extract(path, session)
