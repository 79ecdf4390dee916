"""Tests for message extraction from <FormattedMessage> style elements."""

from __future__ import annotations

import logging

import pytest
from helpers import REACT_INTL, find_paths, named_import, program

from intlpass import builders as t
from intlpass.config import PassOptions
from intlpass.host import ConfidentEvaluator, ModuleBindingResolver
from intlpass.markup import MarkupExtractor, find_attribute, literal_attribute_value
from intlpass.models import (
    DescriptionRequiredError,
    DuplicateIdConflictError,
    MessageDescriptor,
    MessageSyntaxError,
    StaticEvaluationError,
)
from intlpass.resolver import ImportReferenceResolver
from intlpass.tree import Node

IMPORT = "import { FormattedMessage } from 'react-intl';\n"


def element(name: str, *attributes: Node) -> Node:
    opening = Node(
        "JSXOpeningElement",
        name=t.jsx_identifier(name),
        attributes=list(attributes),
        selfClosing=True,
    )
    return Node("ExpressionStatement", expression=Node("JSXElement", openingElement=opening, children=[]))


def attr(name: str, value: str) -> Node:
    return t.jsx_attribute(t.jsx_identifier(name), t.string_literal(value))


class TestAttributeHelpers:
    def test_find_attribute(self) -> None:
        opening = element("X", attr("id", "a"), attr("description", "d")).expression.openingElement
        assert find_attribute(opening, "description").value.value == "d"
        assert find_attribute(opening, "defaultMessage") is None

    def test_literal_value_in_container(self) -> None:
        container = Node("JSXExpressionContainer", expression=t.string_literal("a"))
        assert literal_attribute_value(t.jsx_attribute(t.jsx_identifier("id"), container)) == "a"

    def test_non_literal_value(self) -> None:
        container = Node("JSXExpressionContainer", expression=t.identifier("id"))
        assert literal_attribute_value(t.jsx_attribute(t.jsx_identifier("id"), container)) is None
        assert literal_attribute_value(None) is None


class TestMarkupExtractorUnit:
    """Extractor driven directly, without the parser."""

    def extractor(self, options: PassOptions | None = None) -> MarkupExtractor:
        options = options or PassOptions()
        bindings = ModuleBindingResolver()
        return MarkupExtractor(
            options, ImportReferenceResolver(bindings), ConfidentEvaluator(bindings)
        )

    def test_registers_and_synthesizes_default_message(self, session) -> None:
        tree = program(named_import(REACT_INTL, "FormattedMessage"), element("FormattedMessage", attr("id", "greeting")))
        path = find_paths(tree, "JSXOpeningElement")[0]

        self.extractor().visit(path, session)

        assert session.registry.snapshot() == [MessageDescriptor("greeting")]
        synthesized = find_attribute(path.node, "defaultMessage")
        assert synthesized.value.value == "greeting"

    def test_unimported_component_ignored(self, session) -> None:
        tree = program(element("FormattedMessage", attr("id", "greeting")))
        self.extractor().visit(find_paths(tree, "JSXOpeningElement")[0], session)
        assert len(session.registry) == 0


class TestAttributeMode:
    def test_tag_gains_default_message(self, run_pass) -> None:
        result = run_pass(IMPORT + 'const el = <FormattedMessage id="greeting" />;\n')
        assert '<FormattedMessage id="greeting" defaultMessage="greeting" />' in result.code
        assert result.messages == [MessageDescriptor("greeting")]

    def test_description_is_extracted(self, run_pass) -> None:
        result = run_pass(
            IMPORT + 'const el = <FormattedMessage id="greeting" description="Hello text" />;\n'
        )
        assert result.messages == [MessageDescriptor("greeting", "Hello text")]

    def test_existing_default_message_kept(self, run_pass) -> None:
        source = IMPORT + 'const el = <FormattedMessage id="greeting" defaultMessage="Hi!" />;\n'
        result = run_pass(source)
        assert result.code == source

    def test_dynamic_id_is_skipped(self, run_pass) -> None:
        source = IMPORT + "const el = <FormattedMessage id={props.id} />;\n"
        result = run_pass(source)
        assert result.code == source
        assert result.messages == []

    def test_html_variant(self, run_pass) -> None:
        result = run_pass(
            "import { FormattedHTMLMessage } from 'react-intl';\n"
            'const el = <FormattedHTMLMessage id="rich" />;\n'
        )
        assert [m.id for m in result.messages] == ["rich"]

    def test_deprecated_component_warns(self, run_pass, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            result = run_pass(
                "import { FormattedPlural } from 'react-intl';\n"
                'const el = <FormattedPlural id="items" />;\n'
            )
        assert result.messages == []
        assert result.warnings == [
            "Line 2: Default messages are not extracted from <FormattedPlural>, "
            "use <FormattedMessage> instead."
        ]
        assert "FormattedPlural" in caplog.text

    def test_enforced_description(self, run_pass) -> None:
        with pytest.raises(DescriptionRequiredError):
            run_pass(IMPORT + 'const el = <FormattedMessage id="greeting" />;\n', enforceDescriptions=True)

    def test_duplicate_conflict(self, run_pass) -> None:
        with pytest.raises(DuplicateIdConflictError):
            run_pass(
                IMPORT
                + 'const a = <FormattedMessage id="x" description="one" />;\n'
                'const b = <FormattedMessage id="x" description="two" />;\n'
            )

    def test_identical_duplicate_accepted(self, run_pass) -> None:
        result = run_pass(
            IMPORT
            + 'const a = <FormattedMessage id="x" />;\n'
            'const b = <FormattedMessage id="x" />;\n'
        )
        assert result.messages == [MessageDescriptor("x")]


class TestDescriptorMode:
    def run(self, run_pass, body: str, **options):
        return run_pass(IMPORT + body, markupMode="descriptor", **options)

    def test_full_descriptor(self, run_pass) -> None:
        result = self.run(
            run_pass,
            'const el = <FormattedMessage id="greeting" description="d" defaultMessage="Hello {name}" />;\n',
        )
        assert result.messages == [MessageDescriptor("greeting", "d", "Hello {name}")]

    def test_default_message_defaults_to_id(self, run_pass) -> None:
        result = self.run(run_pass, 'const el = <FormattedMessage id="greeting" />;\n')
        assert result.messages == [MessageDescriptor("greeting", None, "greeting")]
        assert 'defaultMessage="greeting"' in result.code

    def test_expression_values_are_evaluated(self, run_pass) -> None:
        result = self.run(
            run_pass,
            "const PREFIX = 'app';\n"
            "const el = <FormattedMessage id={PREFIX + '.title'} defaultMessage={`Title`} />;\n",
        )
        assert result.messages == [MessageDescriptor("app.title", None, "Title")]

    def test_values_are_trimmed(self, run_pass) -> None:
        result = self.run(run_pass, 'const el = <FormattedMessage id=" x " defaultMessage=" X " />;\n')
        assert result.messages == [MessageDescriptor("x", None, "X")]

    def test_other_props_are_not_evaluated(self, run_pass) -> None:
        result = self.run(
            run_pass, 'const el = <FormattedMessage id="x" values={{ n: count }} />;\n'
        )
        assert [m.id for m in result.messages] == ["x"]

    def test_dynamic_descriptor_value(self, run_pass) -> None:
        with pytest.raises(StaticEvaluationError):
            self.run(run_pass, "const el = <FormattedMessage id={props.id} />;\n")

    def test_spread_only_is_skipped(self, run_pass) -> None:
        result = self.run(run_pass, "const el = <FormattedMessage {...messages.title} />;\n")
        assert result.messages == []

    def test_default_message_normalized(self, run_pass) -> None:
        result = self.run(
            run_pass,
            'const el = <FormattedMessage id="n" defaultMessage="{ count, plural, one {# item} other {# items} }" />;\n',
            normalizeField="defaultMessage",
        )
        assert result.messages[0].default_message == "{count, plural, one {# item} other {# items}}"

    def test_invalid_message_syntax(self, run_pass) -> None:
        with pytest.raises(MessageSyntaxError):
            self.run(
                run_pass,
                'const el = <FormattedMessage id="n" defaultMessage="Hello {name" />;\n',
                normalizeField="defaultMessage",
            )

    def test_backslash_escape_hint(self, run_pass) -> None:
        with pytest.raises(MessageSyntaxError) as exc_info:
            self.run(
                run_pass,
                'const el = <FormattedMessage id="n" defaultMessage="\\\\{name" />;\n',
                normalizeField="defaultMessage",
            )
        assert exc_info.value.hint
