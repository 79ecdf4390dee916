"""Tests for translate() and defineMessages() call-site handling."""

from __future__ import annotations

import pytest

from intlpass.models import (
    InvalidArgumentShapeError,
    MessageDescriptor,
    MissingDefaultMessageError,
    MissingIdError,
    StaticEvaluationError,
)

TRANSLATE_IMPORT = "import { translate } from 'skybase-core/utils/translate';\n"
DEFINE_IMPORT = "import { defineMessages } from 'react-intl';\n"


class TestSingleMessageCall:
    """``translate(id, options?, description?, props?)``."""

    def test_function_component_gets_props(self, run_pass) -> None:
        result = run_pass(
            TRANSLATE_IMPORT
            + "export const Header = (props) => {\n"
            "  const title = translate('greeting');\n"
            "  return <h1>{title}</h1>;\n"
            "};\n"
        )
        assert "translate.call(this, 'greeting', {}, null, props)" in result.code
        assert result.messages == [MessageDescriptor("greeting")]

    def test_class_component_gets_this_props(self, run_pass) -> None:
        result = run_pass(
            TRANSLATE_IMPORT
            + "export class Header extends Component {\n"
            "  render() {\n"
            "    return <h1>{translate('greeting')}</h1>;\n"
            "  }\n"
            "}\n"
        )
        assert "translate.call(this, 'greeting', {}, null, this.props)" in result.code

    def test_default_export_class_gets_this_props(self, run_pass) -> None:
        result = run_pass(
            TRANSLATE_IMPORT
            + "export default class extends Component {\n"
            "  render() {\n"
            "    return <h1>{translate('greeting')}</h1>;\n"
            "  }\n"
            "}\n"
        )
        assert "translate.call(this, 'greeting', {}, null, this.props)" in result.code

    def test_unexported_class_component_gets_this_props(self, run_pass) -> None:
        result = run_pass(
            TRANSLATE_IMPORT
            + "class Header extends React.PureComponent {\n"
            "  render() {\n"
            "    return <h1>{translate('greeting')}</h1>;\n"
            "  }\n"
            "}\n"
        )
        assert "translate.call(this, 'greeting', {}, null, this.props)" in result.code

    def test_plain_class_gets_props(self, run_pass) -> None:
        result = run_pass(
            TRANSLATE_IMPORT
            + "class Labels {\n"
            "  title() {\n"
            "    return translate('greeting');\n"
            "  }\n"
            "}\n"
        )
        assert "translate.call(this, 'greeting', {}, null, props)" in result.code

    def test_surrogate_pair_escape_in_id(self, run_pass) -> None:
        result = run_pass(TRANSLATE_IMPORT + "translate('smile \\uD83D\\uDE00');\n")
        assert result.messages == [MessageDescriptor("smile \U0001F600")]
        assert "'smile \U0001F600'" in result.code
        result.code.encode("utf-8")

    def test_argument_comment_is_kept(self, run_pass) -> None:
        result = run_pass(TRANSLATE_IMPORT + "translate(/* page heading */ 'greeting');\n")
        assert "/* page heading */" in result.code
        assert "'greeting'," in result.code
        assert result.messages == [MessageDescriptor("greeting")]
        assert run_pass(result.code).code == result.code

    def test_module_level_call_gets_props(self, run_pass) -> None:
        result = run_pass(TRANSLATE_IMPORT + "const label = translate('label');\n")
        assert "translate.call(this, 'label', {}, null, props)" in result.code

    def test_description_argument(self, run_pass) -> None:
        result = run_pass(
            TRANSLATE_IMPORT + "translate('save', { count: 2 }, 'Save button');\n"
        )
        assert "translate.call(this, 'save', { count: 2 }, 'Save button', props)" in result.code
        assert result.messages == [MessageDescriptor("save", "Save button")]

    def test_four_arguments_kept(self, run_pass) -> None:
        result = run_pass(TRANSLATE_IMPORT + "translate('save', {}, null, ownProps);\n")
        assert "translate.call(this, 'save', {}, null, ownProps)" in result.code

    def test_constant_id_is_evaluated(self, run_pass) -> None:
        result = run_pass(
            TRANSLATE_IMPORT
            + "const PREFIX = 'header';\n"
            "translate(PREFIX + '.title');\n"
        )
        assert result.messages[0].id == "header.title"

    def test_aliased_import(self, run_pass) -> None:
        result = run_pass(
            "import { translate as t } from 'skybase-core/utils/translate';\n"
            "t('greeting');\n"
        )
        assert "t.call(this, 'greeting', {}, null, props)" in result.code

    def test_relative_import_path(self, run_pass) -> None:
        result = run_pass(
            "import { translate } from '../../../src/skybase-core/utils/translate';\n"
            "translate('greeting');\n"
        )
        assert result.messages == [MessageDescriptor("greeting")]

    def test_unrelated_translate_untouched(self, run_pass) -> None:
        source = "import { translate } from './i18n';\ntranslate('greeting');\n"
        result = run_pass(source)
        assert result.code == source
        assert result.messages == []

    def test_no_arguments(self, run_pass) -> None:
        with pytest.raises(MissingIdError):
            run_pass(TRANSLATE_IMPORT + "translate();\n")

    def test_too_many_arguments(self, run_pass) -> None:
        with pytest.raises(InvalidArgumentShapeError, match="at most four"):
            run_pass(TRANSLATE_IMPORT + "translate('a', {}, null, props, extra);\n")

    def test_dynamic_id(self, run_pass) -> None:
        with pytest.raises(StaticEvaluationError, match="statically evaluate-able"):
            run_pass(TRANSLATE_IMPORT + "translate(getId());\n")

    def test_rewritten_call_registers_again(self, run_pass) -> None:
        first = run_pass(TRANSLATE_IMPORT + "translate('save', {}, 'Save button');\n")
        second = run_pass(first.code)
        assert second.code == first.code
        assert second.messages == first.messages


class TestBulkDescriptorCall:
    """``defineMessages({...})`` and ``defineMessages([...])``."""

    def test_object_form(self, run_pass) -> None:
        source = (
            DEFINE_IMPORT
            + "const messages = defineMessages({\n"
            "  title: { id: 'page.title', description: 'Title', defaultMessage: 'Welcome' },\n"
            "});\n"
        )
        result = run_pass(source)
        assert result.messages == [MessageDescriptor("page.title", "Title", "Welcome")]

    def test_array_form_is_merged(self, run_pass) -> None:
        result = run_pass(
            DEFINE_IMPORT
            + "const messages = defineMessages([\n"
            "  { id: 'a', defaultMessage: 'A' },\n"
            "  { id: 'b', defaultMessage: 'B' },\n"
            "]);\n"
        )
        assert (
            "defineMessages({ a: { id: 'a', defaultMessage: 'A' }, "
            "b: { id: 'b', defaultMessage: 'B' } })" in result.code
        )
        assert [m.id for m in result.messages] == ["a", "b"]

    def test_array_keys_that_are_not_identifiers_are_quoted(self, run_pass) -> None:
        result = run_pass(
            DEFINE_IMPORT + "defineMessages([{ id: 'nav.home', defaultMessage: 'Home' }]);\n"
        )
        assert "'nav.home': { id: 'nav.home', defaultMessage: 'Home' }" in result.code

    def test_values_are_trimmed(self, run_pass) -> None:
        result = run_pass(
            DEFINE_IMPORT + "defineMessages({ a: { id: ' a ', defaultMessage: ' Hello ' } });\n"
        )
        assert result.messages == [MessageDescriptor("a", None, "Hello")]

    def test_default_message_required(self, run_pass) -> None:
        with pytest.raises(MissingDefaultMessageError):
            run_pass(DEFINE_IMPORT + "defineMessages({ a: { id: 'a' } });\n")

    def test_missing_default_message_defaults_to_id(self, run_pass) -> None:
        source = DEFINE_IMPORT + "defineMessages({ a: { id: 'a' } });\n"
        result = run_pass(source, normalizeField="defaultMessage")
        assert result.messages == [MessageDescriptor("a", None, "a")]
        assert result.code == source

    def test_default_message_still_required_when_normalizing_id(self, run_pass) -> None:
        with pytest.raises(MissingDefaultMessageError):
            run_pass(DEFINE_IMPORT + "defineMessages({ a: { id: 'a' } });\n", normalizeField="id")

    def test_commented_descriptors(self, run_pass) -> None:
        source = (
            DEFINE_IMPORT
            + "const messages = defineMessages({\n"
            "  // Page heading\n"
            "  title: { id: 'page.title', defaultMessage: 'Welcome' }, /* shown once */\n"
            "  body: { id: 'page.body', defaultMessage: 'Hello' }\n"
            "});\n"
        )
        result = run_pass(source)
        assert result.code == source
        assert [m.id for m in result.messages] == ["page.title", "page.body"]

    def test_string_argument_is_ignored(self, run_pass) -> None:
        result = run_pass(DEFINE_IMPORT + "defineMessages('a');\n")
        assert result.messages == []

    def test_non_object_value(self, run_pass) -> None:
        with pytest.raises(InvalidArgumentShapeError):
            run_pass(DEFINE_IMPORT + "defineMessages({ a: 'not a descriptor' });\n")

    def test_wrong_argument(self, run_pass) -> None:
        with pytest.raises(InvalidArgumentShapeError, match="object expression"):
            run_pass(DEFINE_IMPORT + "defineMessages(messages);\n")

    def test_computed_keys(self, run_pass) -> None:
        result = run_pass(
            DEFINE_IMPORT
            + "const ID = 'id';\n"
            "defineMessages({ a: { [ID]: 'a', defaultMessage: 'A' } });\n"
        )
        assert result.messages[0].id == "a"
