"""Tests for catalog emission."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from intlpass.config import METADATA_KEY, PassOptions
from intlpass.emitter import catalog_path, emit_catalog, render_catalog, sort_descriptors
from intlpass.host import FileContext
from intlpass.models import MessageDescriptor


@pytest.fixture
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestSorting:
    def test_case_insensitive_order(self) -> None:
        descriptors = [MessageDescriptor("b"), MessageDescriptor("A"), MessageDescriptor("a.x")]
        assert [d.id for d in sort_descriptors(descriptors)] == ["A", "a.x", "b"]

    def test_render_is_sorted_and_indented(self) -> None:
        text = render_catalog(
            [MessageDescriptor("z", None, "Zed"), MessageDescriptor("a", "First", "Ay")]
        )
        data = json.loads(text)
        assert [d["id"] for d in data] == ["a", "z"]
        assert data[0] == {"id": "a", "description": "First", "defaultMessage": "Ay"}
        assert "description" not in data[1]
        assert '\n  {\n    "id": "a"' in text


class TestCatalogPath:
    def test_mirrors_relative_source_dir(self, tmp_path: Path) -> None:
        file = FileContext(str(tmp_path / "src" / "components" / "Header.js"))
        target = catalog_path(file, "build/messages", cwd=str(tmp_path))
        assert target == Path("build/messages/src/components/Header.json")

    def test_parent_segments_stay_inside(self, tmp_path: Path) -> None:
        file = FileContext(str(tmp_path / "other" / "Nav.jsx"))
        target = catalog_path(file, "out", cwd=str(tmp_path / "project"))
        assert target == Path("out/other/Nav.json")


class TestEmitCatalog:
    def test_sets_metadata_even_without_messages_dir(self) -> None:
        file = FileContext("Header.js")
        result = emit_catalog([MessageDescriptor("a", None, "A")], file, PassOptions())

        assert result is None
        assert file.metadata[METADATA_KEY] == {"messages": [{"id": "a", "defaultMessage": "A"}]}

    def test_writes_catalog(self, in_tmp: Path) -> None:
        file = FileContext(os.path.join("src", "Header.js"))
        options = PassOptions(messages_dir="messages")

        target = emit_catalog([MessageDescriptor("b"), MessageDescriptor("a")], file, options)

        assert target == Path("messages/src/Header.json")
        data = json.loads((in_tmp / "messages" / "src" / "Header.json").read_text())
        assert [d["id"] for d in data] == ["a", "b"]

    def test_no_file_for_empty_catalog(self, in_tmp: Path) -> None:
        file = FileContext("Header.js")
        target = emit_catalog([], file, PassOptions(messages_dir="messages"))

        assert target is None
        assert not (in_tmp / "messages").exists()
        assert file.metadata[METADATA_KEY] == {"messages": []}
