"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from intlpass.config import PassOptions
from intlpass.host import FileContext
from intlpass.session import TraversalSession


@pytest.fixture
def session() -> TraversalSession:
    """A fresh per-file session for components/Header.js."""
    return TraversalSession(file=FileContext(filename="components/Header.js"))


@pytest.fixture
def frontend():
    """tree-sitter front end; skips when tree-sitter is not installed."""
    pytest.importorskip("tree_sitter", reason="tree-sitter not installed")
    pytest.importorskip("tree_sitter_javascript", reason="tree-sitter-javascript not installed")
    from intlpass.frontend import JavaScriptFrontend

    return JavaScriptFrontend()


@pytest.fixture
def run_pass(frontend) -> Callable[..., Any]:
    """Transform a source string with camelCase option overrides."""
    from intlpass import transform_source

    def run(source: str, filename: str = "components/Header.js", **options: Any):
        return transform_source(source, filename, PassOptions.from_dict(options), frontend=frontend)

    return run
