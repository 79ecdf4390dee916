"""The transformation pass: routes host node events to the components."""

from __future__ import annotations

import logging
from pathlib import Path

from intlpass.calls import CallSiteRewriter
from intlpass.components import WrapperInjector, declaration_kind, has_wrapper_import
from intlpass.config import PassOptions
from intlpass.emitter import emit_catalog
from intlpass.host import (
    BindingResolver,
    ConfidentEvaluator,
    FileContext,
    ModuleBindingResolver,
    StaticEvaluator,
)
from intlpass.markup import MarkupExtractor
from intlpass.models import IntlError, MessageDescriptor
from intlpass.resolver import AliasNormalizer, ImportReferenceResolver
from intlpass.session import TraversalSession
from intlpass.tree import NodePath

logger = logging.getLogger(__name__)


class IntlPass:
    """
    Message extraction and i18n rewriting for one file at a time.

    The pass itself only holds options and capabilities. Per-file state lives
    in the ``TraversalSession`` created by ``enter_Program``; a host walking
    several files in parallel should use one pass object per worker.
    """

    def __init__(
        self,
        options: PassOptions | None = None,
        bindings: BindingResolver | None = None,
        evaluator: StaticEvaluator | None = None,
    ) -> None:
        self.options = options or PassOptions()
        self.bindings = bindings or ModuleBindingResolver()
        self.evaluator = evaluator or ConfidentEvaluator(self.bindings)
        self.resolver = ImportReferenceResolver(
            self.bindings, AliasNormalizer(self.options.path_aliases)
        )
        self.markup = MarkupExtractor(self.options, self.resolver, self.evaluator)
        self.calls = CallSiteRewriter(self.options, self.resolver, self.evaluator)
        self.components = WrapperInjector(self.options)
        self.session: TraversalSession | None = None
        self.last_messages: list[MessageDescriptor] = []
        self.last_catalog: Path | None = None

    def _require_session(self) -> TraversalSession:
        if self.session is None:
            raise RuntimeError("Node event received outside of a Program traversal")
        return self.session

    # === Program ===

    def enter_Program(self, path: NodePath, file: FileContext) -> None:
        self.last_messages = []
        self.last_catalog = None
        self.session = TraversalSession(file=file)
        self.session.wrapper_imported = has_wrapper_import(path.node, self.options)

    def exit_Program(self, path: NodePath, file: FileContext) -> None:
        session = self._require_session()
        try:
            self.last_messages = session.registry.snapshot()
            self.last_catalog = emit_catalog(self.last_messages, session.file, self.options)
        finally:
            self.session = None

    # === Declarations ===

    def enter_ExportNamedDeclaration(self, path: NodePath, file: FileContext) -> None:
        session = self._require_session()
        session.push_kind(declaration_kind(path.node))
        self.components.visit(path, session)

    def exit_ExportNamedDeclaration(self, path: NodePath, file: FileContext) -> None:
        self._require_session().pop_kind()

    # === Expressions ===

    def enter_JSXOpeningElement(self, path: NodePath, file: FileContext) -> None:
        self.markup.visit(path, self._require_session())

    def enter_CallExpression(self, path: NodePath, file: FileContext) -> None:
        self.calls.visit(path, self._require_session())

    def abort(self, error: IntlError) -> None:
        """Drop the current session after a fatal error."""
        if self.session is not None:
            if error.filename is None:
                error.filename = self.session.file.filename
            self.session = None
