"""Import reference resolution: is this identifier really the configured import?"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from intlpass.host import BindingResolver
from intlpass.tree import NodePath

logger = logging.getLogger(__name__)

DEFAULT_PATH_ALIASES = (
    "skybase-components",
    "skybase-core",
    "skybase-shell",
    "skybase-styling",
)


class AliasNormalizer:
    """
    Strip everything before an internal package marker in an import path.

    For example ``../../../../src/skybase-core/utils/translate`` becomes
    ``skybase-core/utils/translate``, so relative imports of any depth
    compare equal to the aliased form.
    """

    def __init__(self, aliases: Iterable[str] = DEFAULT_PATH_ALIASES) -> None:
        self.aliases = tuple(aliases)
        self._patterns = [
            (re.compile("^.*?" + re.escape(alias)), alias) for alias in self.aliases
        ]

    def __call__(self, source_path: str) -> str:
        result = source_path
        for pattern, alias in self._patterns:
            result = pattern.sub(alias, result, count=1)
        return result


def is_referenced_identifier(path: NodePath) -> bool:
    """Check that an identifier path is a value reference, not a key or label."""
    if not path.is_("Identifier", "JSXIdentifier"):
        return False
    parent = path.parent_node
    if parent is None:
        return True
    if parent.type in ("MemberExpression", "JSXMemberExpression") and path.key == "property":
        return bool(parent.get("computed"))
    if parent.type == "ObjectProperty" and path.key == "key":
        return bool(parent.get("computed"))
    if parent.type == "JSXAttribute" and path.key == "name":
        return False
    return True


class ImportReferenceResolver:
    """Decides whether identifier references point at a given import."""

    def __init__(
        self,
        bindings: BindingResolver,
        normalizer: AliasNormalizer | None = None,
    ) -> None:
        self.bindings = bindings
        self.normalizer = normalizer or AliasNormalizer()

    def references_import(
        self,
        path: NodePath | None,
        module_source: str,
        imported_names: Iterable[str] | None = None,
    ) -> bool:
        """
        Check whether path refers to an import from module_source.

        Args:
            path: Identifier or JSXIdentifier path.
            module_source: Module path to match after alias normalization.
            imported_names: Accepted imported names. None accepts any import
                of the module; "default" and "*" match default and namespace
                imports respectively.

        Returns:
            True on a match. Anything not bound to an import is False.
        """
        if path is None or not is_referenced_identifier(path):
            return False

        binding = self.bindings.get_binding(path)
        if binding is None or not binding.is_import:
            return False

        import_binding = binding.import_binding
        if self.normalizer(import_binding.module_path) != module_source:
            return False

        if imported_names is None:
            return True
        return import_binding.imported_name in set(imported_names)
