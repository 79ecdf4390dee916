"""Pass options: defaults, Babel-style option mapping, and config files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from intlpass.models import ConfigError, MarkupMode
from intlpass.resolver import DEFAULT_PATH_ALIASES

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".intlpassrc.json"

DEFAULT_MODULE_SOURCE_NAME = "skybase-core/utils/translate"
DEFAULT_MARKUP_SOURCE_NAME = "react-intl"
DEFAULT_WRAPPER_SOURCE_NAME = "react-intl"
DEFAULT_WRAPPER_NAME = "injectIntl"
METADATA_KEY = "react-intl"

NORMALIZE_FIELDS = ("id", "defaultMessage")

# camelCase option name -> dataclass attribute
_OPTION_NAMES = {
    "moduleSourceName": "module_source_name",
    "messagesDir": "messages_dir",
    "enforceDescriptions": "enforce_descriptions",
    "markupMode": "markup_mode",
    "normalizeField": "normalize_field",
    "pathAliases": "path_aliases",
    "componentNames": "component_names",
    "deprecatedComponentNames": "deprecated_component_names",
    "functionNames": "function_names",
    "bulkFunctionNames": "bulk_function_names",
    "componentBaseNames": "component_base_names",
    "excludedComponentName": "excluded_component_name",
    "wrapperName": "wrapper_name",
    "wrapperSourceName": "wrapper_source_name",
}


@dataclass
class PassOptions:
    """Configuration surface of the pass."""

    module_source_name: str | None = None
    messages_dir: str | None = None
    enforce_descriptions: bool = False
    markup_mode: MarkupMode = MarkupMode.ATTRIBUTE
    normalize_field: str = "id"
    path_aliases: tuple[str, ...] = DEFAULT_PATH_ALIASES
    component_names: tuple[str, ...] = ("FormattedMessage", "FormattedHTMLMessage")
    deprecated_component_names: tuple[str, ...] = ("FormattedPlural",)
    function_names: tuple[str, ...] = ("translate",)
    bulk_function_names: tuple[str, ...] = ("defineMessages",)
    component_base_names: tuple[str, ...] = ("Component", "PureComponent")
    excluded_component_name: str = "SbBaseComponent"
    wrapper_name: str = DEFAULT_WRAPPER_NAME
    wrapper_source_name: str = DEFAULT_WRAPPER_SOURCE_NAME
    internal_prefix: str = field(default="_", repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.markup_mode, str):
            try:
                self.markup_mode = MarkupMode(self.markup_mode)
            except ValueError:
                raise ConfigError(
                    f"Unknown markupMode {self.markup_mode!r}, "
                    f"expected one of {[m.value for m in MarkupMode]}"
                ) from None
        if self.normalize_field not in NORMALIZE_FIELDS:
            raise ConfigError(
                f"Unknown normalizeField {self.normalize_field!r}, "
                f"expected one of {list(NORMALIZE_FIELDS)}"
            )
        for name in (
            "path_aliases",
            "component_names",
            "deprecated_component_names",
            "function_names",
            "bulk_function_names",
            "component_base_names",
        ):
            value = getattr(self, name)
            if isinstance(value, str):
                value = (value,)
            setattr(self, name, tuple(value))

    @property
    def call_source_name(self) -> str:
        """Module the single-message helper is imported from."""
        return self.module_source_name or DEFAULT_MODULE_SOURCE_NAME

    @property
    def markup_source_name(self) -> str:
        """Module the markup components and bulk helper are imported from."""
        return self.module_source_name or DEFAULT_MARKUP_SOURCE_NAME

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PassOptions:
        """Build options from a Babel-style camelCase mapping."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            attr = _OPTION_NAMES.get(key, key)
            if attr not in known:
                logger.debug("Ignoring unknown option %r", key)
                continue
            kwargs[attr] = value
        return cls(**kwargs)

    @classmethod
    def load(cls, path: Path) -> PassOptions:
        """
        Load options from a JSON file.

        Args:
            path: A config file, or a directory containing .intlpassrc.json.
                A missing file yields default options.
        """
        config_path = path / CONFIG_FILENAME if path.is_dir() else path
        if not config_path.exists():
            return cls()

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a JSON object")
        return cls.from_dict(data)

    def merged(self, overrides: dict[str, Any]) -> PassOptions:
        """Return a copy with camelCase overrides applied (None values skipped)."""
        data = {
            camel: getattr(self, attr)
            for camel, attr in _OPTION_NAMES.items()
        }
        data.update({k: v for k, v in overrides.items() if v is not None})
        return PassOptions.from_dict(data)
