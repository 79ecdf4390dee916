"""Catalog emission at the end of a file."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from intlpass.config import METADATA_KEY, PassOptions
from intlpass.host import FileContext
from intlpass.models import MessageDescriptor

logger = logging.getLogger(__name__)


def sort_descriptors(descriptors: list[MessageDescriptor]) -> list[MessageDescriptor]:
    """Order descriptors by case-insensitive id."""
    return sorted(descriptors, key=lambda d: (d.id or "").lower())


def catalog_path(file: FileContext, messages_dir: str, cwd: str | None = None) -> Path:
    """
    Where a file's catalog goes.

    The source path relative to the working directory is mirrored under
    messages_dir and the file gets ``<basename>.json``.
    """
    relative = os.path.relpath(os.path.abspath(file.filename), cwd or os.getcwd())
    # Anchoring at the root keeps "../" segments from escaping messages_dir.
    anchored = Path(os.path.normpath(os.path.join(os.sep, relative)))
    return Path(messages_dir) / anchored.parent.relative_to(os.sep) / f"{file.basename}.json"


def render_catalog(descriptors: list[MessageDescriptor]) -> str:
    """Serialize descriptors as the pretty-printed JSON catalog."""
    entries = [d.to_dict() for d in sort_descriptors(descriptors)]
    return json.dumps(entries, indent=2, ensure_ascii=False)


def emit_catalog(
    descriptors: list[MessageDescriptor],
    file: FileContext,
    options: PassOptions,
) -> Path | None:
    """
    Attach descriptors to the file metadata and optionally write them to disk.

    Returns:
        The written catalog path, or None when nothing was written.
    """
    file.metadata[METADATA_KEY] = {"messages": [d.to_dict() for d in descriptors]}

    if not options.messages_dir or not descriptors:
        return None

    target = catalog_path(file, options.messages_dir)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_catalog(descriptors), encoding="utf-8")
    logger.info("Wrote %d messages to %s", len(descriptors), target)
    return target
