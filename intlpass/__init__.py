"""
intlpass: i18n message extraction and rewriting for React sources

Usage:
    import intlpass

    # Transform one file's source
    result = intlpass.transform_source(code, "src/Header.js")
    print(result.code)
    for message in result.messages:
        print(message.id, message.default_message)

    # Extract catalogs for a whole tree
    options = intlpass.PassOptions(messages_dir="build/messages")
    summary = intlpass.extract(["src"], options)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from intlpass.config import PassOptions
from intlpass.frontend import FILE_EXTENSIONS, JavaScriptFrontend
from intlpass.generator import generate
from intlpass.host import FileContext
from intlpass.models import (
    ConfigError,
    ExtractResult,
    IntlError,
    MessageDescriptor,
    SourceParseError,
    TransformResult,
)
from intlpass.models import (
    MarkupMode as MarkupMode,
)
from intlpass.plugin import IntlPass
from intlpass.traverse import transform

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ExtractResult",
    "IntlError",
    "IntlPass",
    "MessageDescriptor",
    "PassOptions",
    "TransformResult",
    "collect_files",
    "extract",
    "transform_source",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]

SKIP_DIRS = {
    ".git",
    "node_modules",
    "bower_components",
    "dist",
    "build",
    "coverage",
    ".cache",
    ".next",
}


def collect_files(
    paths: Iterable[str | Path],
    extensions: Iterable[str] = FILE_EXTENSIONS,
) -> list[tuple[Path, Path]]:
    """
    Expand files and directories into source files.

    Returns:
        (file, relative path) pairs. The relative path is taken from the
        directory argument the file was found under, or is the bare file
        name for file arguments.
    """
    suffixes = set(extensions)
    found: list[tuple[Path, Path]] = []
    for raw in paths:
        root = Path(raw)
        if root.is_file():
            found.append((root, Path(root.name)))
            continue
        if not root.is_dir():
            raise FileNotFoundError(f"No such file or directory: {root}")
        for file_path in sorted(root.rglob("*")):
            if not file_path.is_file() or file_path.suffix not in suffixes:
                continue
            relative = file_path.relative_to(root)
            if any(part in SKIP_DIRS for part in relative.parts[:-1]):
                continue
            found.append((file_path, relative))
    return found


def transform_source(
    source: str,
    filename: str = "<source>",
    options: PassOptions | None = None,
    frontend: JavaScriptFrontend | None = None,
    intl_pass: IntlPass | None = None,
) -> TransformResult:
    """
    Parse, transform and print one file.

    Args:
        source: JavaScript/JSX source text.
        filename: Used for error messages and the catalog location.
        options: Pass options; ignored when intl_pass is given.
        frontend: Reusable parser instance.
        intl_pass: Reusable pass instance.

    Raises:
        IntlError: Parse failures and extraction errors.
    """
    frontend = frontend or JavaScriptFrontend()
    intl_pass = intl_pass or IntlPass(options)

    tree = frontend.parse(source, filename)
    file = FileContext(filename=filename)
    messages = transform(tree, file, intl_pass)
    catalog = intl_pass.last_catalog
    return TransformResult(
        filename=filename,
        code=generate(tree),
        messages=messages,
        warnings=list(file.warnings),
        catalog_path=str(catalog) if catalog is not None else None,
    )


def extract(
    paths: Iterable[str | Path],
    options: PassOptions | None = None,
    out_dir: str | Path | None = None,
    progress_callback: ProgressCallback | None = None,
) -> ExtractResult:
    """
    Run the pass over every source file under paths.

    Per-file errors are collected rather than raised so one bad file does
    not stop the run.

    Args:
        paths: Files and directories to process.
        options: Pass options (messages_dir decides whether catalogs are written).
        out_dir: When given, rewritten sources are written under it,
            mirroring their location below the input directory.
        progress_callback: Optional callback(current, total, file_path).
    """
    frontend = JavaScriptFrontend()
    intl_pass = IntlPass(options)
    summary = ExtractResult()

    files = collect_files(paths, frontend.get_file_extensions())
    total = len(files)
    for i, (file_path, relative) in enumerate(files):
        if progress_callback:
            progress_callback(i + 1, total, str(relative))
        try:
            source = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            summary.errors.append(SourceParseError(f"Not UTF-8 text: {e}", None, str(file_path)))
            continue

        try:
            result = transform_source(source, str(file_path), frontend=frontend, intl_pass=intl_pass)
        except IntlError as e:
            if e.filename is None:
                e.filename = str(file_path)
            logger.debug("Failed %s: %s", file_path, e)
            summary.errors.append(e)
            continue

        if out_dir is not None:
            target = Path(out_dir) / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(result.code, encoding="utf-8")
        summary.results.append(result)

    logger.info(
        "Processed %d files, %d messages, %d errors",
        len(summary.results),
        summary.message_count,
        len(summary.errors),
    )
    return summary
