"""intlpass command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from intlpass.config import PassOptions


def _add_pass_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("paths", nargs="+", help="Source files or directories")
    parser.add_argument("--messages-dir", help="Write per-file message catalogs under this directory")
    parser.add_argument("--out-dir", help="Write rewritten sources under this directory")
    parser.add_argument(
        "--config",
        help="Config file or directory containing .intlpassrc.json (default: cwd)",
    )
    parser.add_argument(
        "--enforce-descriptions",
        action="store_true",
        default=None,
        help="Require a description on every message",
    )
    parser.add_argument(
        "--markup-mode",
        choices=["attribute", "descriptor"],
        help="How component props are extracted (default: attribute)",
    )
    parser.add_argument(
        "--normalize-field",
        choices=["id", "defaultMessage"],
        help="Field normalized as ICU MessageFormat (default: id)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="intlpass",
        description="intlpass: extract i18n messages and rewrite React sources",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- extract --
    p_extract = subparsers.add_parser("extract", help="Extract messages and rewrite sources")
    _add_pass_options(p_extract)

    # -- watch --
    p_watch = subparsers.add_parser("watch", help="Re-run extraction when sources change")
    _add_pass_options(p_watch)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    handlers = {
        "extract": cmd_extract,
        "watch": cmd_watch,
    }
    handlers[args.command](args)


def _load_options(args: argparse.Namespace) -> PassOptions:
    base = PassOptions.load(Path(args.config) if args.config else Path.cwd())
    return base.merged(
        {
            "messagesDir": args.messages_dir,
            "enforceDescriptions": args.enforce_descriptions,
            "markupMode": args.markup_mode,
            "normalizeField": args.normalize_field,
        }
    )


def _run(args: argparse.Namespace) -> bool:
    """One extraction pass. Returns True when every file succeeded."""
    import intlpass

    try:
        options = _load_options(args)
        summary = intlpass.extract(args.paths, options, out_dir=args.out_dir)
    except (intlpass.IntlError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return False

    for error in summary.errors:
        print(f"Error: {error}", file=sys.stderr)
        hint = getattr(error, "hint", None)
        if hint:
            print(f"  {hint}", file=sys.stderr)

    print(f"Processed {len(summary.results)} files, {summary.message_count} messages")
    return not summary.errors


def cmd_extract(args: argparse.Namespace) -> None:
    if not _run(args):
        sys.exit(1)


def cmd_watch(args: argparse.Namespace) -> None:
    try:
        from watchdog.events import FileSystemEventHandler
        from watchdog.observers import Observer
    except ImportError:
        print(
            "Watch dependencies not installed. Install with:\n"
            "  pip install intlpass[watch]",
            file=sys.stderr,
        )
        sys.exit(1)

    import time

    from intlpass.frontend import FILE_EXTENSIONS

    def is_source(event: object) -> bool:
        src_path = getattr(event, "src_path", "")
        if isinstance(src_path, bytes):
            src_path = src_path.decode()
        return str(src_path).endswith(FILE_EXTENSIONS)

    class ExtractHandler(FileSystemEventHandler):  # type: ignore[misc]
        def __init__(self) -> None:
            self._pending = False

        def on_modified(self, event: object) -> None:
            if is_source(event):
                self._pending = True

        def on_created(self, event: object) -> None:
            if is_source(event):
                self._pending = True

        def on_deleted(self, event: object) -> None:
            if is_source(event):
                self._pending = True

    _run(args)

    handler = ExtractHandler()
    observer = Observer()
    watched = [Path(p).resolve() for p in args.paths]
    for path in watched:
        if path.is_dir():
            observer.schedule(handler, str(path), recursive=True)
        else:
            observer.schedule(handler, str(path.parent), recursive=False)
    observer.start()

    print(f"Watching {', '.join(str(p) for p in watched)} for changes... (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(1)
            if handler._pending:
                handler._pending = False
                _run(args)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()


if __name__ == "__main__":
    main()
