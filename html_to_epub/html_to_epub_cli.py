#!/usr/bin/env python3
"""CLI for turning a folder of scraped HTML chapters into a single EPUB."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from html_to_epub.chapter import ChapterError  # noqa: E402 - added to path at runtime
from html_to_epub.converter import convert_folder_to_epub  # noqa: E402

LOGGER = logging.getLogger("html_to_epub")


def _setup_logging(verbose: bool) -> None:
    if LOGGER.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="html-to-epub",
        description="Convert a folder of scraped HTML chapters into an EPUB",
    )
    parser.add_argument("input_folder", type=Path, help="Folder holding the *.html chapters")
    parser.add_argument("output_filename", type=Path, help="EPUB file to write")
    parser.add_argument("title", help="Book title (': A Very Short Introduction' is appended)")
    parser.add_argument("author", help="Book author")
    parser.add_argument(
        "--best-effort",
        action="store_true",
        help="Skip chapters that fail instead of aborting the whole run",
    )
    parser.add_argument(
        "--lazy-nav",
        action="store_true",
        help="Strip each navigation list separately instead of up to the last </ul> on the line",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        chapters = convert_folder_to_epub(
            args.input_folder,
            args.output_filename,
            args.title,
            args.author,
            strict=not args.best_effort,
            lazy_nav=args.lazy_nav,
        )
    except FileNotFoundError as exc:
        LOGGER.error("%s", exc)
        return 2
    except (ChapterError, OSError) as exc:
        LOGGER.error("Conversion failed: %s", exc)
        return 1
    LOGGER.info("Wrote %d chapters to %s", len(chapters), args.output_filename)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
