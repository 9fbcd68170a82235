"""Assemble a folder of scraped chapter pages into one EPUB."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .book import EpubBookWriter
from .chapter import Chapter, ChapterError, transform_chapter

LOGGER = logging.getLogger(__name__)

TITLE_SUFFIX = ": A Very Short Introduction"


def discover_chapters(folder: Path) -> List[Path]:
    return sorted(path for path in folder.glob("*.html") if path.is_file())


def convert_folder_to_epub(
    input_dir: str | Path,
    output_path: str | Path,
    title: str,
    author: str,
    *,
    strict: bool = True,
    lazy_nav: bool = False,
) -> List[Chapter]:
    """Build an EPUB from every ``*.html`` chapter directly under ``input_dir``.

    With ``strict`` (the default) the first chapter that fails aborts the run
    and no file is written. Otherwise the failure is logged and the chapter
    left out of the book.
    """

    input_path = Path(input_dir).expanduser()
    if not input_path.is_dir():
        raise FileNotFoundError(f"Input directory not found: {input_path}")

    chapter_files = discover_chapters(input_path)
    if not chapter_files:
        LOGGER.warning("No .html chapter files found in %s; writing an empty book", input_path)

    book = EpubBookWriter(f"{title}{TITLE_SUFFIX}", author)
    chapters: List[Chapter] = []
    for chapter_file in chapter_files:
        LOGGER.info("Formatting chapter %s", chapter_file)
        try:
            chapter = transform_chapter(chapter_file, book, lazy_nav=lazy_nav)
        except ChapterError as exc:
            if strict:
                raise
            LOGGER.warning("Skipping chapter %s: %s", chapter_file.name, exc)
            continue
        if chapter is not None:
            chapters.append(chapter)

    book.write(Path(output_path).expanduser())
    return chapters


__all__ = ["TITLE_SUFFIX", "convert_folder_to_epub", "discover_chapters"]
