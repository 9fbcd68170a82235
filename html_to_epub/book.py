"""Thin wrapper around :class:`ebooklib.epub.EpubBook` used while assembling a book.

Chapters register stylesheets, images and sections here; nothing touches the
archive until :meth:`EpubBookWriter.write` is called.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Dict, List

from ebooklib import epub

LOGGER = logging.getLogger(__name__)

IMAGES_DIR = "images"
STYLES_DIR = "css"


class EpubBookWriter:
    """Collects chapter content into an EPUB book and writes it out."""

    def __init__(self, title: str, author: str, *, language: str = "en") -> None:
        self.book = epub.EpubBook()
        self.book.set_identifier(f"urn:uuid:{uuid.uuid4()}")
        self.book.set_title(title)
        self.book.set_language(language)
        self.book.add_author(author)
        self.title = title
        self.sections: List[epub.EpubHtml] = []
        self._image_count = 0
        self._style_count = 0
        # nav.xhtml is taken by the navigation document written in write()
        self._section_names: Dict[str, int] = {"nav.xhtml": 1}

    def add_stylesheet(self, css: str) -> epub.EpubItem:
        self._style_count += 1
        uid = f"style_{self._style_count:04d}"
        item = epub.EpubItem(
            uid=uid,
            file_name=f"{STYLES_DIR}/{uid}.css",
            media_type="text/css",
            content=css,
        )
        self.book.add_item(item)
        return item

    def add_image(self, source: Path, content: bytes | None = None) -> str:
        """Embed ``source`` and return the path to use in ``src`` attributes.

        ``content`` may be passed when the caller already read the file. Every
        call embeds a new copy under a generated name, so identical basenames
        from different chapters never collide.
        """

        if content is None:
            content = source.read_bytes()
        self._image_count += 1
        uid = f"image_{self._image_count:04d}"
        href = f"{IMAGES_DIR}/{uid}{source.suffix.lower()}"
        self.book.add_item(epub.EpubImage(uid=uid, file_name=href, content=content))
        LOGGER.debug("Embedded %s as %s", source, href)
        return href

    def _unique_section_name(self, file_name: str) -> str:
        seen = self._section_names.get(file_name, 0)
        self._section_names[file_name] = seen + 1
        if seen == 0:
            return file_name
        base, dot, extension = file_name.rpartition(".")
        if not dot:
            base, extension = file_name, ""
        candidate = f"{base}_{seen + 1}{dot}{extension}"
        LOGGER.warning("Section file %s already used; writing %s", file_name, candidate)
        return self._unique_section_name(candidate)

    def add_section(
        self,
        html: str,
        label: str,
        file_name: str,
        stylesheet: epub.EpubItem | None = None,
    ) -> epub.EpubHtml:
        section = epub.EpubHtml(
            uid=f"section_{len(self.sections) + 1:04d}",
            title=label,
            file_name=self._unique_section_name(file_name),
            lang=self.book.language,
        )
        section.content = html
        if stylesheet is not None:
            section.add_item(stylesheet)
        self.book.add_item(section)
        self.sections.append(section)
        return section

    def write(self, output_path: Path) -> Path:
        self.book.toc = tuple(self.sections)
        self.book.add_item(epub.EpubNcx())
        self.book.add_item(epub.EpubNav())
        self.book.spine = list(self.sections)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        epub.write_epub(str(output_path), self.book, {})
        LOGGER.info("Saved %s (%d sections)", output_path, len(self.sections))
        return output_path


__all__ = ["EpubBookWriter"]
