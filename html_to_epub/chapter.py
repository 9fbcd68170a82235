"""Turn one scraped chapter page into an EPUB section.

A chapter is an ``.html`` file saved from the source site plus a sibling
``<name>_files/`` folder holding its stylesheets and images. The page title
lives in ``.chapTitle`` and the text in ``.chunkBody``; navigation lists and
print-page markers are stripped from the serialized body.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag
from bs4.dammit import EntitySubstitution
from ebooklib import epub

from .book import EpubBookWriter

LOGGER = logging.getLogger(__name__)

SECTION_EXTENSION = ".xhtml"
ASSETS_SUFFIX = "_files"

# "p. 123. Name" -> "Name", then "p. 45Name" -> "Name"
_PAGE_AND_NUMBER = re.compile(r"p. \d*. (.*)")
_PAGE_PREFIX = re.compile(r"p. \d+([a-zA-Z]+)")

_NAV_GREEDY = re.compile(r'<ul class="div1-nav">.*</ul>')
_NAV_LAZY = re.compile(r'<ul class="div1-nav">.*?</ul>')
_PRINT_PAGE = re.compile(r'<span id="\w*" class="printPage">p\. \d*</span>')
# Scraped pages sometimes carry the arrow mis-decoded as "â†µ".
_PRINT_PAGE_MARK = re.compile(
    r'<span title="\w*" class="printPageMark">(?:↵|â†µ)</span>'
)


class ChapterError(RuntimeError):
    """Raised when a chapter file or one of its assets cannot be processed."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


@dataclass
class Chapter:
    """A chapter registered with the book."""

    source_path: Path
    title: str
    file_name: str
    content: str
    images: Dict[str, str] = field(default_factory=dict)
    stylesheet: Optional[epub.EpubItem] = None


def assets_dir_for(html_path: Path) -> Path:
    return html_path.with_name(f"{html_path.stem}{ASSETS_SUFFIX}")


def clean_title(raw: str) -> str:
    title = _PAGE_AND_NUMBER.sub(r"\1", raw.strip())
    return _PAGE_PREFIX.sub(r"\1", title)


def section_file_name(title: str) -> str:
    name = title.replace("?", "")
    name = re.sub(r"[\\/]", "_", name)
    return name + SECTION_EXTENSION


def strip_site_markup(fragment: str, *, lazy_nav: bool = False) -> str:
    """Remove navigation lists and print-page markers from serialized HTML.

    The default navigation pattern is greedy: on a line holding two
    navigation lists, everything between them goes too. ``lazy_nav`` stops at
    the first closing ``</ul>`` instead.
    """

    nav_pattern = _NAV_LAZY if lazy_nav else _NAV_GREEDY
    fragment = nav_pattern.sub("", fragment)
    fragment = _PRINT_PAGE.sub("", fragment)
    return _PRINT_PAGE_MARK.sub("", fragment)


def _serialized_src(src: str) -> str:
    quoted = EntitySubstitution.quoted_attribute_value(EntitySubstitution.substitute_xml(src))
    return quoted[1:-1]


def replace_image_sources(fragment: str, image_map: Dict[str, str]) -> str:
    """Swap every original ``src`` string for its embedded asset path.

    Matching is on the serialized text, so sources are looked up in their
    entity-escaped form. All sources are replaced in a single pass, longest
    first, so "a.png" never clobbers part of "data.png".
    """

    if not image_map:
        return fragment
    targets = {_serialized_src(src): href for src, href in image_map.items()}
    pattern = re.compile(
        "|".join(re.escape(src) for src in sorted(targets, key=len, reverse=True))
    )
    return pattern.sub(lambda match: targets[match.group(0)], fragment)


def image_path_for(src: str, chapter_dir: Path) -> Path:
    unescaped = html.unescape(src).replace("%20", " ")
    # Root-relative sources still resolve under the chapter folder.
    return chapter_dir / unescaped.lstrip("/\\")


def _read_stylesheets(assets_dir: Path, html_path: Path) -> str:
    chunks: List[str] = []
    for css_path in sorted(assets_dir.glob("*.css")):
        try:
            chunks.append(css_path.read_bytes().decode("utf-8", errors="ignore"))
        except OSError as exc:
            raise ChapterError(html_path, f"could not read {css_path}: {exc}") from exc
    return "".join(chunks)


def _read_document(html_path: Path) -> BeautifulSoup:
    try:
        raw = html_path.read_bytes()
    except OSError as exc:
        raise ChapterError(html_path, f"could not open chapter: {exc}") from exc
    try:
        return BeautifulSoup(raw, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ChapterError(html_path, f"could not parse chapter: {exc}") from exc


def _extract_title(soup: BeautifulSoup) -> str:
    title = ""
    for node in soup.select(".chapTitle"):
        title = clean_title(node.get_text())
    return title


def _select_body(soup: BeautifulSoup, html_path: Path) -> Optional[Tag]:
    bodies = soup.select(".chunkBody")
    if not bodies:
        LOGGER.warning("No .chunkBody in %s; chapter skipped", html_path.name)
        return None
    if len(bodies) > 1:
        LOGGER.warning(
            "%d .chunkBody elements in %s; using the first",
            len(bodies),
            html_path.name,
        )
    return bodies[0]


def _load_images(body: Tag, html_path: Path) -> List[Tuple[str, Path, bytes]]:
    loaded: List[Tuple[str, Path, bytes]] = []
    seen = set()
    for img in body.find_all("img"):
        src = img.get("src")
        if src is None or src in seen:
            continue
        seen.add(src)
        local_path = image_path_for(src, html_path.parent)
        try:
            payload = local_path.read_bytes()
        except OSError as exc:
            raise ChapterError(html_path, f"could not add image {local_path}: {exc}") from exc
        loaded.append((src, local_path, payload))
    return loaded


def transform_chapter(
    html_path: Path,
    book: EpubBookWriter,
    *,
    lazy_nav: bool = False,
) -> Optional[Chapter]:
    """Register ``html_path`` as a section of ``book``.

    Every file is read before anything is registered, so a ``ChapterError``
    leaves the book untouched. Returns ``None`` when the page has no
    ``.chunkBody``.
    """

    stylesheet_text = _read_stylesheets(assets_dir_for(html_path), html_path)
    soup = _read_document(html_path)
    title = _extract_title(soup)

    body = _select_body(soup, html_path)
    if body is None:
        return None

    heading = soup.new_tag("h1")
    heading.string = title
    body.insert(0, heading)

    images = _load_images(body, html_path)
    fragment = body.decode_contents()

    stylesheet = book.add_stylesheet(stylesheet_text)
    image_map: Dict[str, str] = {}
    for src, local_path, payload in images:
        image_map[src] = book.add_image(local_path, payload)

    fragment = replace_image_sources(fragment, image_map)
    fragment = strip_site_markup(fragment, lazy_nav=lazy_nav)

    section = book.add_section(fragment, title, section_file_name(title), stylesheet)
    return Chapter(
        source_path=html_path,
        title=title,
        file_name=section.file_name,
        content=fragment,
        images=image_map,
        stylesheet=stylesheet,
    )


__all__ = [
    "Chapter",
    "ChapterError",
    "clean_title",
    "replace_image_sources",
    "strip_site_markup",
    "transform_chapter",
]
