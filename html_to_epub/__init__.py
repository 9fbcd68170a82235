"""Public interface for building an EPUB from scraped HTML chapters."""

from .book import EpubBookWriter  # noqa: F401
from .chapter import (  # noqa: F401
    Chapter,
    ChapterError,
    clean_title,
    replace_image_sources,
    strip_site_markup,
    transform_chapter,
)
from .converter import TITLE_SUFFIX, convert_folder_to_epub  # noqa: F401
