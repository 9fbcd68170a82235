from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import pytest

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


def write_chapter(
    folder: Path,
    name: str,
    body: str,
    *,
    title: Optional[str] = None,
    css: Optional[Dict[str, str]] = None,
    images: Optional[Dict[str, bytes]] = None,
) -> Path:
    """Write ``<name>.html`` and its ``<name>_files/`` assets under ``folder``."""

    assets = folder / f"{name}_files"
    if css or images:
        assets.mkdir(parents=True, exist_ok=True)
    for file_name, text in (css or {}).items():
        (assets / file_name).write_text(text, encoding="utf-8")
    for file_name, payload in (images or {}).items():
        (assets / file_name).write_bytes(payload)

    title_html = f'<div class="chapTitle">{title}</div>' if title is not None else ""
    page = (
        "<html><head><meta charset=\"utf-8\"><title>scraped</title></head><body>"
        f"{title_html}{body}</body></html>"
    )
    path = folder / f"{name}.html"
    path.write_text(page, encoding="utf-8")
    return path


@pytest.fixture
def book_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "book"
    folder.mkdir()
    return folder
