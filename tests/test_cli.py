from __future__ import annotations

from pathlib import Path

import pytest

from html_to_epub.html_to_epub_cli import main
from tests.conftest import write_chapter


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["in", "out.epub", "Title"],
        ["in", "out.epub", "Title", "Author", "extra"],
    ],
)
def test_wrong_argument_count_is_usage_error(
    argv: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
    assert "usage: html-to-epub" in capsys.readouterr().err


def test_missing_input_folder_exits_2(tmp_path: Path) -> None:
    assert main([str(tmp_path / "absent"), str(tmp_path / "b.epub"), "T", "A"]) == 2


def test_converts_folder(book_dir: Path, tmp_path: Path) -> None:
    write_chapter(book_dir, "ch1", '<div class="chunkBody"><p>Hi</p></div>', title="p. 1. Intro")
    output = tmp_path / "book.epub"

    assert main([str(book_dir), str(output), "Cli", "Someone"]) == 0
    assert output.is_file()


def test_failed_chapter_exits_1_unless_best_effort(book_dir: Path, tmp_path: Path) -> None:
    write_chapter(book_dir, "ch1", '<div class="chunkBody"><p>Hi</p></div>', title="p. 1. Intro")
    write_chapter(
        book_dir,
        "ch2",
        '<div class="chunkBody"><img src="ch2_files/none.png"/></div>',
        title="p. 2. Broken",
    )
    output = tmp_path / "book.epub"

    assert main([str(book_dir), str(output), "Cli", "Someone"]) == 1
    assert not output.exists()

    assert main([str(book_dir), str(output), "Cli", "Someone", "--best-effort"]) == 0
    assert output.is_file()
