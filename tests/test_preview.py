from bookpress.config import BookConfig
from bookpress.preview import render_chapters, render_preview

MANUSCRIPT = """# Harbour Notes

Opening words.

## Chapter 1: Arrival

- crates
  - small crates

![Cover](images/cover.png)

_The harbour at dawn_

## Chapter 2: Departure

Bye.
"""


def _never(path):
    return False


def _always(path):
    return True


def test_one_section_per_chapter_in_order():
    sections = render_chapters(MANUSCRIPT, BookConfig(title="Harbour Notes"), _never)

    assert len(sections) == 3
    assert sections[0].startswith('    <section class="chapter" id="chapter-1">')
    assert "<h1>Harbour Notes</h1>" in sections[0]
    assert "<h2>Chapter 1: Arrival</h2>" in sections[1]
    assert sections[2].rstrip().endswith("</section>")


def test_preview_page_layout():
    page = render_preview(MANUSCRIPT, BookConfig(title="Harbour Notes", language="en"), _never)

    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Harbour Notes - Preview</title>" in page
    assert '<html lang="en">' in page
    assert ".preview-banner" in page
    assert page.index('class="preview-banner"') < page.index('<section class="chapter" id="chapter-1">')
    assert page.index('id="chapter-1"') < page.index('id="chapter-2"') < page.index('id="chapter-3"')


def test_preview_variant_behaviour():
    page = render_preview(MANUSCRIPT, BookConfig(title="Harbour Notes"), _always)

    assert '<li style="margin-left: 20px">small crates</li>' in page
    assert '<img src="images/cover.png" alt="Cover" class="book-image" /></div>' in page
    assert "image-caption" not in page.split("</style>")[1]
    assert '</div>\n<p class="image-description">The harbour at dawn</p>' in page


def test_missing_image_shows_placeholder():
    page = render_preview(MANUSCRIPT, BookConfig(title="Harbour Notes"), _never)

    assert 'data-path="images/cover.png"' in page
    assert "<img" not in page


def test_preview_title_and_options_from_config():
    book = BookConfig(title="T", preview_title="Proof copy", indent_lists=False)
    page = render_preview(MANUSCRIPT, book, _never)

    assert "<title>Proof copy</title>" in page
    assert "margin-left: 20px" not in page.split("</style>")[1]
