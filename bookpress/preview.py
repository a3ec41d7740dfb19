"""Single-page HTML preview of the whole manuscript."""

from __future__ import annotations

import html

from .chapters import build_chapters
from .config import BookConfig
from .images import ImageExists
from .markdown import markdown_to_html
from .styles import PREVIEW_CSS

BANNER = """    <div class="preview-banner">
      <h3>📱 Book preview</h3>
      <p>This page renders the manuscript the way the e-book will lay it out. In a reader you also get:</p>
      <ul>
        <li>Jumping to chapters from the table of contents</li>
        <li>Adjustable font size</li>
        <li>Bookmarks, highlights and notes</li>
      </ul>
      <p>Images that could not be found are shown as placeholders with the path that was looked up.</p>
    </div>"""


def render_chapters(manuscript: str, book: BookConfig, image_exists: ImageExists) -> list[str]:
    """One `<section>` per chapter, in manuscript order."""
    options = book.convert_options("preview")
    sections = []
    for ch in build_chapters(manuscript, book.chapter_pattern, book.untitled_chapter):
        body = markdown_to_html(ch.markdown, image_exists, options=options)
        sections.append(f'    <section class="chapter" id="{ch.id}">\n{body}\n    </section>')
    return sections


def render_preview(manuscript: str, book: BookConfig, image_exists: ImageExists) -> str:
    title = book.preview_title or f"{book.title} - Preview"
    content = "\n".join(render_chapters(manuscript, book, image_exists))
    return f"""<!DOCTYPE html>
<html lang="{html.escape(book.language)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{html.escape(title)}</title>
  <style>
{PREVIEW_CSS}
  </style>
</head>
<body>
  <div class="book-container">
{BANNER}
{content}
  </div>
</body>
</html>
"""
