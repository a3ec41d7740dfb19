"""Markdown -> HTML conversion pipeline.

Each stage is a plain text -> text function. `markdown_to_html` runs them in
this order, and the order is part of the contract:

   1. fenced code blocks are stashed so no later stage rewrites code
   2. table of contents heading + link list
   3. headings
   4. horizontal rules
   5. blockquotes
   6. images (container or placeholder, decided by `image_exists`)
   7. image descriptions (`_text_` lines)
   8. inline spans: bold, italic, code, links
   9. lists
  10. paragraphs
  11. post-processing repairs
  12. stashed code blocks restored

Headings go before emphasis, emphasis before lists, lists before paragraph
wrapping, and the repairs run last.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .images import IMAGE_RE, ImageExists
from .render import XHTML, Markup


@dataclass(frozen=True)
class ConvertOptions:
    """Variant behaviour of the pipeline."""

    image_captions: bool = False
    image_descriptions: bool = True
    indent_lists: bool = True
    toc_heading: str = "Table of Contents"
    placeholder_icon: str = "📷"
    image_label: str = "Image"
    path_label: str = "Path"


PREVIEW_OPTIONS = ConvertOptions()
EPUB_OPTIONS = ConvertOptions(image_captions=True, image_descriptions=False, indent_lists=False)


CODE_FENCE_RE = re.compile(r"^```[ \t]*([\w+-]*)[^\n]*\n(.*?)^```[ \t]*$", re.MULTILINE | re.DOTALL)
CODE_MARK_RE = re.compile(r"<pre>\x00CODE(\d+)\x00</pre>")

HEADING_RE = re.compile(r"^(#{1,6}) (.*)$", re.MULTILINE)
RULE_RE = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$", re.MULTILINE)
TOC_ITEM_RE = re.compile(r"^- \[(.*?)\]\((.*?)\)\s*$")
DESCRIPTION_RE = re.compile(r"^[ \t]*_([^_\n]+)_[ \t]*$", re.MULTILINE)

# Tags emitted by the block stages; anything else is escaped as text.
TAG_RE = re.compile(
    r"</?(?:h[1-6]|p|div|img|hr|blockquote|pre|code|ol|ul|li|span|strong|em|a)\b[^<>\n]*>"
)
BARE_AMP_RE = re.compile(r"&(?!#?\w+;)")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"\*(.+?)\*")
CODE_SPAN_RE = re.compile(r"`(.+?)`")
LINK_RE = re.compile(r"\[(.*?)\]\((.*?)\)")

UNORDERED_RE = re.compile(r"^(\s*)- (.*)$")
ORDERED_RE = re.compile(r"^(\d+)\.\s+(.*)$")


def _no_images(path: str) -> bool:
    return False


# ── code fences ──────────────────────────────────────────────────

def stash_code_blocks(text: str, markup: Markup = XHTML) -> tuple[str, list[str]]:
    """Replace fenced code with one-line `<pre>` markers; return the rendered blocks."""
    blocks: list[str] = []

    def _stash(m: re.Match) -> str:
        blocks.append(markup.code_block(m.group(2).rstrip("\n"), m.group(1)))
        return f"<pre>\x00CODE{len(blocks) - 1}\x00</pre>"

    return CODE_FENCE_RE.sub(_stash, text), blocks


def restore_code_blocks(text: str, blocks: list[str]) -> str:
    return CODE_MARK_RE.sub(lambda m: blocks[int(m.group(1))], text)


# ── block level ──────────────────────────────────────────────────

def convert_table_of_contents(
    text: str, markup: Markup = XHTML, options: ConvertOptions = PREVIEW_OPTIONS
) -> str:
    """Turn the TOC heading and the link list under it into a numbered TOC box.

    Blank lines may separate the heading from the list; the first line that is
    not `- [title](target)` ends the list.
    """
    lines = text.split("\n")
    out: list[str] = []
    i = 0
    while i < len(lines):
        m = HEADING_RE.match(lines[i])
        if m and m.group(2).strip() == options.toc_heading:
            j = i + 1
            while j < len(lines) and not lines[j].strip():
                j += 1
            titles: list[str] = []
            while j < len(lines):
                item = TOC_ITEM_RE.match(lines[j])
                if not item:
                    break
                titles.append(item.group(1))
                j += 1
            if titles:
                out.append(markup.heading(len(m.group(1)), options.toc_heading))
                out.append(markup.toc(titles))
                i = j
                continue
        out.append(lines[i])
        i += 1
    return "\n".join(out)


def convert_headings(text: str, markup: Markup = XHTML) -> str:
    return HEADING_RE.sub(lambda m: markup.heading(len(m.group(1)), m.group(2).strip()), text)


def convert_horizontal_rules(text: str, markup: Markup = XHTML) -> str:
    return RULE_RE.sub(lambda m: markup.rule(), text)


def convert_blockquotes(text: str, markup: Markup = XHTML) -> str:
    """Collapse each run of `> ` lines into one blockquote."""
    out: list[str] = []
    quoted: list[str] = []
    for line in text.split("\n"):
        if line.startswith("> ") or line.rstrip() == ">":
            quoted.append(line[2:])
            continue
        if quoted:
            out.append(markup.blockquote(quoted))
            quoted = []
        out.append(line)
    if quoted:
        out.append(markup.blockquote(quoted))
    return "\n".join(out)


def convert_images(
    text: str,
    image_exists: ImageExists = _no_images,
    markup: Markup = XHTML,
    options: ConvertOptions = PREVIEW_OPTIONS,
) -> str:
    """Replace every `![alt](path)` with an image container or a placeholder.

    Each reference is checked on its own; the emitted block always sits on its
    own line so paragraph assembly never wraps it.
    """

    def _replace(m: re.Match) -> str:
        alt, path = m.group(1), m.group(2)
        if image_exists(path):
            block = markup.image(path, alt, caption=options.image_captions)
        else:
            block = markup.image_placeholder(
                alt,
                path,
                icon=options.placeholder_icon,
                image_label=options.image_label,
                path_label=options.path_label,
            )
        return f"\n{block}\n"

    return IMAGE_RE.sub(_replace, text)


def convert_image_descriptions(text: str, markup: Markup = XHTML) -> str:
    return DESCRIPTION_RE.sub(lambda m: markup.image_description(m.group(1).strip()), text)


# ── inline ───────────────────────────────────────────────────────

def format_inline(text: str, markup: Markup = XHTML) -> str:
    """Bold, italic, inline code, links, in that order.

    Markup emitted by earlier stages is protected from rewriting by swapping
    it for placeholders, then put back. Every other `&`, `<` and `>` is
    escaped, so the result is well-formed XHTML. Matching is non-greedy and
    first-match-wins; the same construct never nests inside itself.
    """
    protected: list[str] = []

    def _protect(m: re.Match) -> str:
        protected.append(m.group(0))
        return f"\x00PROTECT{len(protected) - 1}\x00"

    text = TAG_RE.sub(_protect, text)
    text = BARE_AMP_RE.sub("&amp;", text)
    text = text.replace("<", "&lt;").replace(">", "&gt;")

    text = BOLD_RE.sub(lambda m: markup.strong(m.group(1)), text)
    text = ITALIC_RE.sub(lambda m: markup.emphasis(m.group(1)), text)
    text = CODE_SPAN_RE.sub(lambda m: markup.code(m.group(1)), text)
    text = LINK_RE.sub(lambda m: markup.link(m.group(1), m.group(2)), text)

    for i, tag in enumerate(protected):
        text = text.replace(f"\x00PROTECT{i}\x00", tag)
    return text


def strip_inline_markdown(text: str) -> str:
    """Best-effort plain text for titles and navigation labels."""
    s = re.sub(r"\*\*(.+?)\*\*", r"\1", text)
    s = re.sub(r"\*(.+?)\*", r"\1", s)
    s = re.sub(r"`(.+?)`", r"\1", s)
    s = re.sub(r"\[(.*?)\]\((.*?)\)", r"\1", s)
    return s.strip()


# ── lists ────────────────────────────────────────────────────────

def convert_lists(text: str, markup: Markup = XHTML, options: ConvertOptions = PREVIEW_OPTIONS) -> str:
    """Group consecutive `- ` or `N. ` lines into one list per run.

    Two leading spaces on a bullet are one level of visual offset; ordered
    items keep the number they were written with.
    """
    out: list[str] = []
    kind: str | None = None
    items: list[str] = []

    for line in text.split("\n"):
        bullet = UNORDERED_RE.match(line)
        numbered = None if bullet else ORDERED_RE.match(line)
        if bullet:
            this = "ul"
            level = len(bullet.group(1)) // 2 if options.indent_lists else 0
            item = markup.list_item(bullet.group(2), indent=level)
        elif numbered:
            this = "ol"
            item = markup.list_item(numbered.group(2), value=int(numbered.group(1)))
        else:
            this = None

        if items and this != kind:
            out.append(markup.list_block(kind, items))
            items = []
        kind = this
        if this is None:
            out.append(line)
        else:
            items.append(item)

    if items:
        out.append(markup.list_block(kind, items))
    return "\n".join(out)


# ── paragraphs ───────────────────────────────────────────────────

def assemble_paragraphs(text: str, markup: Markup = XHTML) -> str:
    out: list[str] = []
    pending: list[str] = []

    def _flush() -> None:
        paragraph = " ".join(pending).strip()
        if paragraph:
            out.append(markup.paragraph(paragraph))
        pending.clear()

    for raw in text.split("\n"):
        line = raw.strip()
        if markup.is_block(line):
            _flush()
            out.append(line)
        elif not line:
            _flush()
        else:
            pending.append(line)
    _flush()
    return "\n".join(out)


# ── repairs ──────────────────────────────────────────────────────

_IMAGE_OPEN = r'<div class="image-(?:container|placeholder)"'

REPAIRS: list[tuple[re.Pattern[str], str]] = [
    # 1. empty paragraphs
    (re.compile(r"<p>\s*</p>"), ""),
    # 2. paragraph wrapped around an image block
    (re.compile(r"<p>\s*(?=" + _IMAGE_OPEN + ")"), ""),
    # 3. close/reopen adjacency around divs
    (re.compile(r"<p>\s*</div>"), "</div>"),
    (re.compile(r"</div>\s*</p>"), "</div>"),
    (re.compile(r"</div>\s*<p>"), "</div>\n<p>"),
    # 4. image description directly under its image
    (re.compile(r'</div>\s*<p class="image-description">'), '</div>\n<p class="image-description">'),
]


def post_process(html_text: str) -> str:
    """Apply the repairs until nothing changes, so a second run is a no-op."""
    while True:
        fixed = html_text
        for pattern, replacement in REPAIRS:
            fixed = pattern.sub(replacement, fixed)
        if fixed == html_text:
            return fixed
        html_text = fixed


# ── pipeline ─────────────────────────────────────────────────────

def markdown_to_html(
    markdown: str,
    image_exists: ImageExists = _no_images,
    *,
    markup: Markup = XHTML,
    options: ConvertOptions = PREVIEW_OPTIONS,
) -> str:
    """Convert one chapter (or any Markdown fragment) to an HTML fragment."""
    text = markdown.replace("\r\n", "\n")
    text, code_blocks = stash_code_blocks(text, markup)
    text = convert_table_of_contents(text, markup, options)
    text = convert_headings(text, markup)
    text = convert_horizontal_rules(text, markup)
    text = convert_blockquotes(text, markup)
    text = convert_images(text, image_exists, markup, options)
    if options.image_descriptions:
        text = convert_image_descriptions(text, markup)
    text = format_inline(text, markup)
    text = convert_lists(text, markup, options)
    text = assemble_paragraphs(text, markup)
    text = post_process(text)
    return restore_code_blocks(text, code_blocks)
