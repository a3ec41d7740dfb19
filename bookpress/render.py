"""HTML fragments emitted by the conversion pipeline.

Every piece of markup the pipeline produces is spelled out here, so the stage
logic in `markdown.py` can be exercised with a different `Markup` subclass.
Output is XHTML-safe (self-closed void elements, escaped attributes).
"""

from __future__ import annotations

import html
import re


def escape_attr(value: str) -> str:
    return html.escape(value, quote=True)


def literal_text(value: str) -> str:
    """Escape text so no later Markdown pass can reinterpret it.

    `*`, `` ` `` and `[` become numeric entities: they display unchanged, so
    visible alt text and placeholder paths still read exactly as written.
    """
    s = html.escape(value, quote=False)
    s = s.replace("*", "&#42;").replace("`", "&#96;").replace("[", "&#91;")
    return s


class Markup:
    """Block and inline markup for the preview and EPUB outputs."""

    # Lines starting with one of these are finished blocks, never paragraph text.
    BLOCK_RE = re.compile(r"^<(?:h[1-6]|ul|ol|div|pre|p|blockquote|hr)\b")

    def is_block(self, line: str) -> bool:
        return bool(self.BLOCK_RE.match(line))

    # ── block level ──────────────────────────────────────────────

    def heading(self, level: int, text: str) -> str:
        return f"<h{level}>{text}</h{level}>"

    def rule(self) -> str:
        return "<hr />"

    def blockquote(self, lines: list[str]) -> str:
        body = "".join(f"<p>{line.strip()}</p>" for line in lines if line.strip())
        return f"<blockquote>{body}</blockquote>"

    def paragraph(self, text: str) -> str:
        return f"<p>{text}</p>"

    def image(self, src: str, alt: str, caption: bool = False) -> str:
        cap = ""
        if caption and alt:
            cap = f'<p class="image-caption">{literal_text(alt)}</p>'
        return (
            f'<div class="image-container">'
            f'<img src="{escape_attr(src)}" alt="{escape_attr(alt)}" class="book-image" />'
            f"{cap}</div>"
        )

    def image_placeholder(
        self, alt: str, path: str, *, icon: str, image_label: str, path_label: str
    ) -> str:
        """Stand-in for an image whose file is missing; echoes the reference as written."""
        return (
            f'<div class="image-placeholder" data-path="{escape_attr(path)}">'
            f'<div class="placeholder-icon">{icon}</div>'
            f'<div class="placeholder-text">&#91;{image_label}: {literal_text(alt)}]</div>'
            f'<div class="placeholder-path">{path_label}: {literal_text(path)}</div>'
            f"</div>"
        )

    def image_description(self, text: str) -> str:
        return f'<p class="image-description">{text}</p>'

    def toc(self, titles: list[str]) -> str:
        items = "".join(
            f'<li class="toc-item"><span class="toc-number">{n}.</span> '
            f'<span class="toc-title">{title}</span></li>'
            for n, title in enumerate(titles, start=1)
        )
        return f'<div class="toc-container"><ol class="toc-list">{items}</ol></div>'

    def list_item(self, text: str, *, indent: int = 0, value: int | None = None) -> str:
        attrs = ""
        if value is not None:
            attrs += f' value="{value}"'
        if indent > 0:
            attrs += f' style="margin-left: {indent * 20}px"'
        return f"<li{attrs}>{text}</li>"

    def list_block(self, kind: str, items: list[str]) -> str:
        return f"<{kind}>{''.join(items)}</{kind}>"

    def code_block(self, code: str, language: str = "") -> str:
        cls = f' class="language-{escape_attr(language)}"' if language else ""
        return f"<pre><code{cls}>{html.escape(code, quote=False)}</code></pre>"

    # ── inline ───────────────────────────────────────────────────

    def strong(self, text: str) -> str:
        return f"<strong>{text}</strong>"

    def emphasis(self, text: str) -> str:
        return f"<em>{text}</em>"

    def code(self, text: str) -> str:
        return f"<code>{text.replace('<', '&lt;').replace('>', '&gt;')}</code>"

    def link(self, text: str, href: str) -> str:
        # Ampersands were already escaped with the surrounding text.
        return f'<a href="{href.replace(chr(34), "&quot;")}">{text}</a>'


XHTML = Markup()
