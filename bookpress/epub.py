"""EPUB 3 package: chapter XHTML, nav document, manifest, spine, OPF, container.

`build_package` is pure apart from image lookups: it returns every file as
text plus the list of images to copy. `write_package` puts it on disk, and
`archive.pack_epub` zips the result.
"""

from __future__ import annotations

import html
import posixpath
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from .chapters import Chapter, build_chapters
from .config import BookConfig
from .fileio import copy_file, write_output
from .images import ImageResolver, image_references
from .markdown import markdown_to_html, stash_code_blocks, strip_inline_markdown
from .styles import EPUB_CSS

MIMETYPE = "application/epub+zip"
XHTML_TYPE = "application/xhtml+xml"

CONTAINER_PATH = "META-INF/container.xml"
OPF_PATH = "content.opf"
NAV_ID = "nav"
NAV_HREF = "nav.xhtml"
STYLESHEET_ID = "css"
STYLESHEET_HREF = "styles/epub.css"

CONTAINER_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
    <rootfiles>
        <rootfile full-path="{OPF_PATH}" media-type="application/oebps-package+xml"/>
    </rootfiles>
</container>
"""


@dataclass(frozen=True)
class ManifestItem:
    id: str
    href: str
    media_type: str
    properties: str = ""

    def to_xml(self) -> str:
        props = f' properties="{self.properties}"' if self.properties else ""
        return (
            f'<item id="{html.escape(self.id)}" href="{html.escape(self.href)}" '
            f'media-type="{self.media_type}"{props}/>'
        )


@dataclass(frozen=True)
class ImageAsset:
    ref: str  # as written in the manuscript
    href: str  # path inside the package
    media_type: str


@dataclass
class Package:
    chapters: list[Chapter]
    manifest: list[ManifestItem]
    spine: list[str]
    files: dict[str, str] = field(default_factory=dict)
    images: list[ImageAsset] = field(default_factory=list)
    missing_images: list[str] = field(default_factory=list)
    skipped_images: list[str] = field(default_factory=list)


def package_href(ref: str) -> str | None:
    """Where an image reference lives inside the package, or None if it would escape it."""
    ref = ref.strip().replace("\\", "/")
    if not ref or "://" in ref or ref.startswith("/") or re.match(r"^[A-Za-z]:", ref):
        return None
    norm = posixpath.normpath(ref)
    if norm == ".." or norm.startswith("../"):
        return None
    return norm


def collect_images(
    chapters: list[Chapter], resolver: ImageResolver
) -> tuple[list[ImageAsset], list[str], list[str]]:
    """Images to package, references that don't resolve, and references left out."""
    assets: list[ImageAsset] = []
    missing: list[str] = []
    skipped: list[str] = []
    seen: set[str] = set()
    for chapter in chapters:
        text, _ = stash_code_blocks(chapter.markdown)
        for _, ref in image_references(text):
            if not resolver.exists(ref):
                if ref not in missing:
                    missing.append(ref)
                continue
            href = package_href(ref)
            if href is None:
                if ref not in skipped:
                    skipped.append(ref)
                continue
            if href in seen:
                continue
            seen.add(href)
            assets.append(ImageAsset(ref=ref, href=href, media_type=resolver.media_type(ref)))
    return assets, missing, skipped


def build_manifest(chapters: list[Chapter], images: list[ImageAsset]) -> list[ManifestItem]:
    """Nav first, then chapters in reading order, the stylesheet, then images."""
    items = [ManifestItem(NAV_ID, NAV_HREF, XHTML_TYPE, properties="nav")]
    items += [ManifestItem(ch.id, ch.file_name, XHTML_TYPE) for ch in chapters]
    items.append(ManifestItem(STYLESHEET_ID, STYLESHEET_HREF, "text/css"))
    items += [
        ManifestItem(f"image-{i}", img.href, img.media_type)
        for i, img in enumerate(images, start=1)
    ]
    return items


def build_spine(chapters: list[Chapter]) -> list[str]:
    # The nav document is metadata only; it never joins the reading order.
    return [ch.id for ch in chapters]


def chapter_xhtml(title: str, body: str, language: str = "en") -> str:
    lang = html.escape(language)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" xml:lang="{lang}" lang="{lang}">
<head>
    <meta charset="UTF-8"/>
    <title>{html.escape(title)}</title>
    <link rel="stylesheet" type="text/css" href="{STYLESHEET_HREF}"/>
</head>
<body>
{body}
</body>
</html>
"""


def nav_xhtml(book: BookConfig, chapters: list[Chapter]) -> str:
    items = "\n".join(
        f'            <li><a href="{ch.file_name}">{html.escape(strip_inline_markdown(ch.title))}</a></li>'
        for ch in chapters
    )
    heading = html.escape(book.toc_heading)
    lang = html.escape(book.language)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" xml:lang="{lang}" lang="{lang}">
<head>
    <meta charset="UTF-8"/>
    <title>{heading}</title>
    <link rel="stylesheet" type="text/css" href="{STYLESHEET_HREF}"/>
</head>
<body>
    <nav epub:type="toc" id="toc">
        <h1>{heading}</h1>
        <ol>
{items}
        </ol>
    </nav>
</body>
</html>
"""


def content_opf(
    book: BookConfig,
    manifest: list[ManifestItem],
    spine: list[str],
    modified: datetime,
) -> str:
    meta = [
        f'<dc:identifier id="uid">{html.escape(book.uid)}</dc:identifier>',
        f"<dc:title>{html.escape(book.title)}</dc:title>",
        f"<dc:creator>{html.escape(book.author)}</dc:creator>",
        f"<dc:language>{html.escape(book.language)}</dc:language>",
    ]
    if book.publisher:
        meta.append(f"<dc:publisher>{html.escape(book.publisher)}</dc:publisher>")
    if book.description:
        meta.append(f"<dc:description>{html.escape(book.description)}</dc:description>")
    meta.append(f"<dc:date>{modified.date().isoformat()}</dc:date>")
    meta.append(f'<meta property="dcterms:modified">{modified.strftime("%Y-%m-%dT%H:%M:%SZ")}</meta>')

    nl = "\n        "
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package version="3.0" xmlns="http://www.idpf.org/2007/opf" unique-identifier="uid" xml:lang="{html.escape(book.language)}">
    <metadata xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:opf="http://www.idpf.org/2007/opf">
        {nl.join(meta)}
    </metadata>
    <manifest>
        {nl.join(item.to_xml() for item in manifest)}
    </manifest>
    <spine>
        {nl.join(f'<itemref idref="{idref}"/>' for idref in spine)}
    </spine>
</package>
"""


def build_package(
    manuscript: str,
    book: BookConfig,
    resolver: ImageResolver,
    *,
    modified: datetime | None = None,
) -> Package:
    """Convert every chapter on its own and assemble the package files."""
    if modified is None:
        modified = datetime.now(timezone.utc)
    options = book.convert_options("epub")

    chapters = build_chapters(manuscript, book.chapter_pattern, book.untitled_chapter)
    images, missing, skipped = collect_images(chapters, resolver)
    manifest = build_manifest(chapters, images)
    spine = build_spine(chapters)

    files: dict[str, str] = {
        "mimetype": MIMETYPE,
        CONTAINER_PATH: CONTAINER_XML,
        OPF_PATH: content_opf(book, manifest, spine, modified),
        NAV_HREF: nav_xhtml(book, chapters),
        STYLESHEET_HREF: EPUB_CSS,
    }
    for ch in chapters:
        body = markdown_to_html(ch.markdown, resolver, options=options)
        files[ch.file_name] = chapter_xhtml(strip_inline_markdown(ch.title), body, book.language)

    return Package(
        chapters=chapters,
        manifest=manifest,
        spine=spine,
        files=files,
        images=images,
        missing_images=missing,
        skipped_images=skipped,
    )


def write_package(package: Package, out_dir: Path, resolver: ImageResolver) -> list[Path]:
    """Write the package below `out_dir`, replacing chapter files from earlier runs."""
    out_dir = Path(out_dir)
    if out_dir.is_dir():
        for stale in out_dir.glob("chapter-*.xhtml"):
            stale.unlink()

    written: list[Path] = []
    for rel, content in package.files.items():
        dst = out_dir / rel
        write_output(dst, content)
        written.append(dst)
    for img in package.images:
        dst = out_dir / img.href
        copy_file(resolver.locate(img.ref), dst)
        written.append(dst)
    return written
