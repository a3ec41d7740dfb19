import re
import zipfile
from datetime import datetime, timezone
from pathlib import Path

from bookpress.archive import pack_epub
from bookpress.config import BookConfig
from bookpress.epub import ManifestItem, build_package, package_href, write_package
from bookpress.images import ImageResolver

MODIFIED = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)

MANUSCRIPT = """# Harbour Notes

## Table of Contents

- [Chapter 1: Arrival](#c1)
- [Chapter 2: Departure](#c2)

## Chapter 1: Arrival

The **ship** came in.

![Cover](images/cover.png)

![Lost](images/lost.png)

## Chapter 2: Departure



## Chapter 3: Return & *Rest*

![Outside](../outside.png)

![Cover again](./images/cover.png)
"""


def _write_test_png(path: Path) -> None:
    from PIL import Image

    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (4, 4), color=(10, 200, 10)).save(path)


def _book_dir(tmp_path: Path) -> Path:
    base = tmp_path / "book"
    _write_test_png(base / "images" / "cover.png")
    _write_test_png(tmp_path / "outside.png")
    return base


def _package(tmp_path: Path):
    resolver = ImageResolver(_book_dir(tmp_path))
    book = BookConfig(title="Harbour Notes", author="A. Writer")
    return build_package(MANUSCRIPT, book, resolver, modified=MODIFIED), resolver


def test_chapters_manifest_and_spine_follow_reading_order(tmp_path):
    package, _ = _package(tmp_path)

    assert [ch.title for ch in package.chapters] == [
        "Harbour Notes",
        "Chapter 1: Arrival",
        "Chapter 2: Departure",
        "Chapter 3: Return & *Rest*",
    ]
    assert package.spine == ["chapter-1", "chapter-2", "chapter-3", "chapter-4"]
    assert "nav" not in package.spine
    assert [item.id for item in package.manifest] == [
        "nav",
        "chapter-1",
        "chapter-2",
        "chapter-3",
        "chapter-4",
        "css",
        "image-1",
    ]
    assert package.manifest[0] == ManifestItem("nav", "nav.xhtml", "application/xhtml+xml", properties="nav")
    assert package.manifest[-1] == ManifestItem("image-1", "images/cover.png", "image/png")


def test_every_chapter_manifest_item_is_in_spine(tmp_path):
    package, _ = _package(tmp_path)

    chapter_items = [item.id for item in package.manifest if item.href.startswith("chapter-")]
    assert chapter_items == package.spine


def test_nav_document_lists_chapters_in_order(tmp_path):
    package, _ = _package(tmp_path)
    nav = package.files["nav.xhtml"]

    entries = re.findall(r'<li><a href="(chapter-\d+\.xhtml)">(.*?)</a></li>', nav)
    assert entries == [
        ("chapter-1.xhtml", "Harbour Notes"),
        ("chapter-2.xhtml", "Chapter 1: Arrival"),
        ("chapter-3.xhtml", "Chapter 2: Departure"),
        ("chapter-4.xhtml", "Chapter 3: Return &amp; Rest"),
    ]
    assert 'epub:type="toc"' in nav


def test_content_opf(tmp_path):
    package, _ = _package(tmp_path)
    opf = package.files["content.opf"]

    assert re.findall(r'<itemref idref="([^"]+)"/>', opf) == package.spine
    assert '<item id="nav" href="nav.xhtml" media-type="application/xhtml+xml" properties="nav"/>' in opf
    assert '<item id="css" href="styles/epub.css" media-type="text/css"/>' in opf
    assert "<dc:title>Harbour Notes</dc:title>" in opf
    assert "<dc:creator>A. Writer</dc:creator>" in opf
    assert "<dc:date>2024-05-01</dc:date>" in opf
    assert '<meta property="dcterms:modified">2024-05-01T12:30:00Z</meta>' in opf
    assert f'<dc:identifier id="uid">{BookConfig(title="Harbour Notes", author="A. Writer").uid}</dc:identifier>' in opf
    assert 'full-path="content.opf"' in package.files["META-INF/container.xml"]
    assert package.files["mimetype"] == "application/epub+zip"


def test_chapter_files(tmp_path):
    package, _ = _package(tmp_path)

    first = package.files["chapter-1.xhtml"]
    assert "<title>Harbour Notes</title>" in first
    assert '<div class="toc-container"><ol class="toc-list">' in first
    assert first.startswith('<?xml version="1.0" encoding="UTF-8"?>')

    second = package.files["chapter-2.xhtml"]
    assert '<link rel="stylesheet" type="text/css" href="styles/epub.css"/>' in second
    assert "<p>The <strong>ship</strong> came in.</p>" in second
    # epub variant: alt text as caption
    assert '<img src="images/cover.png" alt="Cover" class="book-image" /><p class="image-caption">Cover</p>' in second
    assert 'data-path="images/lost.png"' in second

    fourth = package.files["chapter-4.xhtml"]
    assert "<title>Chapter 3: Return &amp; Rest</title>" in fourth
    assert '<h2>Chapter 3: Return &amp; <em>Rest</em></h2>' in fourth


def test_image_bookkeeping(tmp_path):
    package, _ = _package(tmp_path)

    assert [(img.ref, img.href, img.media_type) for img in package.images] == [
        ("images/cover.png", "images/cover.png", "image/png"),
    ]
    assert package.missing_images == ["images/lost.png"]
    assert package.skipped_images == ["../outside.png"]


def test_package_href():
    assert package_href("./images/a.png") == "images/a.png"
    assert package_href("images/../a.png") == "a.png"
    assert package_href("../a.png") is None
    assert package_href("/abs/a.png") is None
    assert package_href("https://example.com/a.png") is None
    assert package_href("C:\\pics\\a.png") is None


def test_write_package_and_archive(tmp_path):
    package, resolver = _package(tmp_path)
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / "chapter-9.xhtml").write_text("stale", encoding="utf-8")

    written = write_package(package, out_dir, resolver)

    assert not (out_dir / "chapter-9.xhtml").exists()
    assert (out_dir / "META-INF" / "container.xml").is_file()
    assert (out_dir / "images" / "cover.png").is_file()
    for item in package.manifest:
        assert (out_dir / item.href).is_file(), item.href
    assert out_dir / "mimetype" in written

    epub_path = pack_epub(out_dir, tmp_path / "dist" / "book.epub")
    with zipfile.ZipFile(epub_path) as zf:
        infos = zf.infolist()
        assert infos[0].filename == "mimetype"
        assert infos[0].compress_type == zipfile.ZIP_STORED
        assert zf.read("mimetype") == b"application/epub+zip"
        names = zf.namelist()
        assert names.count("mimetype") == 1
        assert "META-INF/container.xml" in names
        assert "images/cover.png" in names
        assert "chapter-4.xhtml" in names


def test_archive_inside_package_dir_is_not_packed_into_itself(tmp_path):
    package, resolver = _package(tmp_path)
    out_dir = tmp_path / "out"
    write_package(package, out_dir, resolver)

    epub_path = pack_epub(out_dir, out_dir / "book.epub")
    with zipfile.ZipFile(epub_path) as zf:
        assert "book.epub" not in zf.namelist()


def test_rebuilding_is_deterministic(tmp_path):
    first, _ = _package(tmp_path)
    second, _ = _package(tmp_path)

    assert first.files == second.files


def test_chapter_files_are_well_formed_xml(tmp_path):
    from xml.dom import minidom

    text = (
        "# Signs & Wonders\n\n"
        "## Chapter 1: x < y\n\n"
        "If 1 < 2 then *fine* & <script>done</script>.\n\n"
        "a > b\n\n"
        "- one\n  - two\n\n"
        "3. three\n\n"
        "> quoted <b>\n\n"
        "![Missing [shot]*](images/missing*.png)\n\n"
        "_a description_\n\n"
        "```\nif a < b && c:\n```\n\n"
        "---\n"
    )
    package = build_package(text, BookConfig(title="Signs & Wonders"), ImageResolver(tmp_path), modified=MODIFIED)

    for name, content in package.files.items():
        if name.endswith((".xhtml", ".opf", ".xml")):
            minidom.parseString(content.encode("utf-8"))

    chapter = package.files["chapter-2.xhtml"]
    assert "<p>If 1 &lt; 2 then <em>fine</em> &amp; &lt;script&gt;done&lt;/script&gt;.</p>" in chapter
    assert "<title>Chapter 1: x &lt; y</title>" in chapter
    assert 'data-path="images/missing*.png"' in chapter
