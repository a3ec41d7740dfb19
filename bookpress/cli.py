"""
Command line entry point.

    bookpress preview book.md [-o book-preview.html]
    bookpress epub book.md [-o epub-output] [--archive book.epub]

All paths are taken from the arguments; defaults are derived from the
manuscript's location, never from the current directory.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .archive import pack_epub
from .chapters import pattern_error
from .config import CONFIG_NAME, BookConfig, ConfigError, load_book_config
from .epub import build_package, write_package
from .fileio import read_manuscript, write_output
from .images import ImageResolver, missing_images
from .preview import render_preview


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bookpress", description="Markdown manuscript -> HTML preview / EPUB")
    ap.add_argument("--version", action="version", version=__version__)
    sub = ap.add_subparsers(dest="command", required=True)

    def common(p: argparse.ArgumentParser) -> None:
        p.add_argument("manuscript", help="Markdown manuscript (UTF-8)")
        p.add_argument("--config", help=f"Book settings (default: {CONFIG_NAME} next to the manuscript)")
        p.add_argument("--image-base", help="Directory image paths are relative to (default: manuscript dir)")
        p.add_argument("--chapter-pattern", help="Regex matching chapter heading lines")
        p.add_argument("--title", help="Book title")
        p.add_argument("--author", help="Book author")

    p = sub.add_parser("preview", help="Render a single HTML preview page")
    common(p)
    p.add_argument("-o", "--output", help="Output HTML file (default: <manuscript>-preview.html)")

    p = sub.add_parser("epub", help="Write an EPUB package directory")
    common(p)
    p.add_argument("-o", "--output", help="Package directory (default: epub-output next to the manuscript)")
    p.add_argument("--archive", help="Also zip the package into this .epub file")
    return ap


def _load(args: argparse.Namespace, manuscript_path: Path, text: str) -> BookConfig:
    config_path = Path(args.config) if args.config else manuscript_path.parent / CONFIG_NAME
    if args.config and not config_path.is_file():
        raise ConfigError(f"config not found: {config_path}")
    return load_book_config(
        config_path,
        manuscript=text,
        overrides={
            "chapter_pattern": args.chapter_pattern,
            "title": args.title,
            "author": args.author,
        },
    )


def _report_missing(refs: list[str]) -> None:
    for ref in refs:
        print(f"  ! missing image: {ref}")


def cmd_preview(args: argparse.Namespace, manuscript_path: Path, text: str, book: BookConfig) -> int:
    out = Path(args.output) if args.output else manuscript_path.with_name(f"{manuscript_path.stem}-preview.html")
    resolver = ImageResolver(Path(args.image_base) if args.image_base else manuscript_path.parent)

    write_output(out, render_preview(text, book, resolver))
    _report_missing(missing_images(text, resolver))
    print(f"  ✓ Preview → {out}")
    return 0


def cmd_epub(args: argparse.Namespace, manuscript_path: Path, text: str, book: BookConfig) -> int:
    out_dir = Path(args.output) if args.output else manuscript_path.parent / "epub-output"
    resolver = ImageResolver(Path(args.image_base) if args.image_base else manuscript_path.parent)

    package = build_package(text, book, resolver)
    write_package(package, out_dir, resolver)
    for ch in package.chapters:
        print(f"  ✓ {ch.file_name}: {ch.title}")
    for img in package.images:
        print(f"  + {img.href} ({img.media_type})")
    _report_missing(package.missing_images)
    for ref in package.skipped_images:
        print(f"  ! not packaged (outside the package directory): {ref}")

    if args.archive:
        archive = pack_epub(out_dir, Path(args.archive))
        print(f"  ✓ EPUB → {archive}")

    print(f"\nDone. {len(package.chapters)} chapters written to {out_dir}")
    return 0


def main(argv: list[str]) -> int:
    args = _parser().parse_args(argv)

    manuscript_path = Path(args.manuscript)
    if not manuscript_path.is_file():
        print(f"error: not found: {manuscript_path}", file=sys.stderr)
        return 2
    text = read_manuscript(manuscript_path)

    try:
        book = _load(args, manuscript_path, text)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    problem = pattern_error(book.chapter_pattern)
    if problem:
        print(
            f"warning: unusable chapter pattern {book.chapter_pattern!r} ({problem}); "
            "treating the manuscript as one chapter",
            file=sys.stderr,
        )

    if args.command == "preview":
        return cmd_preview(args, manuscript_path, text, book)
    return cmd_epub(args, manuscript_path, text, book)


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
