"""Image references: finding them in Markdown and resolving them on disk."""

from __future__ import annotations

import mimetypes
import re
from pathlib import Path
from typing import Callable

from PIL import Image

# ![alt](path)
IMAGE_RE = re.compile(r"!\[(.*?)\]\((.*?)\)")

ImageExists = Callable[[str], bool]


def image_references(markdown: str) -> list[tuple[str, str]]:
    """All (alt, path) pairs in document order, duplicates included."""
    return [(m.group(1), m.group(2)) for m in IMAGE_RE.finditer(markdown)]


def missing_images(markdown: str, image_exists: ImageExists) -> list[str]:
    """Unique unresolved image paths, in order of first appearance."""
    out: list[str] = []
    for _, path in image_references(markdown):
        if path not in out and not image_exists(path):
            out.append(path)
    return out


class ImageResolver:
    """Answers "does this image exist?" relative to one base directory.

    Every call hits the filesystem; nothing is cached, so the same reference is
    checked again each time it appears.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def __call__(self, path: str) -> bool:
        return self.exists(path)

    def locate(self, path: str) -> Path:
        return self.base_dir / path

    def exists(self, path: str) -> bool:
        if not path.strip():
            return False
        return self.locate(path).is_file()

    def media_type(self, path: str) -> str:
        """Media type for the manifest, sniffed from the file contents when Pillow can read it."""
        p = self.locate(path)
        fmt = None
        try:
            with Image.open(p) as img:
                fmt = img.format
        except OSError:
            # Not a raster format Pillow knows (e.g. SVG); fall back to the extension.
            pass
        if fmt and fmt in Image.MIME:
            return Image.MIME[fmt]
        guessed, _ = mimetypes.guess_type(p.name)
        return guessed or "application/octet-stream"
