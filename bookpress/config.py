"""Per-book settings from `book.yaml`."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .chapters import DEFAULT_CHAPTER_PATTERN, UNTITLED_CHAPTER, book_title
from .markdown import EPUB_OPTIONS, PREVIEW_OPTIONS, ConvertOptions

CONFIG_NAME = "book.yaml"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class BookConfig:
    title: str = "Untitled"
    author: str = "Unknown"
    language: str = "en"
    publisher: str = ""
    description: str = ""
    identifier: str = ""
    chapter_pattern: str = DEFAULT_CHAPTER_PATTERN
    toc_heading: str = "Table of Contents"
    untitled_chapter: str = UNTITLED_CHAPTER
    preview_title: str = ""
    # None means "whatever the output mode does by default"
    image_captions: bool | None = None
    image_descriptions: bool | None = None
    indent_lists: bool | None = None

    @property
    def uid(self) -> str:
        """Stable package identifier; the same book always gets the same one."""
        if self.identifier:
            return self.identifier
        return f"urn:uuid:{uuid.uuid5(uuid.NAMESPACE_URL, f'{self.title}/{self.author}')}"

    def convert_options(self, mode: str) -> ConvertOptions:
        base = EPUB_OPTIONS if mode == "epub" else PREVIEW_OPTIONS
        overrides: dict[str, Any] = {"toc_heading": self.toc_heading}
        for key in ("image_captions", "image_descriptions", "indent_lists"):
            value = getattr(self, key)
            if value is not None:
                overrides[key] = bool(value)
        return replace(base, **overrides)


def load_book_config(
    path: Path | None,
    *,
    manuscript: str = "",
    overrides: dict[str, Any] | None = None,
) -> BookConfig:
    """Defaults, then `book.yaml` (optional), then `overrides`; None values never win."""
    defaults: dict[str, Any] = {"title": book_title(manuscript)}
    out = defaults.copy()

    if path is not None and path.is_file():
        try:
            cfg = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: invalid YAML: {e}") from e
        if not isinstance(cfg, dict):
            raise ConfigError(f"{path}: expected a mapping at top level")
        out.update({k: v for k, v in cfg.items() if v is not None})

    if overrides:
        out.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name: f for f in fields(BookConfig)}
    values: dict[str, Any] = {}
    for key, value in out.items():
        if key not in known:
            continue
        if known[key].type in ("str",):
            value = str(value)
        values[key] = value
    return BookConfig(**values)
