"""Split a manuscript into chapters and name them."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_CHAPTER_PATTERN = r"^## Chapter \d+"
UNTITLED_CHAPTER = "Untitled chapter"
UNTITLED_BOOK = "Untitled"

TITLE_RE = re.compile(r"^#{1,2} +(.+?)\s*$", re.MULTILINE)
BOOK_TITLE_RE = re.compile(r"^# +(.+?)\s*$", re.MULTILINE)


@dataclass(frozen=True)
class Chapter:
    index: int  # 1-based, counted over non-empty chapters only
    title: str
    markdown: str

    @property
    def id(self) -> str:
        return f"chapter-{self.index}"

    @property
    def file_name(self) -> str:
        return chapter_file_name(self.index)


def chapter_file_name(index: int, extension: str = "xhtml") -> str:
    return f"chapter-{index}.{extension}"


def pattern_error(pattern: str) -> str | None:
    """Why `pattern` can't be used as a chapter boundary, or None if it can."""
    try:
        re.compile(pattern, re.MULTILINE)
    except re.error as e:
        return str(e)
    return None


def split_chapters(manuscript: str, pattern: str = DEFAULT_CHAPTER_PATTERN) -> list[str]:
    """Cut the manuscript right before every line matching `pattern`.

    The matching heading stays with the chapter it opens. Whitespace-only
    slices are dropped. With no match (or an unusable pattern) the whole
    manuscript is a single chapter.
    """
    cuts = [0]
    if pattern_error(pattern) is None:
        # Cut at match starts; groups in `pattern` never add slices.
        cuts += sorted({m.start() for m in re.finditer(pattern, manuscript, re.MULTILINE)} - {0})
    cuts.append(len(manuscript))
    parts = [manuscript[start:end] for start, end in zip(cuts, cuts[1:])]
    return [p.strip() for p in parts if p.strip()]


def chapter_title(text: str, default: str = UNTITLED_CHAPTER) -> str:
    m = TITLE_RE.search(text)
    return m.group(1) if m else default


def book_title(manuscript: str, default: str = UNTITLED_BOOK) -> str:
    m = BOOK_TITLE_RE.search(manuscript)
    return m.group(1) if m else default


def build_chapters(
    manuscript: str,
    pattern: str = DEFAULT_CHAPTER_PATTERN,
    untitled: str = UNTITLED_CHAPTER,
) -> list[Chapter]:
    return [
        Chapter(index=i, title=chapter_title(text, untitled), markdown=text)
        for i, text in enumerate(split_chapters(manuscript, pattern), start=1)
    ]
