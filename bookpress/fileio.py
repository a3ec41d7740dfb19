"""Disk access used by the CLI. Nothing here is retried; errors propagate."""

from __future__ import annotations

import shutil
from pathlib import Path


def read_manuscript(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def write_output(path: Path, content: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def copy_file(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
