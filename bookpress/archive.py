"""Zip a package directory into a single `.epub` file."""

from __future__ import annotations

import zipfile
from pathlib import Path

from .epub import MIMETYPE


def pack_epub(package_dir: Path, out_path: Path) -> Path:
    """Archive `package_dir`; `mimetype` goes first and stays uncompressed."""
    package_dir = Path(package_dir)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    files = sorted(
        p
        for p in package_dir.rglob("*")
        if p.is_file() and p != package_dir / "mimetype" and p.resolve() != out_path.resolve()
    )
    with zipfile.ZipFile(out_path, "w") as zf:
        zf.writestr(zipfile.ZipInfo("mimetype"), MIMETYPE, compress_type=zipfile.ZIP_STORED)
        for p in files:
            zf.write(p, p.relative_to(package_dir).as_posix(), compress_type=zipfile.ZIP_DEFLATED)
    return out_path
