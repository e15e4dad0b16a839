"""Filesystem utility helpers."""

from __future__ import annotations
import os
from pathlib import Path


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def write_text_atomic(path: str | Path, content: str, encoding: str = "utf-8") -> Path:
    """Write via a sibling temp file, then replace the target."""
    target = Path(path)
    if target.parent and str(target.parent) not in ("", "."):
        ensure_dir(str(target.parent))
    tmp = target.with_suffix(target.suffix + ".tmp")
    tmp.write_text(content, encoding=encoding)
    tmp.replace(target)
    return target


def read_text(path: str | Path, encoding: str = "utf-8") -> str:
    with open(path, "r", encoding=encoding) as fh:
        return fh.read()
