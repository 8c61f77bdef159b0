from __future__ import annotations

from pathlib import Path


def read(path: str | Path) -> str:
    """Return the text of ``path``; a UTF-8 byte-order mark is dropped."""
    return Path(path).read_text(encoding="utf-8-sig")
