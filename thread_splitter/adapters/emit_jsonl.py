from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any


def rows(segments: Iterable[str]) -> list[dict[str, Any]]:
    """Return one row per segment with its 1-based position and length."""
    return [
        {"index": index, "text": text, "length": len(text)}
        for index, text in enumerate(segments, 1)
    ]


def _serialize(items: Iterable[dict[str, Any]]) -> Iterator[str]:
    """Serialize dictionaries to JSON lines."""
    return (json.dumps(r, ensure_ascii=False) for r in items)


def _write(path: str | Path, lines: Iterable[str]) -> None:
    """Write ``lines`` to ``path`` with trailing newlines."""
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    with path_obj.open("w", encoding="utf-8") as f:
        f.writelines(f"{line}\n" for line in lines)


def write(segments: Iterable[str], path: str | Path | None) -> None:
    """Write ``segments`` to JSONL at ``path`` when provided."""
    if not path:
        return
    _write(path, _serialize(rows(segments)))
