"""Utilities for configuring segment packing and numbering passes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from thread_splitter.segmenter import MAX_SEGMENT_LENGTH, check_max_length


@dataclass(frozen=True)
class SegmentOptions:
    """Resolved configuration for a segmenting pass."""

    max_length: int = MAX_SEGMENT_LENGTH

    @classmethod
    def from_base(cls, max_length: int) -> SegmentOptions:
        """Instantiate options from baseline pass settings."""

        return cls(check_max_length(int(max_length)))

    def with_meta(self, meta: Mapping[str, Any] | None, name: str) -> SegmentOptions:
        """Merge artifact metadata overrides recorded under ``options[name]``."""

        opts = ((meta or {}).get("options") or {}).get(name, {})
        if "max_length" not in opts:
            return self
        return SegmentOptions.from_base(opts["max_length"])


@dataclass(frozen=True)
class PassMetrics:
    """Capture per-pass counters and merge them back into artifact metadata."""

    name: str
    values: Mapping[str, int | bool]

    def apply(self, meta: Mapping[str, Any] | None) -> dict[str, Any]:
        """Return ``meta`` updated with this pass's metrics."""

        all_metrics = (meta or {}).get("metrics") or {}
        existing = all_metrics.get(self.name, {})
        merged = {**existing, **dict(self.values)}
        return {
            **(meta or {}),
            "metrics": {**all_metrics, self.name: merged},
        }


__all__ = ["PassMetrics", "SegmentOptions"]
