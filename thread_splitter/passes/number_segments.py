"""Prefix ``k/n`` counters onto the segments of a multi-post thread."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from thread_splitter import segmenter
from thread_splitter.framework import Artifact, Pass, register
from thread_splitter.passes.segment_options import PassMetrics, SegmentOptions


def _is_segments_doc(doc: Any) -> bool:
    return isinstance(doc, Mapping) and doc.get("type") == "segments"


@dataclass
class _NumberSegmentsPass:
    name: str = field(default="number_segments", init=False)
    input_type: type = field(default=dict, init=False)
    output_type: type = field(default=dict, init=False)
    enabled: bool = True
    max_length: int = segmenter.MAX_SEGMENT_LENGTH

    def __post_init__(self) -> None:
        segmenter.check_max_length(self.max_length)

    def __call__(self, a: Artifact) -> Artifact:
        doc = a.payload
        if not self.enabled or not _is_segments_doc(doc):
            return a
        # Follow the packer's budget unless numbering is configured separately.
        options = (
            SegmentOptions.from_base(self.max_length)
            .with_meta(a.meta, "pack_segments")
            .with_meta(a.meta, self.name)
        )
        segments = list(doc.get("segments", []))
        numbered = segmenter.apply_numbering(segments, options.max_length)
        applied = sum(1 for before, after in zip(segments, numbered) if before != after)
        skipped = len(numbered) - applied if len(numbered) > 1 else 0
        metrics = PassMetrics(self.name, {"numbered": applied, "skipped": skipped})
        return Artifact(
            payload={**doc, "segments": numbered},
            meta=metrics.apply(a.meta),
        )


number_segments: Pass = register(_NumberSegmentsPass())
