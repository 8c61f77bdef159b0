"""Greedy packing of sentences into length-bounded thread segments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from thread_splitter import segmenter
from thread_splitter.framework import Artifact, Pass, register
from thread_splitter.passes.segment_options import PassMetrics, SegmentOptions

logger = logging.getLogger(__name__)


def _is_paragraphs_doc(doc: Any) -> bool:
    return isinstance(doc, Mapping) and doc.get("type") == "paragraphs"


def _oversized(paragraphs: list[list[str]], max_length: int) -> int:
    """Count sentences that will have to be fragmented."""
    return sum(1 for p in paragraphs for s in p if len(s) > max_length)


@dataclass
class _PackSegmentsPass:
    name: str = field(default="pack_segments", init=False)
    input_type: type = field(default=dict, init=False)  # expects {"type": "paragraphs"}
    output_type: type = field(default=dict, init=False)  # returns {"type": "segments"}
    max_length: int = segmenter.MAX_SEGMENT_LENGTH

    def __post_init__(self) -> None:
        segmenter.check_max_length(self.max_length)

    def __call__(self, a: Artifact) -> Artifact:
        doc = a.payload
        if not _is_paragraphs_doc(doc):
            return a
        options = SegmentOptions.from_base(self.max_length).with_meta(a.meta, self.name)
        paragraphs = doc.get("paragraphs", [])
        segments = segmenter.pack(paragraphs, options.max_length)
        fragmented = _oversized(paragraphs, options.max_length)
        if fragmented:
            logger.debug(f"pack_segments fragmented {fragmented} oversized sentences")
        metrics = PassMetrics(
            self.name,
            {
                "segments": len(segments),
                "fragmented_sentences": fragmented,
                "max_length": options.max_length,
            },
        )
        return Artifact(
            payload={"type": "segments", "segments": segments},
            meta=metrics.apply(a.meta),
        )


def make_packer(**opts: Any) -> _PackSegmentsPass:
    """Return a configured ``pack_segments`` pass from ``opts``."""
    return _PackSegmentsPass(
        max_length=int(opts.get("max_length", segmenter.MAX_SEGMENT_LENGTH))
    )


pack_segments: Pass = register(make_packer())
