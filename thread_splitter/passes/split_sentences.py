"""Break a normalized document into paragraphs of sentences."""

from __future__ import annotations

from typing import Any, Dict

from thread_splitter import segmenter
from thread_splitter.framework import Artifact, register
from thread_splitter.passes.segment_options import PassMetrics


def _paragraphs_doc(text: str) -> Dict[str, Any]:
    return {"type": "paragraphs", "paragraphs": segmenter.document_sentences(text)}


class _SplitSentencesPass:
    name = "split_sentences"
    input_type = str
    output_type = dict  # returns {"type": "paragraphs", "paragraphs": [[...]]}

    def __call__(self, a: Artifact) -> Artifact:
        if not isinstance(a.payload, str):
            return a
        doc = _paragraphs_doc(a.payload)
        paragraphs = doc["paragraphs"]
        metrics = PassMetrics(
            self.name,
            {
                "paragraphs": len(paragraphs),
                "sentences": sum(len(p) for p in paragraphs),
            },
        )
        return Artifact(payload=doc, meta=metrics.apply(a.meta))


split_sentences = register(_SplitSentencesPass())
