from __future__ import annotations

from thread_splitter import segmenter
from thread_splitter.framework import Artifact, register
from thread_splitter.passes.segment_options import PassMetrics


class _TextNormalizePass:
    name = "text_normalize"
    input_type = str
    output_type = str

    def __call__(self, a: Artifact) -> Artifact:
        if not isinstance(a.payload, str):
            return a
        text = segmenter.normalize(a.payload)
        metrics = PassMetrics(
            self.name,
            {"chars_in": len(a.payload), "chars_out": len(text)},
        )
        return Artifact(payload=text, meta=metrics.apply(a.meta))


text_normalize = register(_TextNormalizePass())
