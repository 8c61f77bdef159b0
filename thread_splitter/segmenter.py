"""Thread segmentation: turn long-form prose into a sequence of short posts.

The transform runs in a fixed order:

- ``normalize`` trims the document and converts CRLF line endings
- ``split_paragraphs`` breaks on blank lines
- ``split_sentences`` breaks after ``.``, ``!`` or ``?`` followed by whitespace
- ``pack`` greedily joins sentences into posts of at most ``max_length``
- ``fragment_sentence`` cuts a sentence that cannot fit in a single post
- ``apply_numbering`` prefixes ``k/n`` counters when the thread has several posts

Sentence detection is a plain punctuation heuristic. Abbreviations, decimal
numbers and quoted punctuation may produce extra breaks; this is kept as is so
that identical input always yields identical threads.

Every function is pure. Nothing here keeps state between calls.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

MAX_SEGMENT_LENGTH = 280
# Smallest budget for which a hard cut still consumes more text than the
# continuation ellipsis adds back.
MIN_SEGMENT_LENGTH = 16

ELLIPSIS = "..."
PARAGRAPH_BREAK = "\n\n"
ESTIMATE_FILL_RATIO = 0.8

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")

# Cut points for oversized sentences, most preferred first.
BREAKPOINTS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?<=[:;])\s+"),
    re.compile(r"(?<=,)\s+"),
    re.compile(
        r"\s+(?=and|or|but|so|because|that|which|when|where|who|if)",
        re.IGNORECASE,
    ),
    re.compile(r"\s+"),
)

_NUMBERING_PREFIX = re.compile(r"^(\d+)/(\d+) ")


def _preview(text: str, limit: int = 60) -> str:
    """Return a short printable preview of ``text`` for debug logs."""
    return repr(text[:limit] + ("…" if len(text) > limit else ""))


def check_max_length(max_length: int) -> int:
    """Return ``max_length`` or raise ``ValueError`` when it is too small."""
    if max_length < MIN_SEGMENT_LENGTH:
        raise ValueError(
            f"max_length must be at least {MIN_SEGMENT_LENGTH}, got {max_length}"
        )
    return max_length


def normalize(text: str) -> str:
    """Strip surrounding whitespace and convert CRLF line endings to LF."""
    return text.strip().replace("\r\n", "\n")


def split_paragraphs(text: str) -> List[str]:
    """Split ``text`` on one or more blank lines, dropping empty pieces."""
    return [p.strip() for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]


def split_sentences(paragraph: str) -> List[str]:
    """Split ``paragraph`` after sentence-terminal punctuation."""
    return [s for s in _SENTENCE_SPLIT.split(paragraph) if s]


def _last_split_point(text: str, pattern: re.Pattern[str], limit: int) -> Optional[int]:
    """Return the start of the last ``pattern`` match in ``(0, limit]``."""
    positions = [m.start() for m in pattern.finditer(text) if 0 < m.start() <= limit]
    return positions[-1] if positions else None


def _choose_split_point(text: str, limit: int) -> int:
    """Pick a cut position from the first breakpoint class that has one."""
    candidates = (_last_split_point(text, bp, limit) for bp in BREAKPOINTS)
    return next((pos for pos in candidates if pos is not None), limit)


def fragment_sentence(sentence: str, max_length: int = MAX_SEGMENT_LENGTH) -> List[str]:
    """Cut an oversized sentence into ellipsis-linked fragments.

    Non-final fragments end with ``...`` and every fragment after the first
    starts with ``...``. The loop measures the remainder after the leading
    ellipsis has been prepended, so each fragment fits in ``max_length``.
    """
    limit = max_length - len(ELLIPSIS)
    fragments: List[str] = []
    remaining = sentence
    while len(remaining) > max_length:
        pos = _choose_split_point(remaining, limit)
        fragments.append(remaining[:pos].strip() + ELLIPSIS)
        remaining = ELLIPSIS + remaining[pos:].strip()
    if remaining:
        fragments.append(remaining)
    logger.debug(
        f"fragment_sentence split {len(sentence)} chars into {len(fragments)} fragments"
    )
    return fragments


@dataclass
class _PackState:
    """Accumulator for the greedy sentence packer."""

    max_length: int
    current: str = ""
    segments: List[str] = field(default_factory=list)

    def flush(self) -> None:
        text = self.current.strip()
        if text:
            self.segments.append(text)
        self.current = ""

    def _extend(self, sentence: str) -> str:
        # A paragraph break is still followed by the single-space joiner.
        return f"{self.current} {sentence}" if self.current else sentence

    def add_sentence(self, sentence: str) -> None:
        if len(sentence) > self.max_length:
            self.flush()
            self.segments.extend(fragment_sentence(sentence, self.max_length))
            return
        candidate = self._extend(sentence)
        if len(candidate) <= self.max_length:
            self.current = candidate
        else:
            self.flush()
            self.current = sentence

    def end_paragraph(self) -> None:
        # Leave room for the next paragraph only when the break marker fits.
        if not self.current:
            return
        if len(self.current) + len(PARAGRAPH_BREAK) <= self.max_length:
            self.current += PARAGRAPH_BREAK
        else:
            self.flush()


def pack(
    paragraphs: Sequence[Sequence[str]], max_length: int = MAX_SEGMENT_LENGTH
) -> List[str]:
    """Greedily pack per-paragraph sentence lists into bounded segments."""
    state = _PackState(max_length=max_length)
    for sentences in paragraphs:
        for sentence in sentences:
            state.add_sentence(sentence)
        state.end_paragraph()
    state.flush()
    return state.segments


def _numbered(segment: str, index: int, total: int, max_length: int) -> str:
    prefix = f"{index}/{total} "
    return prefix + segment if len(prefix) + len(segment) <= max_length else segment


def apply_numbering(
    segments: Sequence[str], max_length: int = MAX_SEGMENT_LENGTH
) -> List[str]:
    """Prefix ``k/n`` counters on every segment that still fits afterwards."""
    total = len(segments)
    if total <= 1:
        return list(segments)
    return [
        _numbered(segment, index, total, max_length)
        for index, segment in enumerate(segments, 1)
    ]


def numbering_of(segment: str) -> tuple[int, int] | None:
    """Return ``(k, n)`` from a numbered segment, or ``None``."""
    match = _NUMBERING_PREFIX.match(segment)
    return (int(match.group(1)), int(match.group(2))) if match else None


def estimate_count(content: str, max_length: int = MAX_SEGMENT_LENGTH) -> int:
    """Rough post count for UI feedback; not the real packing result."""
    return math.ceil(len(content) / (max_length * ESTIMATE_FILL_RATIO))


def is_valid_length(text: str, max_length: int = MAX_SEGMENT_LENGTH) -> bool:
    return len(text) <= max_length


def document_sentences(text: str) -> List[List[str]]:
    """Return the sentences of every paragraph of a normalized document."""
    return [split_sentences(p) for p in split_paragraphs(text)]


def split_into_threads(
    content: str,
    max_length: int = MAX_SEGMENT_LENGTH,
    *,
    numbering: bool = True,
) -> List[str]:
    """Split ``content`` into an ordered list of posts of at most ``max_length``.

    Returns an empty list for blank input and a single unnumbered post when
    everything fits in one.
    """
    check_max_length(max_length)
    text = normalize(content)
    logger.debug(f"split_into_threads called with {len(text)} chars")
    logger.debug(f"Input text preview: {_preview(text)}")
    segments = pack(document_sentences(text), max_length)
    result = apply_numbering(segments, max_length) if numbering else segments
    logger.debug(f"split_into_threads produced {len(result)} segments")
    return result


def estimate_tweet_count(content: str, max_length: int = MAX_SEGMENT_LENGTH) -> int:
    """Estimate how many posts ``content`` will need."""
    return estimate_count(content, check_max_length(max_length))


def is_valid_tweet_length(text: str, max_length: int = MAX_SEGMENT_LENGTH) -> bool:
    """Return ``True`` when ``text`` fits in a single post."""
    return is_valid_length(text, check_max_length(max_length))


__all__ = [
    "BREAKPOINTS",
    "ELLIPSIS",
    "MAX_SEGMENT_LENGTH",
    "MIN_SEGMENT_LENGTH",
    "PARAGRAPH_BREAK",
    "apply_numbering",
    "check_max_length",
    "document_sentences",
    "estimate_count",
    "estimate_tweet_count",
    "fragment_sentence",
    "is_valid_length",
    "is_valid_tweet_length",
    "normalize",
    "numbering_of",
    "pack",
    "split_into_threads",
    "split_paragraphs",
    "split_sentences",
]
