from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from thread_splitter.segmenter import (
    MAX_SEGMENT_LENGTH,
    is_valid_length,
    numbering_of,
)


class ImageAttachment(BaseModel):
    url: str
    alt: str = ""


class VideoAttachment(BaseModel):
    url: str


class ThreadItem(BaseModel):
    """One post of an edited thread, with optional media."""

    text: str = ""
    image: Optional[ImageAttachment] = None
    video: Optional[VideoAttachment] = None


class ThreadPostRequest(BaseModel):
    """Payload handed to a poster once a thread has been reviewed."""

    threads: List[ThreadItem] = Field(default_factory=list)
    schedule: bool = False
    scheduled_time: Optional[str] = None


@dataclass(frozen=True)
class ValidationReport:
    """Structured result from :func:`validate_thread`.

    Counts stay plain integers so reports compare equal across runs.
    """

    total_segments: int
    empty_text: int
    overlong: int
    numbering_gaps: int

    def is_empty(self) -> bool:
        """Return ``True`` when no segments were provided."""

        return self.total_segments == 0

    def has_issues(self) -> bool:
        """Return ``True`` if the report contains anomalies or is empty."""

        return self.is_empty() or any((self.empty_text, self.overlong, self.numbering_gaps))


def _count(predicate, texts: Iterable[str]) -> int:
    return sum(1 for text in texts if predicate(text))


def _is_empty(text: str) -> bool:
    return not text.strip()


def _numbering_gaps(segments: Sequence[str]) -> int:
    """Count numbered segments whose ``k/n`` does not match their position."""
    total = len(segments)
    return sum(
        1
        for index, segment in enumerate(segments, 1)
        if (found := numbering_of(segment)) is not None and found != (index, total)
    )


def validate_thread(
    segments: Iterable[str], max_length: int = MAX_SEGMENT_LENGTH
) -> ValidationReport:
    """Validate an ordered list of segments, e.g. after manual edits.

    Parameters
    ----------
    segments:
        Segment texts in posting order.
    max_length:
        Per-segment character budget.

    Returns
    -------
    ValidationReport
        Dataclass summarising anomaly counts.
    """

    texts = list(segments)
    return ValidationReport(
        total_segments=len(texts),
        empty_text=_count(_is_empty, texts),
        overlong=_count(lambda t: not is_valid_length(t, max_length), texts),
        numbering_gaps=_numbering_gaps(texts),
    )


def validate_post_request(
    request: ThreadPostRequest, max_length: int = MAX_SEGMENT_LENGTH
) -> ThreadPostRequest:
    """Return ``request`` unchanged or raise ``ValueError`` describing the problem."""

    if not request.threads:
        raise ValueError("Invalid thread data. Please provide at least one thread item.")
    if any(_is_empty(item.text) for item in request.threads):
        raise ValueError("All thread items must contain text.")
    overlong = [
        index
        for index, item in enumerate(request.threads, 1)
        if not is_valid_length(item.text, max_length)
    ]
    if overlong:
        raise ValueError(
            f"Thread items exceed {max_length} characters: {', '.join(map(str, overlong))}"
        )
    return request


def request_from_segments(segments: Iterable[str]) -> ThreadPostRequest:
    """Build a post request with one text-only item per segment."""

    return ThreadPostRequest(threads=[ThreadItem(text=s) for s in segments])
