"""Registry and runner for the thread splitting passes.

A pass takes an ``Artifact`` and returns a new one. The payload moves from the
raw document string to a ``paragraphs`` document and ends as a ``segments``
document; ``meta`` collects per-pass options, metrics and warnings.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import (
    Any,
    Dict,
    Iterable,
    Mapping,
    MutableMapping,
    Protocol,
    Type,
    runtime_checkable,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """Immutable carrier of a thread payload and its metadata between passes."""

    payload: Any
    meta: Dict[str, Any] | None = None

    def with_meta(self, **updates: Any) -> Artifact:
        """Return a copy whose ``meta`` carries ``updates`` on top."""
        return Artifact(payload=self.payload, meta={**(self.meta or {}), **updates})


@runtime_checkable
class Pass(Protocol):
    name: str
    input_type: Type
    output_type: Type

    def __call__(self, a: Artifact) -> Artifact:
        """Transform ``a`` into the next artifact."""
        ...


_PASSES: Mapping[str, Pass] = MappingProxyType({})


def register(p: Pass) -> Pass:
    """Make ``p`` available under ``p.name``; a later pass with the same name wins."""
    global _PASSES
    _PASSES = MappingProxyType({**_PASSES, p.name: p})
    return p


def lookup(name: str) -> Pass:
    """Return the registered pass called ``name``."""
    try:
        return _PASSES[name]
    except KeyError:
        raise KeyError(f"unknown step: {name}") from None


def run_step(
    p: Pass, a: Artifact, timings: MutableMapping[str, float] | None = None
) -> Artifact:
    """Apply ``p`` to ``a``, recording its wall time in ``timings`` if given."""
    t0 = time.time()
    try:
        return p(a)
    finally:
        elapsed = time.time() - t0
        if timings is not None:
            timings[p.name] = elapsed
        logger.debug(f"{p.name} finished in {elapsed:.4f}s")


def run_pipeline(
    passes: Iterable[Pass],
    a: Artifact,
    timings: MutableMapping[str, float] | None = None,
) -> Artifact:
    """Thread ``a`` through ``passes`` in order."""
    return reduce(lambda acc, p: run_step(p, acc, timings), passes, a)


def registry() -> Dict[str, Pass]:
    """Shallow copy of the registered passes."""
    return dict(_PASSES)
