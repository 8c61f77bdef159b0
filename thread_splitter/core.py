from __future__ import annotations

import json
import logging
import platform
import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import fields, is_dataclass, replace
from pathlib import Path
from typing import Any

from thread_splitter import segmenter
from thread_splitter.config import PipelineSpec
from thread_splitter.framework import Artifact, Pass, lookup, registry, run_pipeline

logger = logging.getLogger(__name__)


def _pass_steps(spec: PipelineSpec) -> list[str]:
    """Return pipeline steps after checking each one is a registered pass."""
    regs = registry()
    unknown = [s for s in spec.pipeline if s not in regs]
    if unknown:
        raise KeyError(f"unknown steps: {unknown}")
    return list(spec.pipeline)


def _ensure_precedes(steps: Sequence[str], first: str, prefix: str) -> None:
    """Raise if a step starting with ``prefix`` runs before ``first``."""
    later = next(((s, i) for i, s in enumerate(steps) if s.startswith(prefix)), None)
    if not later:
        return
    first_index = next((i for i, s in enumerate(steps) if s == first), None)
    name, index = later
    if first_index is None or first_index > index:
        raise ValueError(f"{name} requires {first} to run beforehand")


def _enforce_invariants(spec: PipelineSpec) -> list[str]:
    """Return validated steps while enforcing pass ordering."""
    steps = list(spec.pipeline)
    _ensure_precedes(steps, "text_normalize", "split_")
    _ensure_precedes(steps, "split_sentences", "pack_")
    _ensure_precedes(steps, "pack_segments", "number_")
    return _pass_steps(PipelineSpec(pipeline=steps, options=spec.options))


def _prepare_pass(pass_obj: Pass, overrides: Mapping[str, Any]) -> tuple[Pass, Mapping[str, Any]]:
    """Return a configured pass and sanitized overrides for meta propagation."""

    opts = dict(overrides)
    if not opts or not is_dataclass(pass_obj):
        return pass_obj, opts

    names = {f.name for f in fields(pass_obj) if f.init}
    updates = {k: opts[k] for k in opts if k in names}
    if not updates:
        return pass_obj, opts
    return replace(pass_obj, **updates), opts


def configure_pass(pass_obj: Pass, opts: Mapping[str, Any]) -> Pass:
    """Return a new pass with ``opts`` merged without mutating ``pass_obj``."""

    configured, _ = _prepare_pass(pass_obj, opts)
    return configured


def segments_from_payload(payload: Any) -> list[str]:
    """Return segments when ``payload`` is a segments document, else ``[]``."""
    if isinstance(payload, Mapping) and payload.get("type") == "segments":
        return list(payload.get("segments", []))
    return []


def _warning_checks(a: Artifact, spec: PipelineSpec) -> Iterable[tuple[str, bool]]:
    """Yield pairs of warning names and their boolean status."""
    segments = segments_from_payload(a.payload)
    metrics = (a.meta or {}).get("metrics") or {}
    skipped = (metrics.get("number_segments") or {}).get("skipped", 0)
    return (
        (
            "overlong_segments",
            any(not segmenter.is_valid_length(s, spec.max_length) for s in segments),
        ),
        ("numbering_skipped", spec.numbering and skipped > 0),
    )


def _collect_warnings(a: Artifact, spec: PipelineSpec) -> list[str]:
    """Return known-issue warnings for the finished artifact."""
    return [name for name, flag in _warning_checks(a, spec) if flag]


def _env_snapshot() -> dict[str, Any]:
    return {"sys_version": sys.version, "platform": platform.platform()}


def assemble_report(timings: Mapping[str, float], meta: Mapping[str, Any]) -> dict[str, Any]:
    """Purely assemble run report data without performing IO."""
    metrics = dict(meta.get("metrics") or {})
    segments = (metrics.get("pack_segments") or {}).get("segments")
    counts = {"segment_count": segments} if segments is not None else {}
    return {
        "timings": dict(timings),
        "metrics": {**counts, **metrics, "env": _env_snapshot()},
        "warnings": list(meta.get("warnings") or []),
    }


def write_run_report(path: str | Path, report: Mapping[str, Any]) -> None:
    """Write ``report`` as indented JSON to ``path``."""
    Path(path).write_text(json.dumps(report, indent=2), encoding="utf-8")


def run_split(text: str, spec: PipelineSpec | None = None) -> tuple[Artifact, dict[str, float]]:
    """Run the declared passes over ``text`` and return the final artifact and timings."""
    spec = spec or PipelineSpec()
    steps = _enforce_invariants(spec)
    a = Artifact(payload=text, meta={"metrics": {}, "options": dict(spec.options)})
    passes = [configure_pass(lookup(s), spec.options_for(s)) for s in steps]
    timings: dict[str, float] = {}
    a = run_pipeline(passes, a, timings)
    logger.debug(f"run_split ran {steps} in {sum(timings.values()):.4f}s")
    return a.with_meta(warnings=_collect_warnings(a, spec)), timings


def split_text(text: str, spec: PipelineSpec | None = None) -> list[str]:
    """Convert ``text`` into thread segments using ``spec``."""
    artifact, _ = run_split(text, spec)
    return segments_from_payload(artifact.payload)


def run_inspect() -> dict[str, dict[str, str]]:
    """Return a lightweight view of the registry for CLI/tests."""
    return {
        name: {"input": str(p.input_type), "output": str(p.output_type)}
        for name, p in registry().items()
    }
