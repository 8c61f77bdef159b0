"""Pipeline configuration: step list and per-step options.

Options come from three layers, later ones winning key by key:

1. the ``options`` mapping of ``pipeline.yaml``
2. ``STEP__KEY=value`` environment variables for steps in the pipeline
3. overrides handed in by the caller (the CLI flags)
"""

from __future__ import annotations

import os
import pathlib
import warnings
from typing import Any, Dict, Iterable, List, Mapping

import yaml
from pydantic import BaseModel, Field

from thread_splitter.segmenter import MAX_SEGMENT_LENGTH

StepOptions = Dict[str, Dict[str, Any]]

DEFAULT_PIPELINE: List[str] = [
    "text_normalize",
    "split_sentences",
    "pack_segments",
    "number_segments",
]


class PipelineSpec(BaseModel):
    """Ordered pass names plus the options handed to each pass."""

    pipeline: List[str] = Field(default_factory=lambda: list(DEFAULT_PIPELINE))
    options: StepOptions = Field(default_factory=dict)

    def options_for(self, step: str) -> Dict[str, Any]:
        return dict(self.options.get(step, {}))

    @property
    def max_length(self) -> int:
        """Segment budget shared by packing and numbering."""
        return int(self.options_for("pack_segments").get("max_length", MAX_SEGMENT_LENGTH))

    @property
    def numbering(self) -> bool:
        return "number_segments" in self.pipeline and bool(
            self.options_for("number_segments").get("enabled", True)
        )


def _read_yaml(path: str | os.PathLike | None) -> Dict[str, Any]:
    if not path or not pathlib.Path(path).exists():
        return {}
    data = yaml.safe_load(pathlib.Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError(f"{path} must contain a top-level mapping")
    return data


def _coerce(raw: str) -> Any:
    """Read an environment value as YAML so ``200`` and ``false`` keep their types."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _env_overrides(steps: Iterable[str]) -> StepOptions:
    known = set(steps)
    pairs = (
        (name.lower().split("__", 1), raw)
        for name, raw in os.environ.items()
        if "__" in name
    )
    out: StepOptions = {}
    for (step, key), raw in pairs:
        if step in known:
            out.setdefault(step, {})[key] = _coerce(raw)
    return out


def _layer(*layers: Mapping[str, Mapping[str, Any]] | None) -> StepOptions:
    """Merge option layers step by step; keys in later layers win."""
    merged: StepOptions = {}
    for layer in filter(None, layers):
        for step, opts in layer.items():
            merged[step] = {**merged.get(step, {}), **opts}
    return merged


def _warn_unknown_options(pipeline: Iterable[str], opts: Mapping[str, Any]) -> None:
    """Warn about option sections for steps the pipeline does not run."""
    steps = set(pipeline)
    unknown = sorted(step for step in opts if step and step not in steps)
    if unknown:
        warnings.warn(
            f"Unknown pipeline options: {', '.join(unknown)}",
            stacklevel=3,
        )


def load_spec(
    path: str | os.PathLike | None = "pipeline.yaml",
    overrides: StepOptions | None = None,
) -> PipelineSpec:
    """Load ``path`` and apply environment and caller overrides."""
    data = _read_yaml(path)
    pipeline = list(data.get("pipeline", DEFAULT_PIPELINE))
    options = _layer(data.get("options"), _env_overrides(pipeline), overrides)
    _warn_unknown_options(pipeline, options)
    return PipelineSpec(pipeline=pipeline, options=options)
