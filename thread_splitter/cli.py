from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

import typer

from thread_splitter import segmenter
from thread_splitter.adapters import emit_jsonl, io_text
from thread_splitter.config import load_spec
from thread_splitter.core import (
    assemble_report,
    run_inspect,
    run_split,
    segments_from_payload,
    write_run_report,
)


def _spec_path_candidates(path: str | Path) -> Iterator[Path]:
    """Yield potential spec locations without hitting the filesystem."""
    candidate = Path(path)
    pkg_dir = Path(__file__).resolve().parent
    yield from (
        candidate,
        pkg_dir.parent / candidate,
        pkg_dir / candidate,
    )


def _resolve_spec_path(path: str | Path) -> Path:
    """Pick the first existing pipeline spec from candidate locations."""
    return next((p for p in _spec_path_candidates(path) if p.exists()), Path(path))


def _format_timings(timings: Mapping[str, float]) -> str:
    """Return ``timings`` as newline-delimited ``name: seconds`` strings."""
    return "\n".join(f"{n}: {t:.4f}s" for n, t in timings.items())


def _exit_with_error(exc: Exception) -> None:
    """Print ``exc`` to stderr and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise typer.Exit(1)


def _safe(func: Callable[[], None]) -> None:
    """Invoke ``func`` and exit non-zero on any exception."""
    try:
        func()
    except typer.Exit:
        raise
    except Exception as exc:  # pragma: no cover - exercised in CLI tests
        _exit_with_error(exc)


def _cli_overrides(
    max_length: int | None,
    numbering: bool,
) -> dict[str, dict[str, Any]]:
    length_opts: dict[str, Any] = (
        {"max_length": max_length} if max_length is not None else {}
    )
    number_opts: dict[str, Any] = {
        **length_opts,
        "enabled": numbering,
    }
    return {
        k: v
        for k, v in {
            "pack_segments": length_opts,
            "number_segments": number_opts,
        }.items()
        if v
    }


def _render(segments: list[str]) -> str:
    """Return segments separated by a blank line and a ``---`` rule."""
    return "\n\n---\n\n".join(segments)


def _run_split(
    input_path: Path,
    out: Path | None,
    max_length: int | None,
    numbering: bool,
    spec: str,
    report: Path | None,
    verbose: bool,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
    s = load_spec(_resolve_spec_path(spec), overrides=_cli_overrides(max_length, numbering))
    artifact, timings = run_split(io_text.read(input_path), s)
    segments = segments_from_payload(artifact.payload)
    if verbose:
        print(_format_timings(timings), file=sys.stderr)
    if report:
        write_run_report(report, assemble_report(timings, artifact.meta or {}))
    if out:
        emit_jsonl.write(segments, out)
        print(f"split: {len(segments)} segments")
    else:
        print(_render(segments))


def _run_estimate(input_path: Path, max_length: int) -> None:
    print(segmenter.estimate_tweet_count(io_text.read(input_path), max_length))


def _run_check(text: str, max_length: int) -> None:
    length = len(text)
    if not segmenter.is_valid_tweet_length(text, max_length):
        print(f"too long: {length}/{max_length}")
        raise typer.Exit(1)
    print(f"ok: {length}/{max_length}")


app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def split(  # pragma: no cover - exercised in CLI tests
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    out: Path | None = typer.Option(None, "--out"),
    max_length: int | None = typer.Option(None, "--max-length"),
    numbering: bool = typer.Option(True, "--numbering/--no-numbering"),
    spec: str = typer.Option("pipeline.yaml", "--spec"),
    report: Path | None = typer.Option(None, "--report"),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    """Split a text file into thread segments."""
    _safe(
        lambda: _run_split(
            input_path,
            out,
            max_length,
            numbering,
            spec,
            report,
            verbose,
        )
    )


@app.command()
def estimate(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    max_length: int = typer.Option(segmenter.MAX_SEGMENT_LENGTH, "--max-length"),
) -> None:
    """Print a rough segment count for a text file."""
    _safe(lambda: _run_estimate(input_path, max_length))


@app.command()
def check(
    text: str = typer.Argument(...),
    max_length: int = typer.Option(segmenter.MAX_SEGMENT_LENGTH, "--max-length"),
) -> None:
    """Exit non-zero when TEXT does not fit in one segment."""
    _safe(lambda: _run_check(text, max_length))


@app.command()
def inspect() -> None:  # pragma: no cover - exercised in tests
    """Print the registered passes as JSON."""
    print(json.dumps(run_inspect(), indent=2))


if __name__ == "__main__":
    app()
