from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))


def _sentence(length: int, char: str = "a") -> str:
    """Return a one-word sentence of exactly ``length`` characters."""
    return char * (length - 1) + "."


@pytest.fixture
def sentence() -> Callable[..., str]:
    return _sentence


@pytest.fixture
def long_words() -> str:
    """Eighty repetitions of ``word``: 399 characters, no punctuation."""
    return " ".join(["word"] * 80)
