"""Deterministic slicing of oversized output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .fetcher_config import DEFAULT_MAX_LENGTH, DEFAULT_START_INDEX

__all__ = ["PageWindow", "PaginatedOutput", "paginate"]


@dataclass(frozen=True)
class PageWindow:
    """A ``(start_index, max_length)`` pair; bounds are validated by the caller."""

    start_index: int = DEFAULT_START_INDEX
    max_length: int = DEFAULT_MAX_LENGTH


@dataclass(frozen=True)
class PaginatedOutput:
    slice: str
    truncated: bool
    next_start_index: Optional[int] = None


def paginate(text: str, window: PageWindow) -> PaginatedOutput:
    """Cut ``text`` to ``window``.

    A start past the end gives an empty, non-truncated slice. When the window
    cuts text short, ``next_start_index`` is simply ``start + max_length``;
    it is arithmetic, not a cursor checked against what remains.
    """

    start = max(0, window.start_index)
    if start >= len(text):
        return PaginatedOutput(slice="", truncated=False)
    remaining = len(text) - start
    if remaining <= window.max_length:
        return PaginatedOutput(slice=text[start:], truncated=False)
    end = start + window.max_length
    return PaginatedOutput(slice=text[start:end], truncated=True, next_start_index=end)
