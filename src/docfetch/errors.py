"""Exceptions that end a docfetch request abnormally.

Extraction-stage problems (no main content, unreadable PDF) are not
exceptions; they surface as content in :class:`NormalizedOutput`.
"""

from __future__ import annotations

from typing import Optional


class DocfetchError(Exception):
    """Base class for request-terminating failures."""


class RetrievalError(DocfetchError):
    """The document could not be retrieved (non-2xx status, network, timeout)."""

    def __init__(self, message: str, *, url: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class ValidationError(DocfetchError, ValueError):
    """Fetch arguments are malformed."""


__all__ = ["DocfetchError", "RetrievalError", "ValidationError"]
