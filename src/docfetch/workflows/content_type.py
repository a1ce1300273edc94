"""Decide which extraction path a fetched document takes."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .fetcher_config import HTML_MIME_HINT, HTML_ROOT_MARKER, PDF_MIME_HINT


class ContentClass(str, Enum):
    HTML = "html"
    PDF = "pdf"
    OPAQUE = "opaque"


def is_html(text: str, content_type: Optional[str]) -> bool:
    declared = (content_type or "").lower()
    if HTML_MIME_HINT in declared:
        return True
    return HTML_ROOT_MARKER in (text or "").lower()


def is_pdf(content_type: Optional[str]) -> bool:
    return PDF_MIME_HINT in (content_type or "").lower()


def classify(text: str, content_type: Optional[str], force_raw: bool = False) -> ContentClass:
    """Classify a document; first matching rule wins and the result is always definite.

    ``force_raw`` short-circuits everything to :attr:`ContentClass.OPAQUE`. HTML
    is recognized by declared MIME or by an ``<html`` marker anywhere in the
    decoded body, so a mislabelled page still gets structural extraction.
    """

    if force_raw:
        return ContentClass.OPAQUE
    if is_html(text, content_type):
        return ContentClass.HTML
    if is_pdf(content_type):
        return ContentClass.PDF
    return ContentClass.OPAQUE
