"""Best-effort linear text from PDF bytes (PyMuPDF)."""

from __future__ import annotations

import logging
from typing import List

import fitz  # type: ignore  # PyMuPDF

__all__ = ["extract_pdf_text"]

logger = logging.getLogger(__name__)

# Vertical gap (points) that starts a new line when rebuilding text from words
LINE_BREAK_GAP = 2.5


def _words_to_text(words) -> str:
    ordered = sorted(words, key=lambda w: (w[3], w[0]))
    builder: List[str] = []
    last_y = None
    for x0, y0, x1, y1, word, *_ in ordered:
        if last_y is not None and abs(y0 - last_y) > LINE_BREAK_GAP:
            builder.append("\n")
        builder.append(word)
        builder.append(" ")
        last_y = y0
    return "".join(builder).strip()


def _page_texts(doc) -> List[str]:
    parts: List[str] = []
    for page in doc:
        page_text = page.get_text("text") or ""
        if page_text.strip():
            parts.append(page_text.strip())
    if parts:
        return parts

    # No text layer came back; rebuild lines from positioned words instead.
    for page in doc:
        words = page.get_text("words") or []
        if words:
            text = _words_to_text(words)
            if text:
                parts.append(text)
    return parts


def extract_pdf_text(raw_bytes: bytes, url: str = "") -> str:
    """Concatenate page text in page order.

    Malformed, truncated or password-protected documents yield ``""``; a
    broken PDF must never fail the request.
    """

    if not raw_bytes:
        return ""
    try:
        doc = fitz.open(stream=raw_bytes, filetype="pdf")
    except Exception as exc:  # PyMuPDF raises several unrelated types here
        logger.warning("PDF open failed for %s: %s", url or "<bytes>", exc)
        return ""
    try:
        if getattr(doc, "needs_pass", False):
            logger.warning("PDF %s is password protected; returning empty text", url or "<bytes>")
            return ""
        return "\n".join(_page_texts(doc))
    except Exception as exc:
        logger.warning("PDF text extraction failed for %s: %s", url or "<bytes>", exc)
        return ""
    finally:
        doc.close()
