"""Decoding and markup repair helpers ahead of structural extraction.

This module is deterministic and provider-agnostic. It exists to make the
readability pass reliable across brittle pages: bytes are decoded with the
best available charset hint, mojibake is repaired, and executable or
presentational markup is stripped before any scoring happens.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Optional

import ftfy
from charset_normalizer import from_bytes
from lxml.html.clean import Cleaner

__all__ = [
    "charset_from_content_type",
    "decode_bytes_auto",
    "minimal_text_fix",
    "clean_conservative",
]

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r"charset=([^\s;]+)", re.I)

_ZERO_WIDTH = {0x200B, 0x200C, 0x200D, 0x2060, 0xFEFF}
_REMOVE = {0x00, 0x0B, 0x0C}
_C1_TO_SPACE = {cp: " " for cp in range(0x80, 0xA0)}
_TRANSLATE = {**{cp: None for cp in _ZERO_WIDTH | _REMOVE}, **_C1_TO_SPACE}

# Links, images and inline style attributes must survive extraction; hidden
# nodes are recognised by their style attribute.
_CONSERVATIVE_CLEANER = Cleaner(
    scripts=True,
    javascript=True,
    comments=True,
    style=True,
    inline_style=False,
    links=False,
    meta=False,
    page_structure=False,
    processing_instructions=True,
    forms=False,
    frames=False,
    embedded=False,
    annoying_tags=False,
    kill_tags={"noscript", "script", "iframe", "style", "template"},
    safe_attrs_only=False,
    remove_unknown_tags=False,
)


def charset_from_content_type(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    match = _CHARSET_RE.search(content_type)
    if not match:
        return None
    return match.group(1).strip(' "\'').lower() or None


def decode_bytes_auto(body: bytes, content_type: Optional[str] = None) -> str:
    """Decode HTTP bytes using the charset header hint, then UTF-8, then charset-normalizer."""

    if not body:
        return ""
    enc = charset_from_content_type(content_type)
    if enc:
        try:
            return body.decode(enc, errors="replace")
        except LookupError:
            logger.warning("Unknown charset %r declared; falling back to detection", enc)
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        pass
    result = from_bytes(body).best()
    if result is None:
        return body.decode("utf-8", errors="replace")
    return str(result)


def minimal_text_fix(text: str) -> str:
    """Fix mojibake and strip zero-width/control noise without collapsing structure."""

    if not text:
        return ""
    normalized = unicodedata.normalize("NFC", text)
    fixed = ftfy.fix_text(normalized, normalization="NFC")
    return fixed.translate(_TRANSLATE)


def clean_conservative(html: str) -> str:
    if not html or not html.strip():
        return html
    try:
        return _CONSERVATIVE_CLEANER.clean_html(html)
    except Exception as exc:  # lxml raises a zoo of parser errors here
        logger.warning("Conservative clean failed (%s); using markup as-is", exc)
        return html
