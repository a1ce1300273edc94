"""Docfetch defaults (headers, limits, message templates, env knobs).

Centralizes static defaults so the pipeline modules have no embedded magic
strings. Runtime overrides come from ``DOCFETCH_*`` environment variables and
are resolved through the ``_env_*`` helpers below.
"""

from __future__ import annotations

import os

# Headers
HDR_USER_AGENT = "User-Agent"
HDR_CONTENT_TYPE = "Content-Type"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/136.0.0.0 Safari/537.36"
)

# Pagination bounds
DEFAULT_MAX_LENGTH = 20000
MAX_LENGTH_LIMIT = 1_000_000
DEFAULT_START_INDEX = 0

# Media harvesting
MEDIA_REF_CAP = 10

# Transport
DEFAULT_TIMEOUT = 30.0
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
SERVER_NAME = "docfetch"

# Content-type hints
HTML_MIME_HINT = "text/html"
HTML_ROOT_MARKER = "<html"
PDF_MIME_HINT = "application/pdf"

# Agent-facing message templates
EXTRACTION_FAILURE_REASON = "Page failed to be simplified from HTML"
OPAQUE_NOTE_TEMPLATE = (
    "Content type {content_type} cannot be simplified to markdown, "
    "but here is the raw content:\n"
)
TRUNCATION_NOTICE_TEMPLATE = (
    "\n\n<error>Content truncated. Call the fetch tool with a start_index of "
    "{next_start_index} to get more content.</error>"
)
IMAGES_HEADER = "\n\nImages found in page:\n"


def _env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_int(name: str, default: int = 0) -> int:
    try:
        raw = os.getenv(name, "")
        return int(raw) if raw.strip() else default
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float = 0.0) -> float:
    try:
        raw = os.getenv(name, "")
        return float(raw) if raw.strip() else default
    except (TypeError, ValueError):
        return default
