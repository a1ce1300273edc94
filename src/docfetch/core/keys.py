"""Shared payload keys to avoid magic strings across docfetch modules."""

from __future__ import annotations

# Normalized output keys
K_URL = "url"
K_TEXT = "text"
K_PREFIX = "prefix"
K_CONTENT_CLASS = "content_class"
K_TRUNCATED = "truncated"
K_NEXT_START_INDEX = "next_start_index"
K_FAILURE = "failure"
K_MEDIA = "images"
K_SRC = "src"
K_ALT = "alt"
