"""Fetch a URL and normalize it into paginated markdown."""

from .errors import DocfetchError, RetrievalError, ValidationError
from .workflows import (
    ContentClass,
    FetchConfig,
    FetchedDocument,
    MediaRef,
    NormalizedOutput,
    PageWindow,
    fetch_and_normalize,
    normalize,
    render_tool_text,
    retrieve,
)

__version__ = "0.1.0"

__all__ = [
    "DocfetchError",
    "RetrievalError",
    "ValidationError",
    "ContentClass",
    "FetchConfig",
    "FetchedDocument",
    "MediaRef",
    "NormalizedOutput",
    "PageWindow",
    "fetch_and_normalize",
    "normalize",
    "render_tool_text",
    "retrieve",
]
