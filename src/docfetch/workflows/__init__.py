"""High-level exports for the docfetch workflows."""

from .content_type import ContentClass, classify
from .fetcher import fetch_and_normalize, render_tool_text, validate_fetch_args
from .normalize import NormalizedOutput, extract, normalize
from .pagination import PageWindow, PaginatedOutput, paginate
from .results import ExtractionFailure, ExtractionResult, ExtractionSuccess, MediaRef
from .web_fetch import FetchConfig, FetchedDocument, retrieve

__all__ = [
    "ContentClass",
    "classify",
    "fetch_and_normalize",
    "render_tool_text",
    "validate_fetch_args",
    "NormalizedOutput",
    "extract",
    "normalize",
    "PageWindow",
    "PaginatedOutput",
    "paginate",
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
    "MediaRef",
    "FetchConfig",
    "FetchedDocument",
    "retrieve",
]
