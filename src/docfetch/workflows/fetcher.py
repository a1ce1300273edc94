"""Request-level helpers: argument validation, fetch + normalize, agent-facing rendering."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

from ..errors import ValidationError
from .fetcher_config import (
    DEFAULT_MAX_LENGTH,
    DEFAULT_START_INDEX,
    IMAGES_HEADER,
    MAX_LENGTH_LIMIT,
    TRUNCATION_NOTICE_TEMPLATE,
)
from .normalize import NormalizedOutput, normalize
from .pagination import PageWindow
from .web_fetch import FetchConfig, retrieve

__all__ = ["validate_fetch_args", "fetch_and_normalize", "render_tool_text"]

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = {"http", "https"}


def validate_fetch_args(url: str, max_length: int, start_index: int) -> PageWindow:
    """Check request options and return the page window they describe."""

    parsed = urlparse((url or "").strip())
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not parsed.netloc:
        raise ValidationError(f"Invalid arguments: url must be an absolute http(s) URL, got {url!r}")
    if isinstance(max_length, bool) or not isinstance(max_length, int):
        raise ValidationError(f"Invalid arguments: max_length must be an integer, got {max_length!r}")
    if isinstance(start_index, bool) or not isinstance(start_index, int):
        raise ValidationError(f"Invalid arguments: start_index must be an integer, got {start_index!r}")
    if max_length <= 0 or max_length > MAX_LENGTH_LIMIT:
        raise ValidationError(f"Invalid arguments: max_length must be between 1 and {MAX_LENGTH_LIMIT}, got {max_length}")
    if start_index < 0:
        raise ValidationError(f"Invalid arguments: start_index must be >= 0, got {start_index}")
    return PageWindow(start_index=start_index, max_length=max_length)


async def fetch_and_normalize(
    url: str,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    start_index: int = DEFAULT_START_INDEX,
    raw: bool = False,
    config: Optional[FetchConfig] = None,
) -> NormalizedOutput:
    """Validate, retrieve once, then normalize.

    Raises ``ValidationError`` or ``RetrievalError``; every extraction-stage
    problem comes back as content instead.
    """

    window = validate_fetch_args(url, max_length, start_index)
    document = await retrieve(url, config=config or FetchConfig.from_env())
    output = normalize(document, window, force_raw=raw)
    if output.failure:
        logger.warning("Extraction failed for %s: %s", url, output.failure)
    return output


def render_tool_text(url: str, output: NormalizedOutput) -> str:
    """Format ``output`` the way the fetch tool reports it to an agent."""

    if output.failure:
        content = f"<error>{output.failure}</error>"
    else:
        content = output.text
    if output.truncated and output.next_start_index is not None:
        content += TRUNCATION_NOTICE_TEMPLATE.format(next_start_index=output.next_start_index)
    images = ""
    if output.media_refs:
        images = IMAGES_HEADER + "\n".join(f"- {ref.src}" for ref in output.media_refs)
    return f"{output.prefix_note}Contents of {url}:\n{content}{images}"
