"""MCP server exposing the ``fetch`` tool over stdio or streamable HTTP."""

from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent

from .errors import DocfetchError
from .workflows.fetcher import fetch_and_normalize, render_tool_text
from .workflows.fetcher_config import (
    DEFAULT_HOST,
    DEFAULT_MAX_LENGTH,
    DEFAULT_PORT,
    DEFAULT_START_INDEX,
    SERVER_NAME,
)
from .workflows.web_fetch import FetchConfig

logger = logging.getLogger(__name__)

FETCH_TOOL_NAME = "fetch"
FETCH_TOOL_DESCRIPTION = (
    "Retrieves URLs from the Internet and extracts their content as markdown. "
    "If images are found, their URLs will be included in the response."
)

# CLI --mode value -> FastMCP transport name
TRANSPORTS = {
    "stdio": "stdio",
    "http": "streamable-http",
}


def _text_result(text: str, *, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


async def fetch(
    url: str,
    max_length: int = DEFAULT_MAX_LENGTH,
    start_index: int = DEFAULT_START_INDEX,
    raw: bool = False,
) -> CallToolResult:
    """Fetch a URL and return its main content as markdown.

    Args:
        url: Absolute http(s) URL to fetch.
        max_length: Maximum number of characters to return.
        start_index: Character offset to start from; use the value from a truncation notice to continue.
        raw: Return the document as-is, skipping HTML simplification and PDF text extraction.
    """
    try:
        output = await fetch_and_normalize(
            url,
            max_length=max_length,
            start_index=start_index,
            raw=raw,
            config=FetchConfig.from_env(),
        )
    except DocfetchError as exc:
        logger.warning("fetch tool failed for %s: %s", url, exc)
        return _text_result(f"Error: {exc}", is_error=True)
    return _text_result(render_tool_text(url, output))


def build_server(host: Optional[str] = None, port: Optional[int] = None) -> FastMCP:
    server = FastMCP(SERVER_NAME, host=host or DEFAULT_HOST, port=port or DEFAULT_PORT)
    server.tool(name=FETCH_TOOL_NAME, description=FETCH_TOOL_DESCRIPTION)(fetch)
    return server


def run_server(mode: str = "stdio", host: Optional[str] = None, port: Optional[int] = None) -> None:
    if mode not in TRANSPORTS:
        raise ValueError(f"Invalid mode: {mode}. Valid options are: {', '.join(TRANSPORTS)}")
    server = build_server(host=host, port=port)
    logger.info("Starting %s MCP server (%s)", SERVER_NAME, mode)
    server.run(transport=TRANSPORTS[mode])
