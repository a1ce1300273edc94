from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp

from ..errors import RetrievalError
from .fetcher_config import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    HDR_CONTENT_TYPE,
    HDR_USER_AGENT,
    _env_float,
    _env_str,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for the single best-effort GET."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "FetchConfig":
        return cls(
            user_agent=_env_str("DOCFETCH_USER_AGENT", DEFAULT_USER_AGENT),
            timeout=max(0.1, _env_float("DOCFETCH_TIMEOUT", DEFAULT_TIMEOUT)),
        )


@dataclass(frozen=True)
class FetchedDocument:
    """Response body as received; consumed once by the pipeline, never cached."""

    raw_bytes: bytes
    declared_content_type: Optional[str]
    requested_url: str


def _status_error(url: str, status: int) -> RetrievalError:
    return RetrievalError(f"Failed to fetch {url} - status code {status}", url=url, status=status)


async def _get(session: aiohttp.ClientSession, url: str, headers: Dict[str, str], timeout: float) -> FetchedDocument:
    async with session.get(url, headers=headers, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
        if not 200 <= resp.status < 300:
            raise _status_error(url, resp.status)
        raw_bytes = await resp.read()
        content_type = resp.headers.get(HDR_CONTENT_TYPE)
    return FetchedDocument(raw_bytes=raw_bytes, declared_content_type=content_type, requested_url=url)


async def retrieve(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    config: Optional[FetchConfig] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> FetchedDocument:
    """GET ``url`` once.

    Non-2xx responses raise :class:`RetrievalError` carrying the URL and
    status; transport failures and timeouts raise it with ``status=None``.
    Cancelling the awaiting task aborts the request and propagates
    :class:`asyncio.CancelledError`; nothing partial is returned.
    """

    cfg = config or FetchConfig()
    request_headers = {HDR_USER_AGENT: cfg.user_agent}
    if headers:
        request_headers.update(headers)
    try:
        if session is not None:
            return await _get(session, url, request_headers, cfg.timeout)
        async with aiohttp.ClientSession() as owned:
            return await _get(owned, url, request_headers, cfg.timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("Timed out after %.1fs fetching %s", cfg.timeout, url)
        raise RetrievalError(f"Failed to fetch {url} - timed out after {cfg.timeout:g}s", url=url) from exc
    except aiohttp.ClientError as exc:
        logger.warning("Network error fetching %s: %s", url, exc)
        raise RetrievalError(f"Failed to fetch {url} - {exc}", url=url) from exc
