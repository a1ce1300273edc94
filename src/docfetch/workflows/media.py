"""Collect image references from the extracted article."""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup  # type: ignore

from .fetcher_config import MEDIA_REF_CAP
from .results import MediaRef

__all__ = ["harvest_media"]

# Checked in order; lazy loaders park the real URL in a data-* attribute.
SOURCE_ATTRS = ("src", "data-src", "data-original", "data-lazy-src")


def _image_source(img) -> str:
    for attr in SOURCE_ATTRS:
        value = img.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def harvest_media(fragment: str, base_url: Optional[str] = None, limit: int = MEDIA_REF_CAP) -> List[MediaRef]:
    """Return the first ``limit`` images of ``fragment`` in document order.

    Only the extracted fragment is scanned, so images in page chrome never
    appear. Images without any source are skipped; duplicates are kept.
    """

    if not fragment or limit <= 0:
        return []
    soup = BeautifulSoup(fragment, "lxml")
    refs: List[MediaRef] = []
    for img in soup.find_all("img"):
        src = _image_source(img)
        if not src:
            continue
        if base_url:
            try:
                src = urljoin(base_url, src)
            except ValueError:
                pass
        alt = img.get("alt")
        refs.append(MediaRef(src=src, alt=alt if isinstance(alt, str) else ""))
        if len(refs) >= limit:
            break
    return refs
