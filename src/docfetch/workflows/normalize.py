"""Content normalization pipeline: classify, extract, convert, paginate."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core.keys import (
    K_CONTENT_CLASS,
    K_FAILURE,
    K_MEDIA,
    K_NEXT_START_INDEX,
    K_PREFIX,
    K_TEXT,
    K_TRUNCATED,
    K_URL,
)
from .content_type import ContentClass, classify
from .fetcher_config import MEDIA_REF_CAP, OPAQUE_NOTE_TEMPLATE
from .html_normalize import decode_bytes_auto
from .markdown import html_to_markdown
from .media import harvest_media
from .pagination import PageWindow, paginate
from .pdf_extract import extract_pdf_text
from .readability import extract_main_content
from .results import ExtractionFailure, ExtractionResult, ExtractionSuccess, MediaRef
from .web_fetch import FetchedDocument

__all__ = ["NormalizedOutput", "extract", "normalize", "opaque_note"]

logger = logging.getLogger(__name__)


@dataclass
class NormalizedOutput:
    """What the request layer renders: one page of text plus the article's images."""

    url: str
    text: str
    media_refs: List[MediaRef] = field(default_factory=list)
    prefix_note: str = ""
    truncated: bool = False
    next_start_index: Optional[int] = None
    content_class: ContentClass = ContentClass.OPAQUE
    failure: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            K_URL: self.url,
            K_CONTENT_CLASS: self.content_class.value,
            K_PREFIX: self.prefix_note,
            K_TEXT: self.text,
            K_TRUNCATED: self.truncated,
            K_NEXT_START_INDEX: self.next_start_index,
            K_MEDIA: [ref.to_dict() for ref in self.media_refs],
        }
        if self.failure:
            payload[K_FAILURE] = self.failure
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


def opaque_note(content_type: Optional[str]) -> str:
    return OPAQUE_NOTE_TEMPLATE.format(content_type=content_type or "")


def extract(document: FetchedDocument, force_raw: bool = False) -> Tuple[ContentClass, ExtractionResult]:
    """Run the extraction path picked by the classifier; never raises for content problems."""

    text = decode_bytes_auto(document.raw_bytes, document.declared_content_type)
    content_class = classify(text, document.declared_content_type, force_raw=force_raw)

    if content_class is ContentClass.HTML:
        fragment = extract_main_content(text, document.requested_url)
        if isinstance(fragment, ExtractionFailure):
            return content_class, fragment
        markdown = html_to_markdown(fragment.html)
        media = harvest_media(fragment.html, document.requested_url, limit=MEDIA_REF_CAP)
        return content_class, ExtractionSuccess(text=markdown, media_refs=media)

    if content_class is ContentClass.PDF:
        pdf_text = extract_pdf_text(document.raw_bytes, document.requested_url)
        if not pdf_text:
            logger.info("PDF at %s produced no text", document.requested_url)
        return content_class, ExtractionSuccess(text=pdf_text)

    return content_class, ExtractionSuccess(text=text, prefix_note=opaque_note(document.declared_content_type))


def normalize(
    document: FetchedDocument,
    window: Optional[PageWindow] = None,
    force_raw: bool = False,
) -> NormalizedOutput:
    """Turn a fetched document into one page of normalized text.

    An :class:`ExtractionFailure` becomes the page text itself so the caller
    always gets a structured result. Pagination only ever touches the text;
    media references come back in full.
    """

    window = window or PageWindow()
    content_class, result = extract(document, force_raw=force_raw)

    if isinstance(result, ExtractionFailure):
        return NormalizedOutput(
            url=document.requested_url,
            text=result.reason,
            content_class=content_class,
            failure=result.reason,
        )

    page = paginate(result.text, window)
    return NormalizedOutput(
        url=document.requested_url,
        text=page.slice,
        media_refs=list(result.media_refs),
        prefix_note=result.prefix_note,
        truncated=page.truncated,
        next_start_index=page.next_start_index,
        content_class=content_class,
    )
