"""Convert the extracted article fragment into markdown."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup  # type: ignore
from markdownify import ATX, MarkdownConverter

__all__ = ["html_to_markdown", "clean_markdown"]

# Dropped together with their content; the converter never sees them.
NON_CONTENT_TAGS = ("script", "style", "noscript", "template")

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def _converter() -> MarkdownConverter:
    return MarkdownConverter(
        heading_style=ATX,
        bullets="-",
        strong_em_symbol="*",
        escape_underscores=False,
    )


def clean_markdown(md: str) -> str:
    """Collapse runs of blank lines and trailing spaces."""

    md = "\n".join(line.rstrip() for line in md.splitlines())
    md = _EXCESS_BLANK_LINES.sub("\n\n", md)
    return md.strip()


def html_to_markdown(fragment: str) -> str:
    """Render ``fragment`` as markdown: ATX headings, fenced code, inline links and emphasis."""

    if not fragment or not fragment.strip():
        return ""
    soup = BeautifulSoup(fragment, "lxml")
    for tag in soup(list(NON_CONTENT_TAGS)):
        tag.decompose()
    return clean_markdown(_converter().convert_soup(soup))
