"""Readability-style main-content extraction.

The page is parsed with lxml, relative links are resolved against the
request URL, boilerplate containers are removed, and every remaining element
is indexed into a :class:`NodeTable` (document order, parent/child relations
stored as integer indices). Paragraph-like nodes then push a content score up
to their ancestors; the ancestor with the best link-density-adjusted score is
the article. Ties go to the node that appears first in the document.

All weights and thresholds below are plain module constants so the heuristic
can be tuned without touching control flow. Nothing here depends on
randomness or wall-clock time; identical input yields identical output.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from html import escape
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from lxml import etree
from lxml import html as lxml_html

from .fetcher_config import EXTRACTION_FAILURE_REASON
from .html_normalize import clean_conservative, minimal_text_fix
from .results import ExtractionFailure

__all__ = [
    "ArticleFragment",
    "NodeTable",
    "extract_main_content",
]

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tunables
# ---------------------------------------------------------------------------

# Paragraph scoring
TAGS_TO_SCORE = frozenset({"section", "h2", "h3", "h4", "h5", "h6", "p", "td", "pre"})
MIN_PARAGRAPH_CHARS = 25
BASE_PARAGRAPH_SCORE = 1.0
CHARS_PER_LENGTH_POINT = 100
MAX_LENGTH_POINTS = 3
MAX_ANCESTOR_DEPTH = 5

# Initial score by tag for a node that becomes a candidate
TAG_WEIGHTS: Dict[str, float] = {
    "article": 10.0,
    "main": 8.0,
    "div": 5.0,
    "section": 3.0,
    "pre": 3.0,
    "td": 3.0,
    "blockquote": 3.0,
    "address": -3.0,
    "ol": -3.0,
    "ul": -3.0,
    "dl": -3.0,
    "dd": -3.0,
    "dt": -3.0,
    "li": -3.0,
    "form": -3.0,
    "h1": -5.0,
    "h2": -5.0,
    "h3": -5.0,
    "h4": -5.0,
    "h5": -5.0,
    "h6": -5.0,
    "th": -5.0,
}

# class/id hints
CLASS_WEIGHT = 25.0
POSITIVE_HINT_RE = re.compile(
    r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|story",
    re.I,
)
NEGATIVE_HINT_RE = re.compile(
    r"-ad-|hidden|^hid$| hid$| hid |^hid |banner|combx|comment|com-|contact|foot|footer|footnote|"
    r"gdpr|masthead|media|meta|outbrain|promo|related|scroll|share|shoutbox|sidebar|skyscraper|"
    r"sponsor|shopping|tags|tool|widget",
    re.I,
)
UNLIKELY_CANDIDATE_RE = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|footer|gdpr|"
    r"header|legends|menu|related|remark|replies|rss|shoutbox|sidebar|skyscraper|social|sponsor|"
    r"supplemental|ad-break|agegate|pagination|pager|popup|yom-remote",
    re.I,
)
MAYBE_CANDIDATE_RE = re.compile(r"and|article|body|column|content|main|shadow", re.I)
UNLIKELY_ROLES = frozenset(
    {"menu", "menubar", "complementary", "navigation", "alert", "alertdialog", "dialog", "banner", "contentinfo"}
)

# Always-removed chrome and non-content tags
BOILERPLATE_TAGS = frozenset(
    {
        "nav",
        "aside",
        "footer",
        "script",
        "style",
        "noscript",
        "template",
        "iframe",
        "button",
        "input",
        "select",
        "textarea",
        "link",
        "meta",
    }
)
PROTECTED_TAGS = frozenset({"html", "body", "article", "main", "a"})

# A div with none of these below it is treated as a paragraph
BLOCK_TAGS = frozenset({"blockquote", "dl", "div", "img", "ol", "p", "pre", "table", "ul", "section", "article"})

# Sibling merging around the winning node
SIBLING_SCORE_RATIO = 0.2
SIBLING_SCORE_FLOOR = 10.0
SIBLING_SHARED_CLASS_BONUS_RATIO = 0.2
SIBLING_PARAGRAPH_MIN_CHARS = 80
SIBLING_PARAGRAPH_MAX_LINK_DENSITY = 0.25
SENTENCE_END_RE = re.compile(r"\.( |$)")

# Conditional cleaning inside the winning region
CONDITIONAL_CLEAN_TAGS = frozenset({"div", "section", "ul", "ol", "table", "form"})
LINK_DENSITY_LIMIT = 0.5
NEGATIVE_WEIGHT_LINK_DENSITY_LIMIT = 0.2

# Retry with progressively gentler passes until the article is this long
CHAR_THRESHOLD = 500
# (strip unlikely candidates, clean conditionally)
ATTEMPT_FLAGS: Tuple[Tuple[bool, bool], ...] = ((True, True), (False, True), (False, False))

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>", re.I)
_HIDDEN_STYLE_RE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden", re.I)


# ---------------------------------------------------------------------------
# Node table
# ---------------------------------------------------------------------------


def _collapsed_len(value: Optional[str]) -> int:
    if not value:
        return 0
    return len(" ".join(value.split()))


@dataclass
class NodeTable:
    """Elements in document order with index-based tree relations.

    ``parents[i]`` is the index of node ``i``'s parent (``-1`` for the root),
    ``children[i]`` lists child indices in order. Text and link-text lengths
    are accumulated bottom-up in a single reverse pass over the table.
    """

    nodes: List[etree._Element] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    parents: List[int] = field(default_factory=list)
    children: List[List[int]] = field(default_factory=list)
    text_len: List[int] = field(default_factory=list)
    link_len: List[int] = field(default_factory=list)
    has_block: List[bool] = field(default_factory=list)
    index: Dict[etree._Element, int] = field(default_factory=dict)

    @classmethod
    def build(cls, root: etree._Element) -> "NodeTable":
        table = cls()
        for el in root.iter(etree.Element):
            idx = len(table.nodes)
            parent = el.getparent()
            parent_idx = table.index.get(parent, -1) if parent is not None else -1
            table.nodes.append(el)
            table.tags.append(el.tag.lower() if isinstance(el.tag, str) else "")
            table.parents.append(parent_idx)
            table.children.append([])
            table.index[el] = idx
            if parent_idx >= 0:
                table.children[parent_idx].append(idx)

        size = len(table.nodes)
        table.text_len = [0] * size
        table.link_len = [0] * size
        table.has_block = [False] * size
        for idx in range(size - 1, -1, -1):
            el = table.nodes[idx]
            own = _collapsed_len(el.text)
            for child in el:
                own += _collapsed_len(child.tail)
            table.text_len[idx] += own
            if table.tags[idx] == "a":
                table.link_len[idx] = table.text_len[idx]
            parent_idx = table.parents[idx]
            if parent_idx >= 0:
                table.text_len[parent_idx] += table.text_len[idx]
                table.link_len[parent_idx] += table.link_len[idx]
                if table.has_block[idx] or table.tags[idx] in BLOCK_TAGS:
                    table.has_block[parent_idx] = True
        return table

    def __len__(self) -> int:
        return len(self.nodes)

    def ancestors(self, idx: int, max_depth: int) -> Iterator[int]:
        parent = self.parents[idx]
        depth = 0
        while parent >= 0 and depth < max_depth:
            yield parent
            parent = self.parents[parent]
            depth += 1

    def link_density(self, idx: int) -> float:
        total = self.text_len[idx]
        if total <= 0:
            return 0.0
        return min(1.0, self.link_len[idx] / total)

    def first(self, tag: str) -> int:
        for idx, name in enumerate(self.tags):
            if name == tag:
                return idx
        return -1


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArticleFragment:
    """Serialized HTML of the chosen content region."""

    html: str
    text_length: int


def _class_weight(el: etree._Element) -> float:
    weight = 0.0
    for attr in ("class", "id"):
        value = el.get(attr)
        if not value:
            continue
        if NEGATIVE_HINT_RE.search(value):
            weight -= CLASS_WEIGHT
        if POSITIVE_HINT_RE.search(value):
            weight += CLASS_WEIGHT
    return weight


def _is_hidden(el: etree._Element) -> bool:
    if el.get("hidden") is not None:
        return True
    if (el.get("aria-hidden") or "").lower() == "true":
        return True
    return bool(_HIDDEN_STYLE_RE.search(el.get("style") or ""))


def _is_unlikely(el: etree._Element, tag: str) -> bool:
    if tag in PROTECTED_TAGS:
        return False
    if (el.get("role") or "").lower() in UNLIKELY_ROLES:
        return True
    match_string = f"{el.get('class') or ''} {el.get('id') or ''}"
    if not match_string.strip():
        return False
    return bool(UNLIKELY_CANDIDATE_RE.search(match_string)) and not MAYBE_CANDIDATE_RE.search(match_string)


def _parse_document(html: str, url: Optional[str]) -> Optional[etree._Element]:
    payload = _XML_DECLARATION_RE.sub("", html or "", count=1)
    if not payload.strip():
        return None
    try:
        doc = lxml_html.document_fromstring(payload)
    except (etree.ParserError, ValueError) as exc:
        logger.warning("HTML parse failed for %s: %s", url or "<inline>", exc)
        return None
    if url:
        doc.make_links_absolute(url, resolve_base_href=True, handle_failures="discard")
    return doc


def _strip_boilerplate(doc: etree._Element, strip_unlikely: bool) -> None:
    doomed: List[etree._Element] = []
    for el in doc.iter(etree.Element):
        tag = el.tag.lower() if isinstance(el.tag, str) else ""
        if tag in ("html", "body"):
            continue
        if tag in BOILERPLATE_TAGS or _is_hidden(el):
            doomed.append(el)
        elif strip_unlikely and _is_unlikely(el, tag):
            doomed.append(el)
    for el in doomed:
        if el.getparent() is not None:
            el.drop_tree()


def _paragraph_score(el: etree._Element) -> Optional[float]:
    text = " ".join(el.text_content().split())
    if len(text) < MIN_PARAGRAPH_CHARS:
        return None
    score = BASE_PARAGRAPH_SCORE + text.count(",")
    score += min(len(text) // CHARS_PER_LENGTH_POINT, MAX_LENGTH_POINTS)
    return score


def _score_candidates(table: NodeTable) -> Dict[int, float]:
    scores: Dict[int, float] = {}
    for idx, tag in enumerate(table.tags):
        if tag not in TAGS_TO_SCORE and not (tag == "div" and not table.has_block[idx]):
            continue
        score = _paragraph_score(table.nodes[idx])
        if score is None:
            continue
        for level, anc in enumerate(table.ancestors(idx, MAX_ANCESTOR_DEPTH)):
            # the document root never competes
            if table.parents[anc] < 0:
                break
            if anc not in scores:
                scores[anc] = TAG_WEIGHTS.get(table.tags[anc], 0.0) + _class_weight(table.nodes[anc])
            if level == 0:
                divider = 1
            elif level == 1:
                divider = 2
            else:
                divider = level * 3
            scores[anc] += score / divider
    return {idx: score * (1.0 - table.link_density(idx)) for idx, score in scores.items()}


def _pick_top(scores: Dict[int, float]) -> Optional[int]:
    top: Optional[int] = None
    for idx in sorted(scores):
        if top is None or scores[idx] > scores[top]:
            top = idx
    return top


def _merge_siblings(table: NodeTable, top: int, scores: Dict[int, float]) -> List[int]:
    parent = table.parents[top]
    if parent < 0:
        return [top]
    top_score = scores.get(top, 0.0)
    threshold = max(SIBLING_SCORE_FLOOR, top_score * SIBLING_SCORE_RATIO)
    top_class = table.nodes[top].get("class") or ""
    picked: List[int] = []
    for sib in table.children[parent]:
        if sib == top:
            picked.append(sib)
            continue
        bonus = 0.0
        if top_class and (table.nodes[sib].get("class") or "") == top_class:
            bonus = top_score * SIBLING_SHARED_CLASS_BONUS_RATIO
        if sib in scores and scores[sib] + bonus >= threshold:
            picked.append(sib)
            continue
        if table.tags[sib] != "p":
            continue
        text = " ".join(table.nodes[sib].text_content().split())
        density = table.link_density(sib)
        if len(text) > SIBLING_PARAGRAPH_MIN_CHARS and density < SIBLING_PARAGRAPH_MAX_LINK_DENSITY:
            picked.append(sib)
        elif 0 < len(text) <= SIBLING_PARAGRAPH_MIN_CHARS and density == 0 and SENTENCE_END_RE.search(text):
            picked.append(sib)
    return picked


def _clean_conditionally(table: NodeTable, roots: Sequence[int]) -> None:
    doomed: List[etree._Element] = []
    for root in roots:
        for el in table.nodes[root].iterdescendants(etree.Element):
            idx = table.index.get(el)
            if idx is None or table.tags[idx] not in CONDITIONAL_CLEAN_TAGS:
                continue
            density = table.link_density(idx)
            if density > LINK_DENSITY_LIMIT:
                doomed.append(el)
            elif _class_weight(el) < 0 and density > NEGATIVE_WEIGHT_LINK_DENSITY_LIMIT:
                doomed.append(el)
    for el in doomed:
        if el.getparent() is not None:
            el.drop_tree()


def _serialize(nodes: Sequence[etree._Element]) -> str:
    parts: List[str] = []
    for el in nodes:
        tag = el.tag.lower() if isinstance(el.tag, str) else ""
        if tag in ("html", "body"):
            # never emit document-level wrappers, only what they hold
            parts.append(escape(el.text or "", quote=False))
            for child in el:
                parts.append(lxml_html.tostring(child, encoding="unicode", with_tail=True))
        else:
            parts.append(lxml_html.tostring(el, encoding="unicode", with_tail=False))
    return "<div>" + "".join(parts) + "</div>"


def _has_content(nodes: Sequence[etree._Element]) -> Tuple[bool, int]:
    text_length = 0
    has_media = False
    for el in nodes:
        text_length += len(" ".join(el.text_content().split()))
        if not has_media:
            tag = el.tag.lower() if isinstance(el.tag, str) else ""
            has_media = tag == "img" or next(el.iterdescendants("img"), None) is not None
    return (text_length > 0 or has_media), text_length


def _grab_article(html: str, url: Optional[str], strip_unlikely: bool, clean: bool) -> Optional[ArticleFragment]:
    doc = _parse_document(html, url)
    if doc is None:
        return None
    _strip_boilerplate(doc, strip_unlikely)
    table = NodeTable.build(doc)
    if not len(table):
        return None

    scores = _score_candidates(table)
    top = _pick_top(scores)
    if top is None:
        top = table.first("body")
        if top < 0:
            top = 0
        selected = [top]
    else:
        selected = _merge_siblings(table, top, scores)

    if clean:
        _clean_conditionally(table, selected)
    nodes = [table.nodes[idx] for idx in selected]
    ok, text_length = _has_content(nodes)
    if not ok:
        return None
    return ArticleFragment(html=_serialize(nodes), text_length=text_length)


def extract_main_content(html: str, url: Optional[str] = None) -> ArticleFragment | ExtractionFailure:
    """Isolate the primary readable region of ``html``.

    Runs up to three passes, each on a fresh parse, relaxing boilerplate
    removal until the article reaches :data:`CHAR_THRESHOLD` characters. When
    no pass reaches it, the longest result wins (earliest pass on ties).
    """

    if not html or not html.strip():
        return ExtractionFailure(EXTRACTION_FAILURE_REASON)
    prepared = clean_conservative(minimal_text_fix(_XML_DECLARATION_RE.sub("", html, count=1)))

    best: Optional[ArticleFragment] = None
    for strip_unlikely, clean in ATTEMPT_FLAGS:
        fragment = _grab_article(prepared, url, strip_unlikely, clean)
        if fragment is None:
            continue
        if fragment.text_length >= CHAR_THRESHOLD:
            return fragment
        if best is None or fragment.text_length > best.text_length:
            best = fragment
    if best is None:
        logger.warning("No main content region found for %s", url or "<inline>")
        return ExtractionFailure(EXTRACTION_FAILURE_REASON)
    return best
