from lxml import html as lxml_html

from docfetch.workflows.readability import (
    ArticleFragment,
    NodeTable,
    _pick_top,
    extract_main_content,
)
from docfetch.workflows.results import ExtractionFailure

PARA = "This is a sentence, with commas, and enough length to count. " * 5

ARTICLE_PAGE = f"""
<html><head><title>Example</title><script>var tracking = 1;</script></head>
<body>
  <nav><a href="/">Home</a> <a href="/about">About</a></nav>
  <div class="sidebar"><p>Sidebar promo text that is long enough to be scored, really it is.</p></div>
  <article>
    <h1>Headline</h1>
    <p>{PARA}</p>
    <p>{PARA} <a href="/more">read more</a></p>
  </article>
  <footer>Copyright footer text</footer>
</body></html>
"""


def test_extracts_article_and_drops_chrome():
    result = extract_main_content(ARTICLE_PAGE, "https://example.com/post")
    assert isinstance(result, ArticleFragment)
    assert "Headline" in result.html
    assert "This is a sentence" in result.html
    assert "Sidebar promo" not in result.html
    assert "Copyright footer" not in result.html
    assert "About" not in result.html
    assert "tracking" not in result.html
    assert result.html.startswith("<div>")


def test_extraction_is_deterministic():
    first = extract_main_content(ARTICLE_PAGE, "https://example.com/post")
    second = extract_main_content(ARTICLE_PAGE, "https://example.com/post")
    assert first == second


def test_relative_links_resolved_against_url():
    html = (
        "<html><body><article><p>Docs live <a href='/docs'>here</a>, see them.</p>"
        "<img src='img/x.png' alt='x'></article></body></html>"
    )
    result = extract_main_content(html, "https://example.com/blog/post")
    assert isinstance(result, ArticleFragment)
    assert "https://example.com/docs" in result.html
    assert "https://example.com/blog/img/x.png" in result.html


def test_short_page_falls_back_to_body():
    html = '<html><body><article><h1>T</h1><p>Hello <img src="a.png" alt="A"></p></article></body></html>'
    result = extract_main_content(html, "https://example.com/")
    assert isinstance(result, ArticleFragment)
    assert "<h1>T</h1>" in result.html
    assert "Hello" in result.html
    assert "<body" not in result.html


def test_gentler_pass_recovers_content_in_unlikely_container():
    html = (
        "<html><body><div class='sidebar'><p>Only content lives here, in the sidebar, "
        "for this test page.</p></div></body></html>"
    )
    result = extract_main_content(html, "https://example.com/")
    assert isinstance(result, ArticleFragment)
    assert "Only content lives here" in result.html


def test_empty_page_is_a_failure():
    result = extract_main_content("<html><body></body></html>", "https://example.com/")
    assert isinstance(result, ExtractionFailure)
    assert result.reason


def test_navigation_only_page_is_a_failure():
    html = "<html><body><nav><a href='/'>Home</a><a href='/x'>X</a></nav></body></html>"
    assert isinstance(extract_main_content(html, "https://example.com/"), ExtractionFailure)


def test_blank_input_is_a_failure():
    assert isinstance(extract_main_content("", None), ExtractionFailure)
    assert isinstance(extract_main_content("   ", None), ExtractionFailure)


def test_link_hub_inside_article_is_cleaned():
    links = "".join(f"<li><a href='/p{i}'>Related story number {i}</a></li>" for i in range(10))
    html = f"<html><body><article><p>{PARA}</p><p>{PARA}</p><ul>{links}</ul></article></body></html>"
    result = extract_main_content(html, "https://example.com/")
    assert isinstance(result, ArticleFragment)
    assert "Related story" not in result.html
    assert "This is a sentence" in result.html


def test_pick_top_breaks_ties_by_document_order():
    assert _pick_top({7: 3.0, 2: 3.0, 5: 1.0}) == 2
    assert _pick_top({4: 1.0, 9: 2.0}) == 9
    assert _pick_top({}) is None


def test_node_table_indices_and_lengths():
    root = lxml_html.fromstring("<div><p>a <a href='#'>link</a></p><p>b</p></div>")
    table = NodeTable.build(root)
    assert table.tags == ["div", "p", "a", "p"]
    assert table.parents == [-1, 0, 1, 0]
    assert table.children[0] == [1, 3]
    assert table.text_len[2] == 4
    assert table.text_len[0] == 6
    assert table.link_len[0] == 4
    assert abs(table.link_density(0) - 4 / 6) < 1e-9
    assert list(table.ancestors(2, 5)) == [1, 0]
    assert table.has_block[0] is True


def test_hidden_blocks_inside_article_are_dropped():
    page = f"""
    <html><body><article>
      <p>{PARA}</p>
      <div style="display:none"><p>SECRET {PARA}</p><img src="/secret.png"></div>
      <p style="visibility: hidden">INVISIBLE {PARA}</p>
      <p>{PARA}</p>
    </article></body></html>
    """
    result = extract_main_content(page, "https://example.com/post")
    assert isinstance(result, ArticleFragment)
    assert "This is a sentence" in result.html
    assert "SECRET" not in result.html
    assert "INVISIBLE" not in result.html
    assert "secret.png" not in result.html
