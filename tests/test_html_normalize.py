from docfetch.workflows.html_normalize import (
    charset_from_content_type,
    clean_conservative,
    decode_bytes_auto,
    minimal_text_fix,
)


def test_charset_from_content_type():
    assert charset_from_content_type("text/html; charset=ISO-8859-1") == "iso-8859-1"
    assert charset_from_content_type('text/html; charset="utf-8"') == "utf-8"
    assert charset_from_content_type("text/html") is None
    assert charset_from_content_type(None) is None


def test_decode_prefers_declared_charset():
    body = "café".encode("latin-1")
    assert decode_bytes_auto(body, "text/html; charset=latin-1") == "café"


def test_decode_defaults_to_utf8():
    body = "naïve – text".encode("utf-8")
    assert decode_bytes_auto(body, "text/plain") == "naïve – text"
    assert decode_bytes_auto(b"", "text/plain") == ""


def test_decode_unknown_charset_falls_back():
    assert decode_bytes_auto(b"hello", "text/plain; charset=not-a-charset") == "hello"


def test_minimal_text_fix_strips_zero_width():
    assert minimal_text_fix("a\u200bb\ufeffc") == "abc"
    assert minimal_text_fix("") == ""


def test_clean_conservative_drops_scripts_keeps_links_and_images():
    html = (
        "<html><head><style>.x{color:red}</style></head><body>"
        "<script>alert(1)</script><p>Text <a href='https://example.com/'>link</a>"
        "<img src='https://example.com/a.png' alt='A'></p></body></html>"
    )
    cleaned = clean_conservative(html)
    assert "alert(1)" not in cleaned
    assert "color:red" not in cleaned
    assert "https://example.com/" in cleaned
    assert "a.png" in cleaned


def test_clean_conservative_keeps_inline_style_attributes():
    cleaned = clean_conservative("<div style='display:none'><p>hidden</p></div><p>shown</p>")
    assert "display:none" in cleaned
