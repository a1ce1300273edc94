from docfetch.workflows.pagination import PageWindow, paginate


def test_text_within_window_is_returned_whole():
    page = paginate("hello", PageWindow(start_index=0, max_length=10))
    assert page.slice == "hello"
    assert page.truncated is False
    assert page.next_start_index is None


def test_truncated_window():
    text = "x" * 25
    page = paginate(text, PageWindow(start_index=0, max_length=10))
    assert page.truncated is True
    assert len(page.slice) == 10
    assert page.next_start_index == 10


def test_remaining_text_from_start_index():
    page = paginate("abcdefghij", PageWindow(start_index=4, max_length=100))
    assert page.slice == "efghij"
    assert page.truncated is False


def test_exact_fit_is_not_truncated():
    page = paginate("abcdef", PageWindow(start_index=2, max_length=4))
    assert page.slice == "cdef"
    assert page.truncated is False


def test_start_past_end_yields_empty_slice():
    for start in (5, 6, 1000):
        page = paginate("abcde", PageWindow(start_index=start, max_length=3))
        assert page.slice == ""
        assert page.truncated is False
        assert page.next_start_index is None


def test_windows_reconstruct_text():
    text = "".join(chr(ord("a") + (i % 26)) for i in range(103))
    size = 10
    pieces = []
    start = 0
    while True:
        page = paginate(text, PageWindow(start_index=start, max_length=size))
        pieces.append(page.slice)
        if not page.truncated:
            break
        start = page.next_start_index
    assert "".join(pieces) == text
    assert len(pieces) == 11
