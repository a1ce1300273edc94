from typing import List

import fitz  # type: ignore  # PyMuPDF
import pytest


def make_pdf(pages: List[str]) -> bytes:
    doc = fitz.open()
    try:
        for text in pages:
            page = doc.new_page()
            page.insert_text((72, 72), text)
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf(["Hello PDF first page", "Second page text"])
