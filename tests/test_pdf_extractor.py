"""
Tests for the pdfplumber-backed extractor.

pdfplumber.open is replaced with an in-memory fake so the tests do not need
PDF fixtures; the fake pages answer extract_words() like pdfplumber does.
"""

import pytest

from cvparse.core import pdf_extractor
from cvparse.core.errors import NoTextExtractedError
from cvparse.core.line_normalizer import PAGE_BREAK_MARKER
from cvparse.core.pdf_extractor import PDFLayoutExtractor, _score_text, create_extractor, words_to_items


def _word(text, x0, top, width=40.0, height=10.0):
    return {"text": text, "x0": x0, "x1": x0 + width, "top": top, "bottom": top + height}


class FakePage:
    def __init__(self, words, width=600, height=800):
        self._words = words
        self.width = width
        self.height = height
        self.tolerances = []

    def extract_words(self, x_tolerance=3, **kwargs):
        self.tolerances.append(x_tolerance)
        words = self._words(x_tolerance) if callable(self._words) else self._words
        return [dict(w) for w in words]


class FakePDF:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_pdf(monkeypatch):
    """Install a fake pdfplumber.open serving the given pages."""
    def install(pages):
        monkeypatch.setattr(pdf_extractor.pdfplumber, "open", lambda stream: FakePDF(pages))
        return pages
    return install


def test_score_text_penalises_glued_and_fragmented_text():
    assert _score_text("Senior Engineer at Acme") == 0
    assert _score_text("SeniorEngineeratAcmeCorporation") == 10
    assert _score_text(" ".join("abcdefghijklmno")) == 15
    assert _score_text("") == 1e9


def test_words_to_items():
    items = words_to_items([_word("Jane", 50, 100), _word("  ", 10, 10)])
    assert len(items) == 1
    assert (items[0].text, items[0].x, items[0].y, items[0].width, items[0].height) == ("Jane", 50, 100, 40, 10)


def test_extract_pages_returns_positioned_items(fake_pdf):
    fake_pdf([FakePage([_word("Jane", 50, 100), _word("Doe", 95, 100)], width=612, height=792)])

    pages = PDFLayoutExtractor().extract_pages(b"%PDF-fake")

    assert len(pages) == 1
    assert pages[0].page == 1
    assert pages[0].width == 612
    assert [it.text for it in pages[0].items] == ["Jane", "Doe"]


def test_x_tolerance_is_auto_tuned(fake_pdf):
    def words_for(xt):
        if xt >= 2.5:
            return [_word("SeniorEngineeratAcmeCorporation", 50, 100, width=200)]
        return [_word("Senior", 50, 100), _word("Engineer", 95, 100), _word("at", 140, 100), _word("Acme", 150, 100)]

    page = FakePage(words_for)
    fake_pdf([page])

    pages = PDFLayoutExtractor().extract_pages(b"%PDF-fake")

    assert page.tolerances == [1.5, 2, 2.5, 3]
    assert [it.text for it in pages[0].items] == ["Senior", "Engineer", "at", "Acme"]


def test_concurrent_extraction_keeps_page_order(fake_pdf):
    fake_pdf([FakePage([_word(f"Page{n}", 50, 100)]) for n in range(1, 6)])

    pages = create_extractor(workers=4).extract_pages(b"%PDF-fake")

    assert [p.page for p in pages] == [1, 2, 3, 4, 5]
    assert [p.items[0].text for p in pages] == ["Page1", "Page2", "Page3", "Page4", "Page5"]


def test_extract_text_joins_pages_with_marker(fake_pdf):
    fake_pdf([
        FakePage([_word("Doe", 95, 100), _word("Jane", 50, 100), _word("Engineer", 50, 120)]),
        FakePage([_word("SKILLS", 50, 100)]),
    ])

    text = PDFLayoutExtractor().extract_text(b"%PDF-fake")

    assert text == f"Jane Doe\nEngineer\n{PAGE_BREAK_MARKER}\nSKILLS"


def test_unreadable_pdf_raises_no_text_extracted(monkeypatch):
    def broken_open(stream):
        raise ValueError("not a PDF")

    monkeypatch.setattr(pdf_extractor.pdfplumber, "open", broken_open)

    with pytest.raises(NoTextExtractedError):
        PDFLayoutExtractor().extract_pages(b"garbage")
    with pytest.raises(NoTextExtractedError):
        PDFLayoutExtractor().extract_text(b"garbage")


def test_create_extractor_clamps_workers():
    assert create_extractor(workers=0).workers == 1
    assert create_extractor(workers=3).workers == 3
