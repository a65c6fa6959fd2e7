"""
PDF text extraction on top of pdfplumber.

The extractor is an explicit handle built once by create_extractor() and
passed to whoever needs it. Pages are independent, so with workers > 1 they
are extracted concurrently, each worker opening its own pdfplumber document.
Results are always returned in ascending page order.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from io import BytesIO
from typing import Any, Dict, List, Sequence, Tuple

import pdfplumber

from cvparse.core.errors import NoTextExtractedError
from cvparse.core.line_normalizer import PAGE_BREAK_MARKER, PageItem, PageLayout

logger = logging.getLogger(__name__)

DEFAULT_X_TOLERANCES = (1.5, 2, 2.5, 3)
WORD_Y_TOLERANCE = 2
LINE_Y_TOLERANCE = 3


def _score_text(s: str) -> float:
    """
    Score extracted text quality to detect over-gluing and over-spacing.

    Penalizes:
    - Very long alphabetic tokens (18+ chars) = glued words
    - Excessive single-letter tokens beyond legitimate words
    - Empty text

    Returns:
        Score (lower is better)
    """
    tokens = re.findall(r"[A-Za-z]+", s)
    if not tokens:
        return 1e9

    long_glued = sum(1 for t in tokens if len(t) >= 18)

    # Up to 10 legitimate single letters (a, I, Q) in a resume
    one_letter_count = sum(1 for t in tokens if len(t) == 1)
    excessive_singles = max(0, one_letter_count - 10)

    return long_glued * 10 + excessive_singles * 3 + (len(s) == 0) * 50


def _extract_words(page: Any, x_tolerance: float) -> List[Dict[str, Any]]:
    return page.extract_words(
        x_tolerance=x_tolerance,
        y_tolerance=WORD_Y_TOLERANCE,
        keep_blank_chars=False,
        use_text_flow=False,
    ) or []


def _best_words(page: Any, x_tolerances: Sequence[float]) -> Tuple[List[Dict[str, Any]], float]:
    """
    Auto-tune x_tolerance for a page: try each value and keep the word list
    whose text scores best. Ties go to the smaller tolerance.
    """
    candidates = []
    for xt in x_tolerances:
        words = _extract_words(page, xt)
        score = _score_text(" ".join(w["text"] for w in words))
        candidates.append((score, xt, words))
    candidates.sort(key=lambda c: (c[0], c[1]))
    best_score, best_xt, best_words = candidates[0]
    return best_words, best_xt


def words_to_items(words: Sequence[Dict[str, Any]]) -> List[PageItem]:
    """pdfplumber word dicts (x0, x1, top, bottom) to positioned items."""
    items: List[PageItem] = []
    for w in words:
        text = (w.get("text") or "").strip()
        if not text:
            continue
        x0, x1 = float(w["x0"]), float(w["x1"])
        top, bottom = float(w["top"]), float(w["bottom"])
        items.append(PageItem(text=text, x=x0, y=top, width=max(0.0, x1 - x0), height=max(0.0, bottom - top)))
    return items


def _words_to_text(words: Sequence[Dict[str, Any]]) -> str:
    """Group words into lines by 'top' and join each line with single spaces."""
    ordered = sorted(words, key=lambda w: (round(w["top"] / LINE_Y_TOLERANCE), w["x0"]))
    lines: List[str] = []
    current_key = None
    current_words: List[str] = []
    for w in ordered:
        key = round(w["top"] / LINE_Y_TOLERANCE)
        if current_key is None or key == current_key:
            current_words.append(w["text"])
            current_key = key
        else:
            lines.append(" ".join(current_words))
            current_words = [w["text"]]
            current_key = key
    if current_words:
        lines.append(" ".join(current_words))
    return "\n".join(lines)


class PDFLayoutExtractor:
    """Ready-to-use PDF extractor. Holds configuration only, no open documents."""

    def __init__(self, workers: int = 1, x_tolerances: Sequence[float] = DEFAULT_X_TOLERANCES):
        self.workers = max(1, int(workers))
        self.x_tolerances = tuple(x_tolerances)

    def _page_layout(self, page: Any, page_number: int) -> PageLayout:
        words, used_xt = _best_words(page, self.x_tolerances)
        logger.debug(f"PDF page {page_number}: {len(words)} words at x_tolerance={used_xt}")
        return PageLayout(
            page=page_number,
            items=words_to_items(words),
            width=float(getattr(page, "width", 0) or 0),
            height=float(getattr(page, "height", 0) or 0),
        )

    def _extract_one(self, pdf_bytes: bytes, page_index: int) -> PageLayout:
        with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
            return self._page_layout(pdf.pages[page_index], page_index + 1)

    def extract_pages(self, pdf_bytes: bytes) -> List[PageLayout]:
        """
        Positioned words for every page, sorted by page number.

        Raises NoTextExtractedError when pdfplumber cannot read the document.
        """
        try:
            with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
                page_count = len(pdf.pages)
                if self.workers == 1 or page_count <= 1:
                    return [self._page_layout(page, i) for i, page in enumerate(pdf.pages, start=1)]

            layouts: List[PageLayout] = []
            with ThreadPoolExecutor(max_workers=min(self.workers, page_count)) as executor:
                futures = [executor.submit(self._extract_one, pdf_bytes, i) for i in range(page_count)]
                for future in as_completed(futures):
                    layouts.append(future.result())
        except NoTextExtractedError:
            raise
        except Exception as exc:
            logger.warning(f"pdfplumber failed to read document: {exc}")
            raise NoTextExtractedError("Could not parse this file: the PDF could not be read.") from exc

        layouts.sort(key=lambda p: p.page)
        return layouts

    def extract_text(self, pdf_bytes: bytes) -> str:
        """Flat text, one line per visual row, pages joined by the page-break marker."""
        pages = []
        try:
            with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
                for page in pdf.pages:
                    words, _ = _best_words(page, self.x_tolerances)
                    pages.append(_words_to_text(words))
        except Exception as exc:
            logger.warning(f"pdfplumber failed to read document: {exc}")
            raise NoTextExtractedError("Could not parse this file: the PDF could not be read.") from exc
        return f"\n{PAGE_BREAK_MARKER}\n".join(pages)


def create_extractor(workers: int = 1) -> PDFLayoutExtractor:
    """Initialise the PDF extraction engine and return its handle."""
    extractor = PDFLayoutExtractor(workers=workers)
    logger.info(f"PDF extractor ready (workers={extractor.workers}, pdfplumber {pdfplumber.__version__})")
    return extractor
