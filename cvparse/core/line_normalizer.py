"""
Line normalization: turns extractor output into an ordered list of text lines.

Accepts either flat text (pages separated by PAGE_BREAK_MARKER or a form feed)
or positioned items grouped per page. Positioned input goes through row
grouping, conservative two-column detection and paragraph-gap flagging,
and wrapped bullet rows are joined back onto their bullet unless a
paragraph gap separates them. Flat input is simply split, trimmed and
whitespace-collapsed.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

from cvparse.config import LayoutConfig
from cvparse.core.schemas import PageSummary

logger = logging.getLogger(__name__)

PAGE_BREAK_MARKER = "---PAGE_BREAK---"
PAGE_BREAK_RE = re.compile(r"\s*" + re.escape(PAGE_BREAK_MARKER) + r"\s*|\f")

# Two or more spaces (or a tab) between words is kept as a two-space gap.
# Downstream splitters treat it as a field separator inside a row.
GAP = "  "
GAP_RE = re.compile(r"[ \xa0]{2,}|\t+")

COLUMN_EDGE_TOLERANCE = 4.0
BULLET_GLYPHS = "•●▪◦-*"


@dataclass
class PageItem:
    """One positioned text run on a page. y grows downwards (top of page is 0)."""
    text: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0


@dataclass
class PageLayout:
    page: int
    items: List[PageItem] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0

    @property
    def effective_width(self) -> float:
        """Page width, or the right-most item edge when the extractor did not report one."""
        if self.width > 0:
            return self.width
        return max((it.x + it.width for it in self.items), default=0.0)


@dataclass
class RawLine:
    text: str
    page: int
    x: Optional[float] = None
    y: Optional[float] = None
    paragraph_start: bool = False


@dataclass
class NormalizedText:
    lines: List[RawLine]
    pages: List[PageSummary]

    @property
    def texts(self) -> List[str]:
        return [ln.text for ln in self.lines]


@dataclass
class _Row:
    y: float
    items: List[PageItem]

    @property
    def start_x(self) -> float:
        return self.items[0].x if self.items else 0.0


ExtractorOutput = Union[str, Sequence[PageLayout]]


def collapse_whitespace(text: str) -> str:
    """
    Trim and collapse whitespace, keeping wide gaps as exactly two spaces.

    Examples:
      '  Jane   Doe ' -> 'Jane  Doe'
      'Senior Engineer\tAcme Corp' -> 'Senior Engineer  Acme Corp'
      'Built  a\nsystem' -> 'Built  a system'
    """
    if not text:
        return ""
    parts = [" ".join(p.split()) for p in GAP_RE.split(text)]
    return GAP.join(p for p in parts if p)


def split_pages(text: str) -> List[str]:
    return PAGE_BREAK_RE.split(text or "")


def normalize_text(text: str) -> NormalizedText:
    """Flat-text mode: one RawLine per non-empty line, tagged with its page number."""
    lines: List[RawLine] = []
    pages: List[PageSummary] = []
    for page_no, chunk in enumerate(split_pages(text), start=1):
        count = 0
        for raw in chunk.splitlines():
            t = collapse_whitespace(raw)
            if t:
                lines.append(RawLine(text=t, page=page_no))
                count += 1
        pages.append(PageSummary(page=page_no, columns=1, row_count=count))
    return NormalizedText(lines=lines, pages=pages)


def _median_height(items: Iterable[PageItem], default: float) -> float:
    heights = sorted(it.height for it in items if it.height and it.height > 0)
    if not heights:
        return default
    return heights[len(heights) // 2]


def group_rows(items: Sequence[PageItem], tolerance: float) -> List[_Row]:
    """
    Group items into rows by vertical proximity.

    Items are visited top to bottom; an item joins the current row when its y
    is within tolerance of the row's running mean y. Rows come back ordered
    top to bottom with their items ordered left to right.
    """
    rows: List[_Row] = []
    for it in sorted(items, key=lambda i: (i.y, i.x)):
        if rows and abs(rows[-1].y - it.y) <= tolerance:
            row = rows[-1]
            row.items.append(it)
            row.y = (row.y * (len(row.items) - 1) + it.y) / len(row.items)
        else:
            rows.append(_Row(y=it.y, items=[it]))
    for row in rows:
        row.items.sort(key=lambda i: i.x)
    return rows


def _join_items(items: Sequence[PageItem], gap_threshold: float) -> str:
    parts: List[str] = []
    prev: Optional[PageItem] = None
    for it in items:
        if prev is not None:
            gap = it.x - (prev.x + prev.width)
            parts.append(GAP if prev.width > 0 and gap > gap_threshold else " ")
        parts.append(it.text)
        prev = it
    return collapse_whitespace("".join(parts))


def detect_columns(rows: Sequence[_Row], page_width: float, page_number: int, config: LayoutConfig) -> Optional[float]:
    """
    Decide whether a page is laid out in two columns.

    Returns the x position where the right column starts, or None for a single
    column. Single column is the default; a split is only accepted when the
    page has enough rows, row starts spread across the page, and a histogram
    of row-start positions is populated on both the left and the right.
    The first page needs more rows because name/contact headers often sit at
    scattered x positions.
    """
    if len(rows) < config.min_rows_for_columns:
        return None
    if page_number == 1 and len(rows) < config.first_page_min_rows:
        return None

    xs = [r.start_x for r in rows]
    min_x, max_x = min(xs), max(xs)
    spread = max_x - min_x
    if page_width <= 0 or spread < page_width * config.min_spread_ratio:
        return None

    buckets = config.histogram_buckets

    def bucket_of(x: float) -> int:
        return min(buckets - 1, int((x - min_x) / spread * buckets))

    counts = [0] * buckets
    for x in xs:
        counts[bucket_of(x)] += 1

    peaks = [i for i, c in enumerate(counts) if c >= config.min_bucket_count]
    has_left = any(i < buckets * config.left_peak_ratio for i in peaks)
    has_right = any(i > buckets * config.right_peak_ratio for i in peaks)
    if len(peaks) < 2 or not (has_left and has_right):
        return None

    right_starts = [x for x in xs if counts[bucket_of(x)] >= config.min_bucket_count and bucket_of(x) > buckets * config.right_peak_ratio]
    return min(right_starts) - COLUMN_EDGE_TOLERANCE


def _is_continuation(previous: Optional[RawLine], text: str, paragraph_start: bool) -> bool:
    """
    A wrapped bullet: the row directly under a bulleted line, starting lower-case.

    Rows after a paragraph gap, bulleted rows and rows under non-bullet lines
    (headers, names, contact rows) always stay separate lines.
    """
    if previous is None or paragraph_start:
        return False
    if previous.text[:1] not in BULLET_GLYPHS or text[:1] in BULLET_GLYPHS:
        return False
    return text[:1].islower()


def _rows_to_lines(
    rows: Sequence[_Row],
    page_number: int,
    median_height: float,
    config: LayoutConfig,
) -> List[RawLine]:
    lines: List[RawLine] = []
    prev_y: Optional[float] = None
    gap_threshold = median_height * config.word_gap_ratio
    for row in rows:
        text = _join_items(row.items, gap_threshold)
        if not text:
            continue
        paragraph_start = prev_y is None or (row.y - prev_y) > median_height * config.paragraph_gap_ratio
        prev_y = row.y
        previous = lines[-1] if lines else None
        if _is_continuation(previous, text, paragraph_start):
            previous.text = f"{previous.text} {text}"
            continue
        lines.append(RawLine(text=text, page=page_number, x=row.start_x, y=row.y, paragraph_start=paragraph_start))
    return lines


def normalize_page(layout: PageLayout, config: LayoutConfig) -> NormalizedText:
    items = [it for it in layout.items if it.text and it.text.strip()]
    if not items:
        return NormalizedText(lines=[], pages=[PageSummary(page=layout.page, columns=1, row_count=0)])

    median_height = _median_height(items, config.default_glyph_height)
    tolerance = max(config.min_row_tolerance, round(median_height * config.row_tolerance_ratio))
    rows = group_rows(items, tolerance)

    divider = detect_columns(rows, layout.effective_width, layout.page, config)
    if divider is None:
        lines = _rows_to_lines(rows, layout.page, median_height, config)
        columns = 1
    else:
        left_rows: List[_Row] = []
        right_rows: List[_Row] = []
        for row in rows:
            left = [it for it in row.items if it.x < divider]
            right = [it for it in row.items if it.x >= divider]
            if left:
                left_rows.append(_Row(y=row.y, items=left))
            if right:
                right_rows.append(_Row(y=row.y, items=right))
        lines = _rows_to_lines(left_rows, layout.page, median_height, config)
        lines += _rows_to_lines(right_rows, layout.page, median_height, config)
        columns = 2

    logger.debug(f"Page {layout.page}: {len(rows)} rows, {columns} column(s), row tolerance {tolerance}")
    return NormalizedText(lines=lines, pages=[PageSummary(page=layout.page, columns=columns, row_count=len(rows))])


def normalize_pages(pages: Sequence[PageLayout], config: Optional[LayoutConfig] = None) -> NormalizedText:
    """Layout mode. Pages are reassembled in ascending page order whatever order they arrive in."""
    config = config or LayoutConfig()
    lines: List[RawLine] = []
    summaries: List[PageSummary] = []
    for layout in sorted(pages, key=lambda p: p.page):
        result = normalize_page(layout, config)
        lines.extend(result.lines)
        summaries.extend(result.pages)
    return NormalizedText(lines=lines, pages=summaries)


def normalize_source(source: ExtractorOutput, config: Optional[LayoutConfig] = None) -> NormalizedText:
    """Normalize whichever extractor contract was supplied: flat text or positioned pages."""
    if isinstance(source, str):
        return normalize_text(source)
    return normalize_pages(source, config)
