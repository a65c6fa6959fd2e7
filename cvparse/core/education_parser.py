"""
Education parsing module for detecting and extracting education entries from resumes.

Same single forward pass as experience parsing, but anchored on years rather
than full date ranges since education is usually dated by year only.
"""

import logging
import re
from typing import List, Optional, Sequence

from cvparse.core.experience_parser import MONTH, clean_bullet, find_date_range, split_date_range, strip_date_range
from cvparse.core.schemas import PRESENT, Education

logger = logging.getLogger(__name__)


# ===== YEAR ANCHOR =====
# "2019", "2015-2019", "2021 – Present", "Sep 2015"
YEAR_RE = re.compile(
    rf"(?P<start>(?:\b{MONTH}\s*)?(?<!\d)\d{{4}}(?!\d))"
    r"(?:\s*[-–—]\s*(?P<end>present\b|\d{4}(?!\d)))?",
    re.IGNORECASE,
)

# ===== DEGREE KEYWORDS =====
# A pre-date segment containing any of these is classified as the degree

DEGREE_KEYWORDS = (
    "university",
    "college",
    "degree",
    "bachelor",
    "master",
    "phd",
    "ph.d",
    "doctorate",
    "diploma",
    "faculty",
    "msc",
    "bsc",
    "mba",
    "b.s.",
    "m.s.",
    "b.a.",
    "m.a.",
    "associate of",
)
DEGREE_RE = re.compile(
    r"(?<![a-z])(?:" + "|".join(re.escape(kw) for kw in DEGREE_KEYWORDS) + r")",
    re.IGNORECASE,
)

GPA_RE = re.compile(r"\bgpa\b\s*[:\-]?\s*(?P<value>\d+(?:[.,]\d+)?(?:\s*/\s*\d+(?:[.,]\d+)?)?)", re.IGNORECASE)

FALLBACK_LINES = 2


def has_degree_keyword(text: str) -> bool:
    """
    Examples:
        "BSc Computer Science" -> True
        "Stanford University" -> True
        "Lycée Henri IV" -> False
    """
    return bool(DEGREE_RE.search(text or ""))


def find_gpa(text: str) -> Optional[str]:
    m = GPA_RE.search(text or "")
    return " ".join(m.group("value").split()) if m else None


def _new_entry(line: str) -> Optional[Education]:
    """Open an entry from an anchor line, or None when the line carries no year."""
    match = find_date_range(line)
    if match:
        start, end, _ = split_date_range(match)
        segment = strip_date_range(line, match)
    else:
        match = YEAR_RE.search(line)
        if not match:
            return None
        segment = strip_date_range(line, match)
        if match.group("end"):
            start = match.group("start").strip()
            end = match.group("end").strip()
            if end.lower() == "present":
                end = PRESENT
        else:
            # A lone year is the graduation year
            start, end = "", match.group("start").strip()

    entry = Education(start_date=start, end_date=end)
    if segment:
        if has_degree_keyword(segment):
            entry.degree = segment
        else:
            entry.institution = segment
    return entry


def _fill(entry: Education, line: str, gpa: Optional[str]) -> None:
    """Put a non-anchor line into the first unset slot: gpa for GPA lines, else institution then field."""
    if gpa:
        if not entry.gpa:
            entry.gpa = gpa
        return
    text = clean_bullet(line)
    if not entry.institution:
        entry.institution = text
    elif not entry.field:
        entry.field = text


def parse_education(lines: Sequence[str]) -> List[Education]:
    """
    Group education lines into entries anchored on years.

    Following lines fill institution, then field, whichever is still unset.
    A "GPA: 3.8/4.0" line sets the gpa instead; a GPA written on the anchor
    line itself ("BSc Physics, GPA 3.9, 2019") is kept on that entry. Lines
    before the first anchor are discarded. When no line carries a year, a
    single low-confidence entry is built from the first lines.
    """
    entries: List[Education] = []
    current: Optional[Education] = None

    for idx, raw in enumerate(lines):
        line = (raw or "").strip()
        if not line:
            continue

        gpa = find_gpa(line)
        opened = _new_entry(GPA_RE.sub(" ", line) if gpa else line)
        if opened is not None:
            if current is not None:
                entries.append(current)
            current = opened
            if gpa:
                current.gpa = gpa
            logger.debug(f"  -> Found education entry at line {idx}: degree='{current.degree}', institution='{current.institution}'")
            continue

        if current is None:
            logger.debug(f"Skipping line before first dated education entry: '{line}'")
            continue

        _fill(current, line, gpa)

    if current is not None:
        entries.append(current)

    if not entries:
        remaining = [ln.strip() for ln in lines if ln and ln.strip()]
        if remaining:
            logger.warning("No dated education entries found; falling back to first lines")
            fallback = Education()
            for line in remaining[:FALLBACK_LINES]:
                _fill(fallback, line, find_gpa(line))
            entries.append(fallback)

    return entries
