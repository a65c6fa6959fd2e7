"""
Experience block parsing.

A single forward pass over the experience lines. Lines carrying a date range
("Jan 2020 - Present", "2022–2023") are entry anchors: each one closes the
open entry and opens a new one. The rest of the anchor line yields position
and company; following lines become bullets until the next anchor.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from cvparse.core.schemas import DEFAULT_COMPANY, DEFAULT_POSITION, PRESENT, Experience, SectionMap

logger = logging.getLogger(__name__)


# ===== DATE PATTERNS =====
# Month names are optional, abbreviated or full, case-insensitive.
# Examples: "Jan 2020 - Present", "2022–2023", "Oct 2024-Present", "03/2019 — 11/2021"
MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
DATE = rf"(?:\b{MONTH}\s*\d{{4}}|(?<!\d)\d{{1,2}}/\d{{4}}|(?<!\d)\d{{4}})(?!\d)"
DATE_SEPARATOR = r"\s*[-–—]\s*"
DATE_RANGE_RE = re.compile(
    rf"(?P<start>{DATE}){DATE_SEPARATOR}(?P<end>present\b|{DATE})",
    re.IGNORECASE,
)

BULLET_RE = re.compile(r"^[\s•●▪◦\-*]+")
EDGE_SEPARATORS = " \t|,–—-·•:"
EMPTY_PARENS_RE = re.compile(r"\(\s*\)|\[\s*\]")

# Position/company separators, tried in priority order
POSITION_COMPANY_SPLITTERS = (
    re.compile(r"\s*\|\s*"),
    re.compile(r"\s*—\s*|\s+[–-]\s+"),
    re.compile(r"\s{2,}"),
    re.compile(r"\s*,\s*|\s+at\s+", re.IGNORECASE),
)

CHUNK_SIZE = 3
MAX_HEADING_LOOKBACK_LEN = 80


def find_date_range(text: str) -> Optional[re.Match]:
    return DATE_RANGE_RE.search(text or "")


def split_date_range(match: re.Match) -> Tuple[str, str, bool]:
    """
    Split a matched range into (start_date, end_date, current).

    An end containing "present" in any case is normalised to the "Present"
    sentinel and marks the entry as current.
    """
    start = match.group("start").strip()
    end = match.group("end").strip()
    current = "present" in end.lower()
    if current:
        end = PRESENT
    return start, end, current


def strip_date_range(text: str, match: re.Match) -> str:
    """Remove the matched range and trim separators left dangling at either end."""
    remainder = text[:match.start()] + "  " + text[match.end():]
    remainder = EMPTY_PARENS_RE.sub("", remainder)
    return remainder.strip(EDGE_SEPARATORS)


def split_position_company(segment: str) -> Tuple[str, str]:
    """
    Split the non-date part of an anchor line into (position, company).

    Separators in priority order: "|", em-dash (or spaced dash), two or more
    spaces, then "," or " at ". The first token is the position, the remaining
    tokens joined by a space are the company. Unresolved fields come back
    empty; placeholders are applied by the caller.

    Examples:
        "Senior Engineer  Acme Corp" -> ("Senior Engineer", "Acme Corp")
        "Data Analyst | Globex | Remote" -> ("Data Analyst", "Globex Remote")
        "Developer at Initech" -> ("Developer", "Initech")
        "Consultant" -> ("Consultant", "")
    """
    segment = (segment or "").strip(EDGE_SEPARATORS)
    if not segment:
        return "", ""
    for splitter in POSITION_COMPANY_SPLITTERS:
        parts = [p.strip(EDGE_SEPARATORS) for p in splitter.split(segment)]
        parts = [p for p in parts if p]
        if len(parts) >= 2:
            return parts[0], " ".join(parts[1:])
    return segment, ""


def clean_bullet(text: str) -> str:
    """Strip leading bullet glyphs ("-", "•", "*", ...) and surrounding whitespace."""
    return " ".join(BULLET_RE.sub("", text or "").split())


def _is_bulleted(text: str) -> bool:
    head = text.lstrip()[:1]
    return bool(head) and head in "•●▪◦-*"


def _is_heading_candidate(line: Optional[str]) -> bool:
    if not line or _is_bulleted(line) or find_date_range(line):
        return False
    return len(line) <= MAX_HEADING_LOOKBACK_LEN


def _new_entry(line: str, match: re.Match) -> Experience:
    start, end, current = split_date_range(match)
    position, company = split_position_company(strip_date_range(line, match))
    return Experience(
        position=position or DEFAULT_POSITION,
        company=company or DEFAULT_COMPANY,
        start_date=start,
        end_date=end,
        current=current,
    )


def _chunk_fallback(lines: Sequence[str]) -> List[Experience]:
    """Low-confidence grouping used only when no anchor was found: (position, company, bullets...)."""
    entries: List[Experience] = []
    for i in range(0, len(lines), CHUNK_SIZE):
        chunk = [clean_bullet(line) for line in lines[i:i + CHUNK_SIZE]]
        entries.append(
            Experience(
                position=chunk[0] if len(chunk) > 0 and chunk[0] else DEFAULT_POSITION,
                company=chunk[1] if len(chunk) > 1 and chunk[1] else DEFAULT_COMPANY,
                bullets=[b for b in chunk[2:] if b],
            )
        )
    return entries


def parse_experiences(lines: Sequence[str], allow_chunk_fallback: bool = True) -> List[Experience]:
    """
    Group lines into experience entries anchored on date ranges.

    When an anchor line carries nothing but the dates, the heading line just
    above it ("Software Engineer - Tech Corp") is used for position/company,
    provided that line was not itself a bullet.
    """
    entries: List[Experience] = []
    current: Optional[Experience] = None
    previous_line: Optional[str] = None

    for idx, raw in enumerate(lines):
        line = (raw or "").strip()
        if not line:
            continue

        match = find_date_range(line)
        if match:
            if current is not None:
                entries.append(current)
            current = _new_entry(line, match)

            if not strip_date_range(line, match) and _is_heading_candidate(previous_line):
                position, company = split_position_company(previous_line)
                current.position = position or DEFAULT_POSITION
                current.company = company or DEFAULT_COMPANY
                # The heading was consumed as a bullet of the previous entry
                if entries and entries[-1].bullets and entries[-1].bullets[-1] == clean_bullet(previous_line):
                    entries[-1].bullets.pop()

            logger.debug(f"  -> Found experience entry at line {idx}: position='{current.position}', company='{current.company}'")
        elif current is not None:
            bullet = clean_bullet(line)
            if bullet:
                current.bullets.append(bullet)
        else:
            logger.debug(f"Skipping line before first dated entry: '{line}'")

        previous_line = line

    if current is not None:
        entries.append(current)

    if not entries and allow_chunk_fallback and any((ln or "").strip() for ln in lines):
        logger.warning("No dated experience entries found; falling back to 3-line grouping")
        entries = _chunk_fallback([ln.strip() for ln in lines if ln and ln.strip()])

    return entries


def parse_experience_section(sections: SectionMap) -> List[Experience]:
    """
    Experiences from the experience bucket, or dated entries found in "other"
    when no experience header was detected.
    """
    experience_lines = sections.get("experience") or []
    if experience_lines:
        return parse_experiences(experience_lines)
    return parse_experiences(sections.get("other") or [], allow_chunk_fallback=False)
