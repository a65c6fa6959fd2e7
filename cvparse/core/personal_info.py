"""
Personal information extraction: contact details, name, title, location, summary.

Contact fields come from regexes over the full text (first match wins).
Name, title and location come from the header bucket through named
predicates, each with a fixed fallback so the record is always complete.
"""

import logging
import re
from typing import List, Optional, Sequence

from cvparse.core.schemas import DEFAULT_NAME, DEFAULT_TITLE, PersonalInfo, SectionMap
from cvparse.core.section_segmenter import SECTION_KEYWORDS

logger = logging.getLogger(__name__)


EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[A-Za-z]{2,}")
# Flexible phone: optional +country code, separators "-", ".", space, optional parens.
PHONE_RE = re.compile(
    r"(?<![\w.@])"
    r"(?:\+\d{1,3}[-.\s]?)?"  # Optional country code
    r"\(?\d{2,4}\)?"  # Area code (optional parens)
    r"[-.\s]?"
    r"\d{3}"
    r"[-.\s]?"
    r"\d{2,4}"
    r"(?:[-.\s]?\d{2,4})?"  # Optional trailing group (European formats)
    r"(?![\w@])"
)
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/[^\s,;|<>()\[\]]*", re.IGNORECASE)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[^\s,;|<>()\[\]]*", re.IGNORECASE)
URL_RE = re.compile(r"https?://|www\.", re.IGNORECASE)

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15

NAME_FORBIDDEN_CHARS_RE = re.compile(r"[\d@:/]")
NAME_FORBIDDEN_KEYWORDS = {"curriculum vitae", "cv", "resume", "résumé", "contact"}
for _keywords in SECTION_KEYWORDS.values():
    NAME_FORBIDDEN_KEYWORDS.update(_keywords)

ALL_CAPS_NAME_RE = re.compile(r"^[A-ZÀ-ÖØ-Þ\s.'’-]{3,40}$")

TITLE_MIN_LEN = 4
TITLE_MAX_LEN = 60
TITLE_WINDOW = 5
SUMMARY_FALLBACK_LINES = 3

# ===== LOCATION =====
US_STATES = {
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN",
    "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV",
    "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN",
    "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC"
}
MULTI_WORD_STATES = {
    "new york", "new mexico", "new hampshire", "north carolina", "north dakota",
    "south carolina", "south dakota", "west virginia", "puerto rico"
}
LOCATION_RE = re.compile(r"^[A-Z][A-Za-zÀ-ÿ .'-]+,\s*[A-Za-zÀ-ÿ .'-]{2,}$")
CONTACT_SEGMENT_SPLIT_RE = re.compile(r"\s*[|•·]\s*|\s{2,}")
CONTACT_LEFTOVER_RE = re.compile(r"[\s|•·,;:/()+-]+|\b(?:e-?mail|phone|tel|mobile|cell)\b", re.IGNORECASE)


# ===== CONTACT MATCHERS =====

def find_email(text: str) -> str:
    m = EMAIL_RE.search(text or "")
    return m.group(0) if m else ""


def find_phone(text: str) -> str:
    """First phone-shaped match with a plausible digit count, whitespace-collapsed."""
    for m in PHONE_RE.finditer(text or ""):
        candidate = m.group(0).strip()
        digits = sum(1 for c in candidate if c.isdigit())
        if MIN_PHONE_DIGITS <= digits <= MAX_PHONE_DIGITS:
            return " ".join(candidate.split())
    return ""


def normalize_profile_url(url: str) -> str:
    url = url.rstrip(".,;:/")
    if not url:
        return ""
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url


def find_linkedin(text: str) -> str:
    m = LINKEDIN_RE.search(text or "")
    return normalize_profile_url(m.group(0)) if m else ""


def find_github(text: str) -> str:
    m = GITHUB_RE.search(text or "")
    return normalize_profile_url(m.group(0)) if m else ""


def is_contact_line(line: str) -> bool:
    """True when the line carries an email or phone number."""
    return bool(EMAIL_RE.search(line)) or bool(find_phone(line))


def is_contact_only_line(line: str) -> bool:
    """
    True when nothing but emails, phones and separators is left on the line.

    Examples:
        "jdoe@example.com | +1 555 123 4567" -> True
        "Jane Doe | jane@x.com" -> False
    """
    if not is_contact_line(line):
        return False
    rest = EMAIL_RE.sub(" ", line)
    for m in PHONE_RE.finditer(rest):
        if MIN_PHONE_DIGITS <= sum(1 for c in m.group(0) if c.isdigit()) <= MAX_PHONE_DIGITS:
            rest = rest.replace(m.group(0), " ")
    return not CONTACT_LEFTOVER_RE.sub("", rest)


# ===== NAME =====

def _is_name_word(word: str) -> bool:
    core = word.replace("'", "").replace("’", "").replace("-", "")
    return bool(core) and core.isalpha()


def _has_forbidden_keyword(line: str) -> bool:
    lower = " ".join(line.lower().split())
    words = set(lower.split())
    for kw in NAME_FORBIDDEN_KEYWORDS:
        if " " in kw:
            if kw in lower:
                return True
        elif kw in words:
            return True
    return False


def looks_like_name(line: str) -> bool:
    """
    Name-shaped line: 2 to 4 words of letters, apostrophes and hyphens only.

    Rejects lines with digits, '@', ':' or '/', and lines containing a
    forbidden keyword (CV, resume, section names).

    Examples:
        "Alex Chen" -> True
        "Mary-Jane O'Neil" -> True
        "alex.chen@example.com" -> False
        "Curriculum Vitae" -> False
    """
    t = (line or "").strip()
    if not t or NAME_FORBIDDEN_CHARS_RE.search(t):
        return False
    words = t.split()
    if not 2 <= len(words) <= 4:
        return False
    if not all(_is_name_word(w) for w in words):
        return False
    return not _has_forbidden_keyword(t)


def is_all_caps_short(line: str) -> bool:
    """All-caps line of at most four words, e.g. "JOHN A. DOE"."""
    t = (line or "").strip()
    if not ALL_CAPS_NAME_RE.match(t):
        return False
    if not any(c.isalpha() for c in t):
        return False
    return len(t.split()) <= 4


def resolve_name(header: Sequence[str]) -> Optional[int]:
    """
    Index of the header line to use as the candidate name, or None.

    Priority: name-shaped line, then all-caps short line, then the first line
    that is not made up of emails and phone numbers alone.
    """
    for idx, line in enumerate(header):
        if looks_like_name(line):
            return idx
    for idx, line in enumerate(header):
        if is_all_caps_short(line):
            return idx
    for idx, line in enumerate(header):
        if not is_contact_only_line(line):
            return idx
    return None


# ===== LOCATION =====

def extract_location_from_line(text: str) -> Optional[str]:
    """
    Find a "City, Region" segment in a header line.

    The region must be a US state code, a multi-word US state, or a
    capitalised word of four or more letters (country or region name).

    Examples:
        "Austin, TX" -> "Austin, TX"
        "Paris, France | +33 6 12 34 56 78" -> "Paris, France"
        "jane@example.com" -> None
    """
    for segment in CONTACT_SEGMENT_SPLIT_RE.split(text or ""):
        segment = segment.strip()
        if not segment or EMAIL_RE.search(segment) or not LOCATION_RE.match(segment):
            continue
        city, _, region = segment.rpartition(",")
        city = " ".join(city.split())
        region = " ".join(region.split())
        if len(city.split()) > 3:
            continue
        is_state_code = region.upper() in US_STATES and len(region) == 2
        is_multi_word = region.lower() in MULTI_WORD_STATES
        is_region_name = bool(re.match(r"^[A-Z][a-zà-ÿ]{3,}$", region))
        if is_state_code or is_multi_word or is_region_name:
            return f"{city}, {region}"
    return None


def _find_location(header: Sequence[str], skip: Optional[int]) -> Optional[int]:
    for idx, line in enumerate(header):
        if idx == skip:
            continue
        if extract_location_from_line(line):
            return idx
    return None


# ===== TITLE =====

def _looks_like_title(line: str) -> bool:
    t = line.strip()
    if not TITLE_MIN_LEN <= len(t) <= TITLE_MAX_LEN:
        return False
    if is_contact_line(t) or URL_RE.search(t) or LINKEDIN_RE.search(t) or GITHUB_RE.search(t):
        return False
    return True


def resolve_title(header: Sequence[str], name_idx: Optional[int], exclude: Sequence[int] = ()) -> str:
    start = name_idx + 1 if name_idx is not None else 0
    for idx in range(start, min(len(header), start + TITLE_WINDOW)):
        if idx in exclude:
            continue
        if _looks_like_title(header[idx]):
            return header[idx].strip()
    return DEFAULT_TITLE


# ===== SUMMARY =====

def resolve_summary(sections: SectionMap) -> str:
    summary_lines = sections.get("summary") or []
    if summary_lines:
        return " ".join(summary_lines)
    return " ".join((sections.get("other") or [])[:SUMMARY_FALLBACK_LINES])


def extract_personal_info(sections: SectionMap, full_text: str) -> PersonalInfo:
    """Build PersonalInfo from the header bucket and the full concatenated text."""
    header: List[str] = [" ".join(line.split()) for line in sections.get("header") or []]

    name_idx = resolve_name(header)
    name = header[name_idx] if name_idx is not None else DEFAULT_NAME

    location_idx = _find_location(header, skip=name_idx)
    location = extract_location_from_line(header[location_idx]) if location_idx is not None else None

    # A line that is only the location is not a title candidate
    exclude = []
    if location_idx is not None and header[location_idx].strip() == location:
        exclude.append(location_idx)
    title = resolve_title(header, name_idx, exclude)

    info = PersonalInfo(
        name=name,
        title=title,
        email=find_email(full_text),
        phone=find_phone(full_text),
        location=location or "",
        linkedin=find_linkedin(full_text),
        github=find_github(full_text),
        summary=resolve_summary(sections),
    )
    logger.debug(f"Personal info resolved: name='{info.name}', title='{info.title}', email='{info.email}'")
    return info
