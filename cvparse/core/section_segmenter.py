"""
Section segmentation for CV line sequences.

Walks the normalized lines once with a "current section" cursor starting at
"header". A line switches the cursor when it is a section header: its
lowercase form contains a known keyword AND it is shaped like a header (all
upper-case, or at most five words). Header lines are consumed; everything
else lands in the bucket of the current section, in input order.
"""

import logging
import re
from typing import Dict, Optional, Sequence, Tuple

from cvparse.core.schemas import SECTION_NAMES, SectionMap

logger = logging.getLogger(__name__)

# ===== SECTION KEYWORDS =====
# Matched as substrings of the lowercased line. The longest matching keyword
# decides the section, so "programming languages" beats "languages".

SECTION_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "summary": (
        "professional summary",
        "summary",
        "profile",
        "objective",
        "about me",
    ),
    "experience": (
        "work experience",
        "professional experience",
        "experience",
        "employment",
        "employment history",
        "work history",
        "career",
        "roles & responsibilities",
    ),
    "education": (
        "education",
        "education & training",
        "academic background",
        "academic",
        "schooling",
    ),
    "skills": (
        "skills",
        "technical skills",
        "skillset",
        "skill set",
        "competencies",
        "core competencies",
        "proficiencies",
        "areas of expertise",
        "programming languages",
    ),
    "languages": (
        "languages",
        "language skills",
        "language",
    ),
    "other": (
        "additional information",
        "certifications",
        "certificates",
        "certification",
        "awards",
        "projects",
        "publications",
        "volunteer",
        "volunteering",
        "interests",
        "hobbies",
        "references",
    ),
}

KEYWORD_SECTIONS: Dict[str, str] = {kw: section for section, keywords in SECTION_KEYWORDS.items() for kw in keywords}

MAX_HEADER_WORDS = 5
CONTACT_MARKERS_RE = re.compile(r"@|https?://|www\.|\.com/|linkedin|github", re.IGNORECASE)
INLINE_HEADER_RE = re.compile(r"^(?P<head>[^:]{2,60}):\s*(?P<rest>.*)$")


def empty_section_map() -> SectionMap:
    return {name: [] for name in SECTION_NAMES}


def looks_like_header(line: str) -> bool:
    """
    Shape test for a section header: fully upper-case, or at most five words.

    Contact lines ("LinkedIn: linkedin.com/in/jdoe") never qualify, even when
    short, because they would otherwise match keywords like "profile".
    """
    t = line.strip().rstrip(":").strip()
    if not t:
        return False
    if CONTACT_MARKERS_RE.search(t):
        return False
    has_letters = any(c.isalpha() for c in t)
    if has_letters and t.upper() == t:
        return True
    return len(t.split()) <= MAX_HEADER_WORDS


def match_section_keyword(line: str) -> Optional[str]:
    """Return the section whose longest keyword appears in the line, or None."""
    key = " ".join(line.lower().split())
    best: Optional[Tuple[int, str]] = None
    for section, keywords in SECTION_KEYWORDS.items():
        for kw in keywords:
            if kw in key and (best is None or len(kw) > best[0]):
                best = (len(kw), section)
    return best[1] if best else None


def detect_section(line: str) -> Optional[str]:
    """
    Return the section a header line opens, or None when the line is content.

    Examples:
        "EXPERIENCE" -> "experience"
        "Work Experience" -> "experience"
        "Programming Languages" -> "skills"
        "Built systems with ten years of experience in fintech" -> None
    """
    if not looks_like_header(line):
        return None
    return match_section_keyword(line)


def split_inline_header(line: str) -> Optional[Tuple[str, str]]:
    """
    Detect "Header: content" lines such as "Skills: Python, Go, SQL".

    Returns (section, content) when the part before the colon is exactly a
    section keyword. Content may be empty ("Skills:"). Labels that only
    contain a keyword ("Tools used in this role: ...") stay content.
    """
    m = INLINE_HEADER_RE.match(line.strip())
    if not m or CONTACT_MARKERS_RE.search(m.group("rest")):
        return None
    section = KEYWORD_SECTIONS.get(" ".join(m.group("head").lower().split()))
    if section is None:
        return None
    return section, m.group("rest").strip()


def segment_sections(lines: Sequence[str]) -> SectionMap:
    """Partition lines into the fixed section buckets. Header lines are never stored."""
    sections = empty_section_map()
    current = "header"

    for idx, text in enumerate(lines):
        if not text or not text.strip():
            continue

        # "Skills: Python, Go" keeps its content; checked before the plain header test
        inline = split_inline_header(text)
        if inline:
            section, rest = inline
            logger.debug(f"INLINE SECTION HEADER at line {idx}: '{text.strip()}' -> section_type='{section}'")
            current = section
            if rest:
                sections[current].append(rest)
            continue

        section = detect_section(text)
        if section:
            logger.debug(f"SECTION HEADER DETECTED at line {idx}: '{text.strip()}' -> section_type='{section}'")
            current = section
            continue

        sections[current].append(text)

    found = [name for name in SECTION_NAMES if name != "header" and sections[name]]
    logger.debug(f"Section detection results: non-empty sections={found}")
    return sections


def section_line_counts(sections: SectionMap) -> Dict[str, int]:
    return {name: len(sections.get(name, [])) for name in SECTION_NAMES}
