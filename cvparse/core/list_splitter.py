import re
from typing import List, Sequence

LIST_SEPARATOR_RE = re.compile(r"[,|•;\n]")
LEADING_BULLET_RE = re.compile(r"^[\s•●▪◦\-*>]+")

MIN_TOKEN_LEN = 2
MAX_SKILL_LEN = 99


def _tokens(lines: Sequence[str]) -> List[str]:
    """Join with ", " and split on list separators. Order is kept and duplicates are not removed."""
    joined = ", ".join(line for line in lines if line)
    out: List[str] = []
    for part in LIST_SEPARATOR_RE.split(joined):
        token = " ".join(LEADING_BULLET_RE.sub("", part).split())
        if token:
            out.append(token)
    return out


def split_skills(lines: Sequence[str]) -> List[str]:
    """
    Examples:
        ["Python, Go | Rust • SQL"] -> ["Python", "Go", "Rust", "SQL"]
        ["- Docker", "- C"] -> ["Docker"]
    """
    return [t for t in _tokens(lines) if MIN_TOKEN_LEN <= len(t) <= MAX_SKILL_LEN]


def split_languages(lines: Sequence[str]) -> List[str]:
    return [t for t in _tokens(lines) if len(t) >= MIN_TOKEN_LEN]
