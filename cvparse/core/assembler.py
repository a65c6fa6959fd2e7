"""
Result assembly: turns a SectionMap into a complete CVRecord.

Every field has a literal fallback, so for any non-empty input the record
carries all top-level keys and the four lists are present (possibly empty).
"""

import logging
from typing import List, Sequence

from cvparse.core.education_parser import parse_education
from cvparse.core.experience_parser import parse_experience_section
from cvparse.core.list_splitter import split_languages, split_skills
from cvparse.core.personal_info import extract_personal_info
from cvparse.core.schemas import (
    DEFAULT_COMPANY,
    DEFAULT_NAME,
    DEFAULT_POSITION,
    DEFAULT_TITLE,
    CVRecord,
    SectionMap,
)

logger = logging.getLogger(__name__)


def assemble_cv_record(sections: SectionMap, full_text: str) -> CVRecord:
    """
    Run the per-section extractors and combine their output.

    Args:
        sections: Output of segment_sections()
        full_text: All normalized lines joined by a space; contact regexes run on it

    Returns:
        CVRecord with placeholders for anything that could not be resolved
    """
    record = CVRecord(
        personal_info=extract_personal_info(sections, full_text),
        experiences=parse_experience_section(sections),
        education=parse_education(sections.get("education") or []),
        skills=split_skills(sections.get("skills") or []),
        languages=split_languages(sections.get("languages") or []),
    )
    logger.info(
        f"Assembled CV record: {len(record.experiences)} experiences, {len(record.education)} education, "
        f"{len(record.skills)} skills, {len(record.languages)} languages"
    )
    return record


def degraded_fields(record: CVRecord) -> List[str]:
    """
    Human-readable list of fields that fell back to placeholders.

    Examples:
        "personalInfo.name: placeholder 'Your Name' used"
        "experiences[0].company: placeholder 'Company' used"
        "education: no entries found"
    """
    warnings: List[str] = []
    info = record.personal_info
    if info.name == DEFAULT_NAME:
        warnings.append(f"personalInfo.name: placeholder '{DEFAULT_NAME}' used")
    if info.title == DEFAULT_TITLE:
        warnings.append(f"personalInfo.title: placeholder '{DEFAULT_TITLE}' used")
    if not info.email:
        warnings.append("personalInfo.email: not found")
    if not info.phone:
        warnings.append("personalInfo.phone: not found")

    for i, exp in enumerate(record.experiences):
        if exp.position == DEFAULT_POSITION:
            warnings.append(f"experiences[{i}].position: placeholder '{DEFAULT_POSITION}' used")
        if exp.company == DEFAULT_COMPANY:
            warnings.append(f"experiences[{i}].company: placeholder '{DEFAULT_COMPANY}' used")
        if not exp.start_date and not exp.end_date:
            warnings.append(f"experiences[{i}]: no dates found")

    for name, values in (
        ("experiences", record.experiences),
        ("education", record.education),
        ("skills", record.skills),
        ("languages", record.languages),
    ):
        if not values:
            warnings.append(f"{name}: no entries found")
    return warnings


def record_fingerprint(record: CVRecord) -> dict:
    """Serialized record with generated entry ids removed, for equality checks across runs."""
    data = record.to_json_dict()
    for key in ("experiences", "education"):
        for entry in data[key]:
            entry.pop("id", None)
    return data


def join_full_text(lines: Sequence[str]) -> str:
    return " ".join(lines)
