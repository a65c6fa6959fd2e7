"""
CV parsing pipeline.

extractor output -> line normalizer -> section segmenter -> per-section
extractors -> result assembler. Stateless: each call works on its own buffers.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from cvparse.config import LayoutConfig
from cvparse.core.assembler import assemble_cv_record, degraded_fields, join_full_text
from cvparse.core.errors import NoTextExtractedError
from cvparse.core.line_normalizer import ExtractorOutput, normalize_source
from cvparse.core.schemas import CVRecord, PageSummary, SectionMap
from cvparse.core.section_segmenter import section_line_counts, segment_sections

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    record: CVRecord
    pages: List[PageSummary] = field(default_factory=list)
    sections: SectionMap = field(default_factory=dict)

    @property
    def warnings(self) -> List[str]:
        return degraded_fields(self.record)


def parse_cv(source: ExtractorOutput, config: Optional[LayoutConfig] = None) -> ParseResult:
    """
    Parse extractor output (flat text or positioned pages) into a CVRecord.

    Raises:
        NoTextExtractedError: the input normalizes to zero lines. No partial
            record is produced in that case.
    """
    normalized = normalize_source(source, config)
    lines = normalized.texts
    if not lines:
        logger.warning("Document normalized to zero lines")
        raise NoTextExtractedError()

    logger.debug(f"Normalized {len(lines)} lines over {len(normalized.pages)} page(s)")
    sections = segment_sections(lines)
    logger.debug(f"Section line counts: {section_line_counts(sections)}")

    record = assemble_cv_record(sections, join_full_text(lines))
    return ParseResult(record=record, pages=normalized.pages, sections=sections)
