from io import BytesIO
from typing import List

from docx import Document

from cvparse.core.errors import NoTextExtractedError


def extract_docx_paragraphs(docx_bytes: bytes) -> List[str]:
    """
    Deterministically extract non-empty paragraph text from a DOCX, in document order.
    Table cells are appended after the body paragraphs.
    """
    try:
        doc = Document(BytesIO(docx_bytes))
    except Exception as exc:
        raise NoTextExtractedError("Could not parse this file: the DOCX could not be read.") from exc

    out: List[str] = []
    for p in doc.paragraphs:
        t = (p.text or "").strip()
        if t:
            out.append(t)
    for table in doc.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text and c.text.strip()]
            if cells:
                out.append("  ".join(cells))
    return out


def extract_docx_text(docx_bytes: bytes) -> str:
    return "\n".join(extract_docx_paragraphs(docx_bytes))
