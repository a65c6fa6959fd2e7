import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from cvparse.config import Settings
from cvparse.core.cv_parser import parse_cv
from cvparse.core.docx_extractor import extract_docx_text
from cvparse.core.errors import NoTextExtractedError
from cvparse.core.schemas import ParseDebug, ParseResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["parse"])

DOCX_CONTENT_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
TEXT_CONTENT_TYPES = {"text/plain", "text/markdown"}


@router.post(
    "/parse-cv",
    response_model=ParseResponse,
    summary="Parse CV",
    description="Extract a structured CV record from a resume file (PDF, DOCX, TXT or MD). Fields that cannot be resolved are filled with placeholders and listed in warnings.",
    responses={
        200: {
            "description": "Successfully parsed CV",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "data": {
                            "personalInfo": {
                                "name": "Jane Doe",
                                "title": "Senior Engineer",
                                "email": "jane@example.com",
                                "phone": "+1 555 123 4567",
                                "location": "Austin, TX",
                                "linkedin": "https://linkedin.com/in/janedoe",
                                "github": "",
                                "summary": "Backend engineer with ten years of experience."
                            },
                            "experiences": [
                                {
                                    "id": "0b9c1f9e-3f43-4a53-9d0e-8f7f1d2c6a11",
                                    "company": "Acme Corp",
                                    "position": "Senior Engineer",
                                    "location": "",
                                    "startDate": "Jan 2020",
                                    "endDate": "Present",
                                    "current": True,
                                    "bullets": ["Built the billing platform"]
                                }
                            ],
                            "education": [],
                            "skills": ["Python", "Go"],
                            "languages": ["English"]
                        },
                        "warnings": ["education: no entries found"],
                        "debug": {"pages": [{"page": 1, "columns": 1, "rowCount": 12}]}
                    }
                }
            }
        },
        400: {"description": "Empty file uploaded"},
        413: {"description": "File too large"},
        415: {"description": "Unsupported file format"},
        422: {"description": "Could not parse this file: no extractable text"},
        503: {"description": "PDF extractor not initialised"}
    }
)
async def parse_cv_upload(
    request: Request,
    file: UploadFile = File(..., description="CV file (PDF, DOCX, TXT or MD format)")
):
    """
    Parse a CV file into a structured record.

    **Supported formats:**
    - PDF (.pdf) - Text-layer extraction with row grouping and two-column detection, OCR not supported
    - DOCX (.docx)
    - TXT / Markdown (.txt, .md)

    **Returns:**
    - **data**: CVRecord (personalInfo, experiences, education, skills, languages)
    - **warnings**: Fields that fell back to placeholders
    - **debug**: Per-page column and row counts
    """
    settings: Settings = getattr(request.app.state, "settings", None) or Settings()

    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail=f"File too large (limit {settings.max_upload_bytes} bytes).")

    filename = (file.filename or "").lower()
    content_type = (file.content_type or "").lower()

    try:
        # PDF
        if filename.endswith(".pdf") or content_type == "application/pdf":
            extractor = getattr(request.app.state, "extractor", None)
            if extractor is None:
                raise HTTPException(status_code=503, detail="PDF extractor not initialised.")
            if settings.pdf_layout:
                source = extractor.extract_pages(raw)
            else:
                source = extractor.extract_text(raw)
        # DOCX
        elif filename.endswith(".docx") or content_type in DOCX_CONTENT_TYPES:
            source = extract_docx_text(raw)
        # Text
        elif content_type in TEXT_CONTENT_TYPES or filename.endswith((".txt", ".md")):
            source = raw.decode("utf-8", errors="replace")
        else:
            raise HTTPException(status_code=415, detail=f"Unsupported content type for now: {file.content_type}")

        result = parse_cv(source, settings.layout)
    except NoTextExtractedError as exc:
        logger.info(f"No text extracted from '{file.filename}': {exc.detail}")
        raise HTTPException(status_code=422, detail=exc.detail)

    return ParseResponse(
        success=True,
        data=result.record,
        warnings=result.warnings,
        debug=ParseDebug(pages=result.pages),
    )
