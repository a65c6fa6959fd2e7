import uuid
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


SectionName = Literal["header", "summary", "experience", "education", "skills", "languages", "other"]
SECTION_NAMES = ("header", "summary", "experience", "education", "skills", "languages", "other")

# One fallback family for every degraded field
DEFAULT_NAME = "Your Name"
DEFAULT_TITLE = "Your Title"
DEFAULT_POSITION = "Position"
DEFAULT_COMPANY = "Company"
PRESENT = "Present"

SectionMap = Dict[str, List[str]]


def new_entry_id() -> str:
    return str(uuid.uuid4())


class CVModel(BaseModel):
    """Base for records crossing the editor/storage boundary: JSON keys are camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(CVModel):
    name: str = DEFAULT_NAME
    title: str = DEFAULT_TITLE
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    summary: str = ""


class Experience(CVModel):
    id: str = Field(default_factory=new_entry_id)
    company: str = DEFAULT_COMPANY
    position: str = DEFAULT_POSITION
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    bullets: List[str] = Field(default_factory=list)


class Education(CVModel):
    id: str = Field(default_factory=new_entry_id)
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""


class CVRecord(CVModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experiences: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """Dump with the camelCase field names the editor and storage layers bind to."""
        return self.model_dump(by_alias=True)


class PageSummary(CVModel):
    page: int
    columns: int = Field(default=1, description="1 for single column, 2 when a column split was applied")
    row_count: int = Field(default=0, description="Number of rows grouped on the page")


class ParseDebug(CVModel):
    pages: List[PageSummary] = Field(default_factory=list)


class ParseResponse(CVModel):
    success: bool = True
    data: CVRecord
    warnings: List[str] = Field(default_factory=list)
    debug: ParseDebug = Field(default_factory=ParseDebug)
