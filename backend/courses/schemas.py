"""Course schemas."""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from brain.schemas import CourseworkItem


class SyllabusFile(BaseModel):
    url: str
    mime_type: str = Field(default="application/pdf", alias="mimeType")
    filename: Optional[str] = None
    size: Optional[int] = None

    model_config = {"populate_by_name": True}


class CourseCreate(BaseModel):
    name: str
    code: str
    description: Optional[str] = None
    color: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    syllabus: Optional[SyllabusFile] = None

    @field_validator("name", "code")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class CourseUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    syllabus: Optional[SyllabusFile] = None
    remove_syllabus: bool = False


class CourseRecord(BaseModel):
    """A course as it moves through an action: loaded or built, mutated, then saved once."""
    id: Optional[int] = None
    user_id: int
    name: str
    code: str
    description: Optional[str] = None
    color: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    syllabus: Optional[SyllabusFile] = None
    syllabus_text: Optional[str] = None
    ai_summary: Optional[str] = None
    coursework: List[dict] = []
    coursework_categories: Dict[str, List[dict]] = {}


class CourseResponse(BaseModel):
    id: int
    user_id: int
    name: str
    code: str
    description: Optional[str]
    color: Optional[str]
    start_date: Optional[str]
    end_date: Optional[str]
    syllabus: Optional[SyllabusFile]
    syllabus_text: Optional[str] = None
    ai_summary: Optional[str]
    coursework: List[CourseworkItem] = []
    coursework_categories: Dict[str, List[CourseworkItem]] = {}


class CourseSummaryResponse(BaseModel):
    id: int
    name: str
    code: str
    color: Optional[str]
    start_date: Optional[str]
    end_date: Optional[str]
    has_syllabus: bool = False
    coursework_count: int = 0
