"""Brain schemas — analyzer envelopes, coursework items, assistant payloads."""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union

CANONICAL_CATEGORIES = ("assignments", "exams", "projects", "quizzes")


class AnalysisResult(BaseModel):
    """Transient analyzer envelope. `error` set means `result` must not be trusted."""
    result: str = ""
    error: Optional[str] = None
    error_kind: Optional[Literal["auth", "length", "parse", "provider"]] = None
    data: Optional[dict] = None  # parsed JSON object for structured extractions

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_auth_failure(self) -> bool:
        return self.error_kind == "auth"


class CourseworkItem(BaseModel):
    name: str
    type: str = ""  # original label from the syllabus, lower-cased
    category: Literal["assignments", "exams", "projects", "quizzes"] = "assignments"
    weight: float = 0.0
    date: Optional[str] = None  # ISO date (YYYY-MM-DD)
    description: str = ""


class SyllabusAssignment(BaseModel):
    title: str = ""
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    description: Optional[str] = None
    weight: Optional[Union[str, float]] = None

    model_config = {"populate_by_name": True}


class SyllabusTest(BaseModel):
    title: str = ""
    date: Optional[str] = None
    topics: List[str] = []
    weight: Optional[Union[str, float]] = None


class SyllabusExtract(BaseModel):
    assignments: List[SyllabusAssignment] = []
    tests: List[SyllabusTest] = []
    error: Optional[str] = None


class Deadline(BaseModel):
    title: str
    due_date: str
    description: str = ""
    estimated_hours: Optional[float] = None


class QuestionAnalysis(BaseModel):
    topic: str
    related_concepts: List[str] = []
    answer: str
    further_resources: List[str] = []


# ─── Request bodies ──────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    type: str
    course_id: Optional[int] = Field(default=None, alias="courseId")
    question: Optional[str] = None
    content: Optional[str] = None

    model_config = {"populate_by_name": True}


class AnalyzeResponse(BaseModel):
    result: str


class QuestionRequest(BaseModel):
    question: str


class StudyPlanRequest(BaseModel):
    preferences: str = ""


class StudyPlanResponse(BaseModel):
    plan: str
