"""Brain routes: multi-purpose /analyze action, deadlines, questions, study plans."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from server.database import get_db
from auth.utils import get_current_user
from brain.analyzer import TextAnalyzer
from brain.assistant import StudyAssistant
from brain.ingest import build_analyzer, build_assistant
from brain.pdf_extractor import extract_text_from_pdf
from brain.schemas import (
    AnalyzeRequest, AnalyzeResponse, Deadline, QuestionAnalysis, QuestionRequest,
    StudyPlanRequest, StudyPlanResponse,
)
from courses import repository
from courses.routes import load_course
from courses.schemas import CourseRecord

logger = logging.getLogger(__name__)

router = APIRouter()

ANALYSIS_TYPES = ("deadlines", "syllabus", "summary", "question")

SUMMARY_INSTRUCTIONS = """Generate a comprehensive summary of the following course. Include:
1. An overview of the main course content
2. Key learning objectives
3. Main topics/subjects covered
4. Skills students will develop
5. Any notable teaching methods or approaches mentioned

Format the response in a well-structured way with sections and bullet points where appropriate."""


def _syllabus_text(course: CourseRecord) -> str:
    if course.syllabus_text:
        return course.syllabus_text
    if course.syllabus:
        return extract_text_from_pdf(course.syllabus.url, course.syllabus.mime_type)
    return ""


def _course_context(course: CourseRecord, with_syllabus: bool = True) -> str:
    context = (
        f"Course: {course.code} - {course.name}\n"
        f"Description: {course.description or ''}\n"
        f"Start date: {course.start_date or 'unknown'}\n"
        f"End date: {course.end_date or 'unknown'}"
    )
    if with_syllabus:
        syllabus_text = _syllabus_text(course)
        if syllabus_text:
            context += f"\nSyllabus content: {syllabus_text}"
    return context


def _deadlines_prompt(body: AnalyzeRequest, db, user_id: int) -> str:
    if body.course_id is not None:
        course = load_course(db, body.course_id, user_id)
        return (
            "Extract all deadlines and important dates from the following course description.\n"
            "Format the response as a JSON array of objects with date and description properties.\n"
            f"{_course_context(course, with_syllabus=False)}"
        )
    if body.content:
        return (
            "Extract all deadlines and important dates from the following text.\n"
            "Format the response as a JSON array of objects with date and description properties.\n"
            f"Content: {body.content}"
        )
    raise HTTPException(status_code=400, detail="Either courseId or content must be provided")


def _syllabus_prompt(body: AnalyzeRequest, db, user_id: int) -> str:
    if body.course_id is None:
        raise HTTPException(status_code=400, detail="Course ID is required for syllabus analysis")
    course = load_course(db, body.course_id, user_id)
    if not course.syllabus:
        raise HTTPException(status_code=400, detail="This course doesn't have a syllabus uploaded")

    return f"""Analyze the following course syllabus and provide a summary of the key information including:
- Course objectives
- Grading criteria
- Required materials
- Weekly schedule
- Major assignments or projects

Format the response in a well-structured way.

Course: {course.code} - {course.name}
Syllabus content: {_syllabus_text(course)}"""


def _summary_prompt(body: AnalyzeRequest, db, user_id: int) -> str:
    if body.course_id is not None:
        course = load_course(db, body.course_id, user_id)
        return f"{SUMMARY_INSTRUCTIONS}\n\n{_course_context(course)}"
    if body.content:
        return f"{SUMMARY_INSTRUCTIONS}\n\n{body.content}"
    raise HTTPException(status_code=400, detail="Either courseId or content must be provided for summary analysis")


def _question_prompt(body: AnalyzeRequest, db, user_id: int) -> str:
    if not body.question or not body.question.strip():
        raise HTTPException(status_code=400, detail="Question is required")

    if body.course_id is not None:
        context = _course_context(load_course(db, body.course_id, user_id))
    elif body.content:
        context = body.content
    else:
        # No specific course: answer against all of the user's courses
        courses = repository.find_courses_for_user(db, user_id)
        context = "Your courses:\n" + "\n\n".join(
            f"{c.code} - {c.name}: {c.description or ''}" for c in courses
        )

    return f"""As an educational assistant, please answer the following question from a student.
Use the provided course information to give a relevant and helpful response.

{context}

Student question: {body.question}"""


PROMPT_BUILDERS = {
    "deadlines": _deadlines_prompt,
    "syllabus": _syllabus_prompt,
    "summary": _summary_prompt,
    "question": _question_prompt,
}


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(body: AnalyzeRequest, current_user: dict = Depends(get_current_user),
            analyzer: TextAnalyzer = Depends(build_analyzer)):
    build_prompt = PROMPT_BUILDERS.get(body.type)
    if build_prompt is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid analysis type. Valid types are: {', '.join(ANALYSIS_TYPES)}",
        )

    db = get_db()
    try:
        prompt = build_prompt(body, db, current_user["id"])
    finally:
        db.close()

    analysis = analyzer.analyze_text(prompt)
    if not analysis.ok:
        logger.warning(f"analyze[{body.type}] for user {current_user['id']} failed: {analysis.error}")
        raise HTTPException(status_code=502, detail=analysis.error)
    return AnalyzeResponse(result=analysis.result)


@router.post("/courses/{course_id}/deadlines", response_model=list[Deadline])
def extract_deadlines(course_id: int, current_user: dict = Depends(get_current_user),
                      assistant: StudyAssistant = Depends(build_assistant)):
    db = get_db()
    try:
        course = load_course(db, course_id, current_user["id"])
    finally:
        db.close()
    return assistant.extract_deadlines_from_text(course.description or "", course.syllabus_text or None)


@router.post("/courses/{course_id}/question", response_model=QuestionAnalysis)
def ask_question(course_id: int, body: QuestionRequest,
                 current_user: dict = Depends(get_current_user),
                 assistant: StudyAssistant = Depends(build_assistant)):
    if not body.question.strip():
        raise HTTPException(status_code=400, detail="Question is required")
    db = get_db()
    try:
        course = load_course(db, course_id, current_user["id"])
    finally:
        db.close()
    return assistant.analyze_student_question(body.question, _course_context(course))


@router.post("/courses/{course_id}/study-plan", response_model=StudyPlanResponse)
def study_plan(course_id: int, body: StudyPlanRequest,
               current_user: dict = Depends(get_current_user),
               assistant: StudyAssistant = Depends(build_assistant)):
    db = get_db()
    try:
        course = load_course(db, course_id, current_user["id"])
    finally:
        db.close()

    # Dated coursework items double as the plan's deadlines
    deadlines = [
        Deadline(title=item["name"], due_date=item["date"], description=item.get("description", ""))
        for item in course.coursework
        if item.get("date")
    ]
    plan = assistant.generate_study_plan(course.description or "", deadlines, body.preferences)
    return StudyPlanResponse(plan=plan)
