"""Course CRUD + syllabus upload routes."""

import logging
import os
import secrets
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from typing import List
from server import config
from server.database import get_db
from auth.utils import get_current_user
from brain.ingest import CourseIngestor, build_ingestor
from courses import actions, repository
from courses.schemas import (
    CourseCreate, CourseRecord, CourseResponse, CourseSummaryResponse,
    CourseUpdate, SyllabusFile,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def load_course(db, course_id: int, user_id: int) -> CourseRecord:
    """Tenancy-checked lookup that maps storage errors onto HTTP errors."""
    try:
        return repository.find_course(db, course_id, user_id)
    except repository.CourseNotFound:
        raise HTTPException(status_code=404, detail="Course not found")
    except repository.CourseAccessDenied:
        raise HTTPException(status_code=403, detail="You don't have access to this course")


def _response(record: CourseRecord) -> CourseResponse:
    return CourseResponse(**record.model_dump())


@router.get("/courses", response_model=List[CourseSummaryResponse])
def get_courses(current_user: dict = Depends(get_current_user)):
    db = get_db()
    records = repository.find_courses_for_user(db, current_user["id"])
    db.close()
    return [
        CourseSummaryResponse(
            id=r.id, name=r.name, code=r.code, color=r.color,
            start_date=r.start_date, end_date=r.end_date,
            has_syllabus=r.syllabus is not None,
            coursework_count=len(r.coursework),
        )
        for r in records
    ]


@router.post("/courses", response_model=CourseResponse)
def create_course(body: CourseCreate, current_user: dict = Depends(get_current_user),
                  ingestor: CourseIngestor = Depends(build_ingestor)):
    db = get_db()
    try:
        record = actions.create_course(db, current_user["id"], body, ingestor)
    finally:
        db.close()
    return _response(record)


@router.get("/courses/{course_id}", response_model=CourseResponse)
def get_course(course_id: int, current_user: dict = Depends(get_current_user)):
    db = get_db()
    try:
        record = load_course(db, course_id, current_user["id"])
    finally:
        db.close()
    return _response(record)


@router.patch("/courses/{course_id}", response_model=CourseResponse)
def update_course(course_id: int, body: CourseUpdate,
                  current_user: dict = Depends(get_current_user),
                  ingestor: CourseIngestor = Depends(build_ingestor)):
    db = get_db()
    try:
        load_course(db, course_id, current_user["id"])
        record = actions.update_course(db, current_user["id"], course_id, body, ingestor)
    except actions.InvalidCourseParams as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        db.close()
    return _response(record)


@router.delete("/courses/{course_id}")
def delete_course(course_id: int, current_user: dict = Depends(get_current_user)):
    db = get_db()
    try:
        load_course(db, course_id, current_user["id"])
        actions.delete_course(db, current_user["id"], course_id)
    finally:
        db.close()
    return {"message": "Course deleted"}


@router.post("/courses/{course_id}/syllabus", response_model=CourseResponse)
def upload_syllabus(
    course_id: int,
    file: UploadFile = File(...),
    current_user: dict = Depends(get_current_user),
    ingestor: CourseIngestor = Depends(build_ingestor),
):
    user_id = current_user["id"]
    db = get_db()
    try:
        load_course(db, course_id, user_id)

        course_dir = actions.course_upload_dir(user_id, course_id)
        os.makedirs(course_dir, exist_ok=True)

        # Prefix keeps every upload a distinct file reference, even for a re-uploaded filename
        safe_name = (file.filename or "syllabus.pdf").replace("/", "_").replace("\\", "_")
        stored_name = f"{secrets.token_hex(4)}_{safe_name}"
        content = file.file.read()
        with open(os.path.join(course_dir, stored_name), "wb") as f:
            f.write(content)

        syllabus = SyllabusFile(
            url=f"{config.PUBLIC_BASE_URL}/uploads/user_{user_id}/course_{course_id}/{stored_name}",
            mime_type=file.content_type or "application/octet-stream",
            filename=safe_name,
            size=len(content),
        )
        logger.info(f"Stored syllabus {safe_name} ({len(content)} bytes) for course {course_id}")
        record = actions.update_course(db, user_id, course_id, CourseUpdate(syllabus=syllabus), ingestor)
    finally:
        db.close()
    return _response(record)
