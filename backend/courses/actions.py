"""Course actions — apply params, run the ingestion hook, save exactly once."""

import logging
import os
import shutil
from brain.coursework import empty_categories
from brain.ingest import CourseIngestor
from courses import repository
from courses.schemas import CourseCreate, CourseRecord, CourseUpdate
from server import config

logger = logging.getLogger(__name__)


class InvalidCourseParams(Exception):
    pass


def course_upload_dir(user_id: int, course_id: int) -> str:
    return os.path.join(config.UPLOAD_DIR, f"user_{user_id}", f"course_{course_id}")


def create_course(db, user_id: int, params: CourseCreate, ingestor: CourseIngestor) -> CourseRecord:
    record = CourseRecord(
        user_id=user_id,
        coursework=[],
        coursework_categories=empty_categories(),
        **params.model_dump(),
    )
    ingestor.run(record)
    repository.save_course(db, record)
    logger.info(f"Created course {record.id} ({record.code}) for user {user_id}")
    return record


def update_course(db, user_id: int, course_id: int, params: CourseUpdate,
                  ingestor: CourseIngestor) -> CourseRecord:
    record = repository.find_course(db, course_id, user_id)
    old_syllabus = record.syllabus.model_dump() if record.syllabus else None

    changes = params.model_dump(exclude_unset=True, exclude={"remove_syllabus"})
    for field in ("name", "code"):
        if field in changes:
            if changes[field] is None or not changes[field].strip():
                raise InvalidCourseParams(f"Course {field} is required")
            changes[field] = changes[field].strip()

    for field, value in changes.items():
        if field == "syllabus":
            continue
        setattr(record, field, value)
    if params.remove_syllabus:
        record.syllabus = None
    elif params.syllabus is not None:
        record.syllabus = params.syllabus

    new_syllabus = record.syllabus.model_dump() if record.syllabus else None
    if new_syllabus != old_syllabus:
        logger.info(f"Course {course_id}: syllabus changed, re-running ingestion")
        ingestor.run(record)

    repository.save_course(db, record)
    return record


def delete_course(db, user_id: int, course_id: int):
    repository.find_course(db, course_id, user_id)
    repository.delete_course(db, course_id, user_id)

    course_dir = course_upload_dir(user_id, course_id)
    if os.path.exists(course_dir):
        shutil.rmtree(course_dir)
    logger.info(f"Deleted course {course_id} for user {user_id}")
