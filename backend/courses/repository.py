"""Course storage — sqlite rows ↔ CourseRecord, every lookup scoped to its owner."""

import json
import logging
from courses.schemas import CourseRecord, SyllabusFile

logger = logging.getLogger(__name__)


class CourseNotFound(Exception):
    pass


class CourseAccessDenied(Exception):
    """The course exists but belongs to another user."""


def _loads(value, default):
    if not value:
        return default
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.warning(f"Discarding unreadable JSON column value: {value[:80]!r}")
        return default


def row_to_record(row) -> CourseRecord:
    d = dict(row)
    syllabus = _loads(d.get("syllabus"), None)
    return CourseRecord(
        id=d["id"],
        user_id=d["user_id"],
        name=d["name"],
        code=d["code"],
        description=d.get("description"),
        color=d.get("color"),
        start_date=d.get("start_date"),
        end_date=d.get("end_date"),
        syllabus=SyllabusFile.model_validate(syllabus) if syllabus else None,
        syllabus_text=d.get("syllabus_text"),
        ai_summary=d.get("ai_summary"),
        coursework=_loads(d.get("coursework"), []),
        coursework_categories=_loads(d.get("coursework_categories"), {}),
    )


def _column_values(record: CourseRecord) -> tuple:
    syllabus = json.dumps(record.syllabus.model_dump()) if record.syllabus else None
    return (
        record.name, record.code, record.description, record.color,
        record.start_date, record.end_date, syllabus, record.syllabus_text,
        record.ai_summary, json.dumps(record.coursework),
        json.dumps(record.coursework_categories),
    )


def find_course(db, course_id: int, user_id: int) -> CourseRecord:
    """Load a course for `user_id`. Raises CourseNotFound / CourseAccessDenied."""
    row = db.execute("SELECT * FROM courses WHERE id = ?", (course_id,)).fetchone()
    if not row:
        raise CourseNotFound(f"Course {course_id} not found")
    if row["user_id"] != user_id:
        logger.warning(f"User {user_id} denied access to course {course_id}")
        raise CourseAccessDenied("You don't have access to this course")
    return row_to_record(row)


def find_courses_for_user(db, user_id: int) -> list[CourseRecord]:
    rows = db.execute(
        "SELECT * FROM courses WHERE user_id = ? ORDER BY start_date IS NULL, start_date, id",
        (user_id,)
    ).fetchall()
    return [row_to_record(r) for r in rows]


def save_course(db, record: CourseRecord) -> CourseRecord:
    """Insert or update `record` and commit. Returns the record with its id set."""
    values = _column_values(record)
    if record.id is None:
        cursor = db.execute(
            """INSERT INTO courses (name, code, description, color, start_date, end_date,
                   syllabus, syllabus_text, ai_summary, coursework, coursework_categories, user_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            values + (record.user_id,)
        )
        record.id = cursor.lastrowid
    else:
        db.execute(
            """UPDATE courses SET name = ?, code = ?, description = ?, color = ?,
                   start_date = ?, end_date = ?, syllabus = ?, syllabus_text = ?,
                   ai_summary = ?, coursework = ?, coursework_categories = ?,
                   updated_at = datetime('now')
               WHERE id = ? AND user_id = ?""",
            values + (record.id, record.user_id)
        )
    db.commit()
    return record


def delete_course(db, course_id: int, user_id: int):
    db.execute("DELETE FROM courses WHERE id = ? AND user_id = ?", (course_id, user_id))
    db.commit()
