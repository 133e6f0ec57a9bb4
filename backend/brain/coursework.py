"""Coursework normalizer — maps free-form LLM category labels onto the four canonical buckets."""
from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as dt_parser

from brain.schemas import CANONICAL_CATEGORIES, CourseworkItem

logger = logging.getLogger(__name__)

CATEGORY_MAP = {
    "assignments": "assignments",
    "assignment": "assignments",
    "homework": "assignments",
    "tutorials": "assignments",
    "tutorial": "assignments",
    "participation": "assignments",
    "exams": "exams",
    "exam": "exams",
    "test": "exams",
    "tests": "exams",
    "midterm": "exams",
    "midterms": "exams",
    "final": "exams",
    "finals": "exams",
    "projects": "projects",
    "project": "projects",
    "quizzes": "quizzes",
    "quiz": "quizzes",
}
DEFAULT_CATEGORY = "assignments"

_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d+)?|\.\d+)")
_DATE_HINT_RE = re.compile(r"[A-Za-z/.\-]")


def canonical_category(label: str) -> str:
    """Unknown labels fall back to assignments so no item is ever dropped for its label."""
    return CATEGORY_MAP.get((label or "").strip().lower(), DEFAULT_CATEGORY)


def empty_categories() -> dict[str, list]:
    return {category: [] for category in CANONICAL_CATEGORIES}


def parse_weight(value: Any) -> float:
    """25 → 25.0, "25%" → 25.0, ".5" → 0.5, "about 10 percent" → 10.0, anything else → 0.

    Non-finite numbers (NaN, overflowing literals) also give 0 so the result stays valid JSON.
    """
    if isinstance(value, bool):
        return 0.0
    result = 0.0
    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if match:
            result = float(match.group())
    return result if math.isfinite(result) else 0.0


def parse_date(value: Any) -> Optional[str]:
    """Return an ISO calendar date, or None when the value is missing or unreadable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.lower() in ("null", "none", "tbd", "tba", "n/a"):
        return None
    # Bare numbers ("3", "12") are not dates; compact YYYYMMDD is
    if not _DATE_HINT_RE.search(text) and not (text.isdigit() and len(text) == 8):
        logger.debug(f"parse_date: no date separators in {value!r}")
        return None
    try:
        # Fixed default so partial dates ("March 3") don't pick up today's day/month
        parsed = dt_parser.parse(value, default=datetime(datetime.now().year, 1, 1))
    except (ValueError, OverflowError) as e:
        logger.debug(f"parse_date: unreadable date {value!r}: {e}")
        return None
    return parsed.date().isoformat()


def normalize_item(raw: Any, label: str) -> Optional[CourseworkItem]:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None

    description = raw.get("description")
    return CourseworkItem(
        name=name.strip(),
        type=(label or "").strip().lower(),
        category=canonical_category(label),
        weight=parse_weight(raw.get("weight", raw.get("percentage"))),
        date=parse_date(raw.get("date", raw.get("dueDate"))),
        description=description.strip() if isinstance(description, str) else "",
    )


def normalize_coursework(raw: Any) -> tuple[list[dict], dict[str, list[dict]]]:
    """Flatten a `{label: [item, ...]}` extraction into coursework + per-category buckets.

    Both return values are plain JSON-ready dicts/lists in extraction order.
    Unnamed items are dropped, non-list groups are ignored.
    """
    coursework: list[dict] = []
    categories = empty_categories()
    if not isinstance(raw, dict):
        return coursework, categories

    for label, items in raw.items():
        if not isinstance(items, list):
            logger.debug(f"normalize_coursework: ignoring non-list group {label!r}")
            continue
        for raw_item in items:
            item = normalize_item(raw_item, str(label))
            if item is None:
                continue
            item_dict = item.model_dump()
            coursework.append(item_dict)
            categories[item.category].append(dict(item_dict))

    return coursework, categories
