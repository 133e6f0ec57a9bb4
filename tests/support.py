"""Shared fixtures for the test suite: fake LLM client, temp database, canned syllabus."""

import json
import os
import tempfile

# Point storage at a throwaway directory before any server module reads config
_TMP_ROOT = tempfile.mkdtemp(prefix="course-planner-tests-")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_ROOT, "uploads")
os.environ["DB_PATH"] = os.path.join(_TMP_ROOT, "bootstrap.db")

from unittest import mock  # noqa: E402

from brain.analyzer import TextAnalyzer  # noqa: E402
from brain.assistant import StudyAssistant  # noqa: E402
from brain.ingest import CourseIngestor  # noqa: E402
from brain.llm import CompletionClient  # noqa: E402
from server import config  # noqa: E402
from server.database import init_db  # noqa: E402

SYLLABUS_URL = "https://files.example.edu/cs101/syllabus.pdf"

SYLLABUS_TEXT = """CS101 Introduction to Programming
This course introduces the fundamentals of programming in Python.

Grading: Homework 20%, Quizzes 10%, Midterm 25%, Final Project 20%, Final Exam 25%.
Midterm exam: 2025-10-15. Final project due 2025-12-05."""

# Markers that identify each ingestion prompt
DESCRIPTION_MARKER = "opening paragraph(s)"
KEY_DATES_MARKER = "markdown list"
COURSEWORK_MARKER = "gradable component"
SUMMARY_MARKER = "Please summarize"

DESCRIPTION_REPLY = "This course introduces the fundamentals of programming in Python."
KEY_DATES_REPLY = "- **Midterm** — 2025-10-15 — 25%\n- **Final Project** — 2025-12-05 — 20%"
COURSEWORK_REPLY = "Here is the extracted coursework:\n" + json.dumps({
    "homework": [{"name": "Weekly homework", "weight": "20%", "date": None, "description": "Problem sets"}],
    "quizzes": [{"name": "Quizzes", "weight": 10}],
    "midterm": [{"name": "Midterm", "weight": 25, "date": "2025-10-15"}],
    "projects": [{"name": "Final Project", "weight": "20", "date": "2025-12-05"}],
    "finals": [{"name": "Final Exam", "weight": 25, "date": "TBA"}],
}) + "\nLet me know if you need anything else."
SUMMARY_REPLY = "An introductory Python programming course with a midterm, a project and a final."


class FakeCompletionClient(CompletionClient):
    """Replies chosen by prompt marker. A reply that is an Exception gets raised."""

    name = "fake"

    def __init__(self, replies=None, default="", error=None):
        self.replies = replies or {}
        self.default = default
        self.error = error
        self.prompts = []

    def complete(self, prompt, system=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        for marker, reply in self.replies.items():
            if marker in prompt:
                if isinstance(reply, Exception):
                    raise reply
                return reply
        return self.default

    def calls_matching(self, marker):
        return [p for p in self.prompts if marker in p]


def happy_replies():
    return {
        DESCRIPTION_MARKER: DESCRIPTION_REPLY,
        KEY_DATES_MARKER: KEY_DATES_REPLY,
        COURSEWORK_MARKER: COURSEWORK_REPLY,
        SUMMARY_MARKER: SUMMARY_REPLY,
    }


def fake_extract_text(url, mime_type):
    return SYLLABUS_TEXT if url and mime_type == "application/pdf" else ""


def make_ingestor(client, extract_text=fake_extract_text):
    return CourseIngestor(TextAnalyzer(client), StudyAssistant(client), extract_text=extract_text)


class TempDatabaseMixin:
    """Gives each test its own sqlite file and upload directory."""

    def setUp(self):
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory()
        patches = [
            mock.patch.object(config, "DB_PATH", os.path.join(self._tmp.name, "test.db")),
            mock.patch.object(config, "UPLOAD_DIR", os.path.join(self._tmp.name, "uploads")),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        self.addCleanup(self._tmp.cleanup)
        init_db()
