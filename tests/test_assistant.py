"""
Unit tests for the study assistant (summaries, deadlines, Q&A, study plans).

Every helper degrades to a fixed fallback instead of raising.
"""

import json
import unittest

from support import FakeCompletionClient
from brain.assistant import DEADLINES_SCHEMA, QUESTION_ERROR_ANSWER, STUDY_PLAN_ERROR, StudyAssistant
from brain.llm import LLMAuthError, LLMError
from brain.schemas import Deadline


class TestStudyAssistant(unittest.TestCase):
    def test_extract_deadlines(self) -> None:
        reply = json.dumps({"deadlines": [
            {"title": "Essay", "due_date": "2025-11-01", "description": "1500 words", "estimated_hours": 6},
            {"title": "Missing date"},
        ]})
        client = FakeCompletionClient(default=reply)
        deadlines = StudyAssistant(client).extract_deadlines_from_text("Course about writing", "Syllabus body")

        self.assertEqual([d.title for d in deadlines], ["Essay"])
        self.assertEqual(deadlines[0].estimated_hours, 6)
        self.assertIn("Syllabus: Syllabus body", client.prompts[0])

    def test_extract_deadlines_failure_is_empty(self) -> None:
        assistant = StudyAssistant(FakeCompletionClient(error=LLMAuthError("no key")))
        self.assertEqual(assistant.extract_deadlines_from_text("desc"), [])
        self.assertEqual(StudyAssistant(FakeCompletionClient(default="nope")).extract_deadlines_from_text("d"), [])

    def test_long_input_is_rejected_before_the_call(self) -> None:
        client = FakeCompletionClient(default='{"deadlines": []}')
        assistant = StudyAssistant(client, max_chars=50)
        self.assertEqual(assistant.extract_deadlines_from_text("x" * 100), [])
        self.assertEqual(client.prompts, [])

    def test_length_guard_counts_the_schema_text(self) -> None:
        client = FakeCompletionClient(default='{"deadlines": []}')
        prompt = "x" * 40
        sent = client.json_prompt(prompt, DEADLINES_SCHEMA)
        self.assertGreater(len(sent), 50)

        with self.assertRaises(ValueError):
            StudyAssistant(client, max_chars=50)._complete_json(prompt, DEADLINES_SCHEMA, "deadlines", "sys")
        self.assertEqual(client.prompts, [])

        StudyAssistant(client, max_chars=len(sent))._complete_json(prompt, DEADLINES_SCHEMA, "deadlines", "sys")
        self.assertEqual(client.prompts, [sent])

    def test_native_schema_mode_sends_the_bare_prompt(self) -> None:
        client = FakeCompletionClient()
        client.supports_json_schema = True
        self.assertEqual(client.json_prompt("extract", DEADLINES_SCHEMA), "extract")

    def test_analyze_student_question(self) -> None:
        reply = json.dumps({
            "topic": "Recursion", "related_concepts": ["base case"],
            "answer": "A function calling itself.", "further_resources": [],
        })
        analysis = StudyAssistant(FakeCompletionClient(default=reply)).analyze_student_question(
            "What is recursion?", "CS101"
        )
        self.assertEqual(analysis.topic, "Recursion")
        self.assertEqual(analysis.related_concepts, ["base case"])

    def test_analyze_student_question_fallback(self) -> None:
        analysis = StudyAssistant(FakeCompletionClient(error=LLMError("down"))).analyze_student_question("Q?", "ctx")
        self.assertEqual(analysis.topic, "Error analyzing question")
        self.assertEqual(analysis.answer, QUESTION_ERROR_ANSWER)
        self.assertEqual(analysis.related_concepts, [])

    def test_generate_study_plan(self) -> None:
        client = FakeCompletionClient(default="Week 1: review loops")
        deadlines = [Deadline(title="Midterm", due_date="2025-10-15", estimated_hours=8)]
        plan = StudyAssistant(client).generate_study_plan("CS101", deadlines, "evenings only")

        self.assertEqual(plan, "Week 1: review loops")
        self.assertIn("- Midterm: Due on 2025-10-15, , Est. hours: 8.0", client.prompts[0])
        self.assertIn("Student Preferences: evenings only", client.prompts[0])

    def test_generate_study_plan_fallback(self) -> None:
        plan = StudyAssistant(FakeCompletionClient(error=LLMError("down"))).generate_study_plan("d", [], "")
        self.assertEqual(plan, STUDY_PLAN_ERROR)

    def test_summary_reports_auth_failure(self) -> None:
        result = StudyAssistant(FakeCompletionClient(error=LLMAuthError("no key"))).summarize_course_content("text")
        self.assertTrue(result.is_auth_failure)


if __name__ == "__main__":
    unittest.main()
