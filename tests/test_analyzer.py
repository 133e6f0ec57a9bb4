"""
Unit tests for the prompt-driven text analyzer.

Contract:
- Prompts over the character ceiling fail with a length error and never reach the client
- Completion text comes back verbatim; client failures come back as typed errors
- Structured extraction finds the JSON object inside prose or fences
"""

import json
import unittest

from support import FakeCompletionClient
from brain.analyzer import TextAnalyzer, check_text_length, extract_json_object
from brain.llm import LLMAuthError, LLMError


class TestLengthGuard(unittest.TestCase):
    def test_check_text_length_message(self) -> None:
        ok, message = check_text_length("x" * 11, max_chars=10)
        self.assertFalse(ok)
        self.assertEqual(message, "Text is too long (11 characters). Please reduce to under 10 characters.")
        self.assertEqual(check_text_length("x" * 10, max_chars=10), (True, None))

    def test_long_prompt_never_reaches_client(self) -> None:
        client = FakeCompletionClient(default="should not be used")
        analyzer = TextAnalyzer(client, max_chars=100)

        result = analyzer.analyze_text("y" * 101)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_kind, "length")
        self.assertEqual(result.result, "")
        self.assertEqual(client.prompts, [])

    def test_default_ceiling_is_80k(self) -> None:
        client = FakeCompletionClient(default="ok")
        analyzer = TextAnalyzer(client)
        self.assertEqual(analyzer.max_chars, 80_000)
        self.assertFalse(analyzer.analyze_text("z" * 80_001).ok)
        self.assertTrue(analyzer.analyze_text("z" * 80_000).ok)


class TestAnalyzeText(unittest.TestCase):
    def test_success_is_verbatim(self) -> None:
        analyzer = TextAnalyzer(FakeCompletionClient(default="  Midterm on Oct 15\n"))
        result = analyzer.analyze_text("When is the midterm?")
        self.assertTrue(result.ok)
        self.assertIsNone(result.error)
        self.assertEqual(result.result, "  Midterm on Oct 15\n")

    def test_auth_failure_is_typed(self) -> None:
        analyzer = TextAnalyzer(FakeCompletionClient(error=LLMAuthError("API key not configured")))
        result = analyzer.analyze_text("hello")
        self.assertFalse(result.ok)
        self.assertTrue(result.is_auth_failure)
        self.assertEqual(result.result, "")
        self.assertIn("API key", result.error)

    def test_provider_failure(self) -> None:
        analyzer = TextAnalyzer(FakeCompletionClient(error=LLMError("quota exceeded")))
        result = analyzer.analyze_text("hello")
        self.assertEqual(result.error_kind, "provider")
        self.assertFalse(result.is_auth_failure)


class TestStructuredExtraction(unittest.TestCase):
    payload = {"assignments": [{"title": "HW1", "dueDate": "2025-09-20"}], "tests": []}

    def test_prose_wrapped_json_equals_raw_json(self) -> None:
        raw = json.dumps(self.payload)
        wrapped = f"Sure! Here is what I found:\n{raw}\nHope this helps."
        self.assertEqual(extract_json_object(wrapped), extract_json_object(raw))
        self.assertEqual(extract_json_object(wrapped), self.payload)

    def test_markdown_fences_are_stripped(self) -> None:
        fenced = "```json\n" + json.dumps(self.payload) + "\n```"
        self.assertEqual(extract_json_object(fenced), self.payload)

    def test_no_object_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            extract_json_object("I could not find any coursework.")
        with self.assertRaises(ValueError):
            extract_json_object("{not json}")

    def test_parse_failure_returns_error_envelope(self) -> None:
        analyzer = TextAnalyzer(FakeCompletionClient(default="{broken"))
        result = analyzer.analyze_structured("extract please")
        self.assertFalse(result.ok)
        self.assertEqual(result.error_kind, "parse")
        self.assertEqual(result.result, "")
        self.assertIsNone(result.data)

    def test_missing_list_fields_default_to_empty(self) -> None:
        analyzer = TextAnalyzer(FakeCompletionClient(default='{"assignments": null}'))
        result = analyzer.analyze_structured("extract", list_fields=("assignments", "tests"))
        self.assertTrue(result.ok)
        self.assertEqual(result.data, {"assignments": [], "tests": []})


class TestProcessSyllabus(unittest.TestCase):
    def test_assignments_and_tests(self) -> None:
        reply = "Result: " + json.dumps({
            "assignments": [{"title": "Essay", "dueDate": "2025-11-01", "weight": 15}, "junk"],
            "tests": [{"title": "Midterm", "date": "2025-10-15", "topics": ["loops", "recursion"]}],
        })
        extract = TextAnalyzer(FakeCompletionClient(default=reply)).process_syllabus("syllabus text")

        self.assertIsNone(extract.error)
        self.assertEqual([a.title for a in extract.assignments], ["Essay"])
        self.assertEqual(extract.assignments[0].due_date, "2025-11-01")
        self.assertEqual(extract.tests[0].topics, ["loops", "recursion"])

    def test_missing_arrays_default_empty(self) -> None:
        extract = TextAnalyzer(FakeCompletionClient(default='{"tests": []}')).process_syllabus("text")
        self.assertEqual(extract.assignments, [])
        self.assertEqual(extract.tests, [])
        self.assertIsNone(extract.error)

    def test_failure_keeps_empty_arrays(self) -> None:
        extract = TextAnalyzer(FakeCompletionClient(default="no json here")).process_syllabus("text")
        self.assertEqual(extract.assignments, [])
        self.assertEqual(extract.tests, [])
        self.assertIsNotNone(extract.error)


if __name__ == "__main__":
    unittest.main()
