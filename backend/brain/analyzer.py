"""Prompt-driven text analyzer — prompt in, `AnalysisResult` out.

Wraps one completion client with a prompt length guard and a tolerant JSON
reader. Nothing here raises on provider failure: errors come back on the
envelope and the caller decides the fallback.
"""
from __future__ import annotations

import json
import logging
from typing import Iterable, Optional

from brain.llm import CompletionClient, LLMAuthError, LLMError
from brain.schemas import (
    AnalysisResult,
    SyllabusAssignment,
    SyllabusExtract,
    SyllabusTest,
)
from server import config

logger = logging.getLogger(__name__)

COURSEWORK_LABELS_HINT = (
    "assignments, homework, tutorials, participation, quizzes, exams, midterms, finals, projects"
)


def check_text_length(text: str, max_chars: Optional[int] = None) -> tuple[bool, Optional[str]]:
    max_chars = max_chars or config.MAX_PROMPT_CHARS
    if len(text) > max_chars:
        return False, (
            f"Text is too long ({len(text)} characters). "
            f"Please reduce to under {max_chars} characters."
        )
    return True, None


def extract_json_object(text: str) -> dict:
    """Pull the JSON object out of a free-form completion.

    Models sometimes wrap the JSON in markdown fences or explanatory prose, so
    take the span from the first `{` to the last `}`. Raises ValueError when no
    object can be parsed.
    """
    response_text = text.strip()
    if response_text.startswith("```"):
        # Strip opening fence (e.g. ```json\n or ```\n)
        response_text = response_text.split("\n", 1)[1] if "\n" in response_text else response_text[3:]
        response_text = response_text.rsplit("```", 1)[0]

    first_brace = response_text.find("{")
    last_brace = response_text.rfind("}")
    if first_brace == -1 or last_brace <= first_brace:
        raise ValueError("No JSON object found in model response")

    parsed = json.loads(response_text[first_brace: last_brace + 1])
    if not isinstance(parsed, dict):
        raise ValueError("Model response JSON is not an object")
    return parsed


class TextAnalyzer:
    def __init__(self, client: CompletionClient, max_chars: Optional[int] = None):
        self.client = client
        self.max_chars = max_chars or config.MAX_PROMPT_CHARS

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def analyze_text(self, prompt: str, system: Optional[str] = None) -> AnalysisResult:
        is_valid, message = check_text_length(prompt, self.max_chars)
        if not is_valid:
            return AnalysisResult(error=message, error_kind="length")

        try:
            text = self.client.complete(prompt, system=system)
        except LLMAuthError as e:
            logger.warning(f"TextAnalyzer[{self.client.name}]: credential failure: {e}")
            return AnalysisResult(error=str(e), error_kind="auth")
        except LLMError as e:
            logger.warning(f"TextAnalyzer[{self.client.name}]: request failed: {e}")
            return AnalysisResult(error=str(e), error_kind="provider")
        return AnalysisResult(result=text)

    def analyze_structured(self, prompt: str, list_fields: Iterable[str] = (),
                           system: Optional[str] = None) -> AnalysisResult:
        """Like analyze_text, but the completion must hold a JSON object.

        Fields named in `list_fields` are guaranteed to be lists on the parsed object.
        """
        analysis = self.analyze_text(prompt, system=system)
        if not analysis.ok:
            return analysis

        try:
            data = extract_json_object(analysis.result)
        except ValueError as e:  # json.JSONDecodeError is a ValueError
            logger.warning(f"TextAnalyzer: JSON parse failed: {e}. Raw: {analysis.result[:300]}")
            return AnalysisResult(error=f"Failed to parse response data: {e}", error_kind="parse")

        for field in list_fields:
            if not isinstance(data.get(field), list):
                data[field] = []
        return AnalysisResult(result=analysis.result, data=data)

    # ------------------------------------------------------------------
    # Syllabus prompts
    # ------------------------------------------------------------------

    def extract_course_description(self, syllabus_text: str) -> AnalysisResult:
        prompt = f"""Below is the text of a course syllabus. Return ONLY the opening paragraph(s)
that describe what the course is about (the course description / overview), copied as
faithfully as possible. Do not include schedules, grading tables, contact details or policies.
If the syllabus has no descriptive paragraph, return an empty response.

Syllabus text:
---
{syllabus_text}
---"""
        return self.analyze_text(prompt)

    def analyze_key_dates(self, syllabus_text: str) -> AnalysisResult:
        prompt = f"""Analyze the following course syllabus and list every test, exam, quiz,
assignment, project and other deadline it mentions.

Format the answer as a markdown list, one item per line:
- **<title>** — <date or week> — <weight, if given>

Order the list chronologically where dates are known.

Syllabus text:
---
{syllabus_text}
---"""
        return self.analyze_text(prompt)

    def extract_coursework(self, syllabus_text: str) -> AnalysisResult:
        """Structured extraction of gradable items, grouped by the syllabus' own labels."""
        prompt = f"""RETURN ONLY VALID JSON — NO TEXT BEFORE OR AFTER.

Extract every gradable component of the course from this syllabus. Group the items
by the kind of work they are, using keys such as: {COURSEWORK_LABELS_HINT}.

{{
  "<category label>": [
    {{
      "name": "<string>",
      "weight": <number — percentage of the final grade, 0 if not stated>,
      "date": "<YYYY-MM-DD or null if not stated>",
      "description": "<string, may be empty>"
    }}
  ]
}}

Syllabus text:
---
{syllabus_text}
---"""
        return self.analyze_structured(prompt)

    def process_syllabus(self, syllabus_text: str) -> SyllabusExtract:
        """Quick extraction of assignments and tests; both lists are always present."""
        prompt = f"""Analyze the following course syllabus text and extract all information about
upcoming assignments and tests/exams.

For each assignment, provide:
- title
- dueDate
- description (if available)
- weight: percentage of final grade (if specified)

For each test or exam, provide:
- title
- date
- topics covered (if specified)
- weight: percentage of final grade (if specified)

Format your response as a JSON object with two arrays: "assignments" and "tests".

Here is the syllabus text:
{syllabus_text}"""
        analysis = self.analyze_structured(prompt, list_fields=("assignments", "tests"))
        if not analysis.ok:
            return SyllabusExtract(error=analysis.error)

        assignments = []
        for raw in analysis.data["assignments"]:
            try:
                assignments.append(SyllabusAssignment.model_validate(raw))
            except ValueError as e:  # pydantic.ValidationError is a ValueError
                logger.debug(f"process_syllabus: dropping malformed assignment {raw!r}: {e}")
        tests = []
        for raw in analysis.data["tests"]:
            try:
                tests.append(SyllabusTest.model_validate(raw))
            except ValueError as e:
                logger.debug(f"process_syllabus: dropping malformed test {raw!r}: {e}")
        return SyllabusExtract(assignments=assignments, tests=tests)
