"""Study assistant — course summaries, deadline extraction, Q&A and study plans.

Backed by the ASSISTANT_PROVIDER client (OpenAI by default, which supports
JSON-schema guided output; other providers get the schema in the prompt).
"""
from __future__ import annotations

import logging
from typing import Optional

from brain.analyzer import TextAnalyzer, check_text_length, extract_json_object
from brain.llm import CompletionClient, LLMError
from brain.schemas import AnalysisResult, Deadline, QuestionAnalysis

logger = logging.getLogger(__name__)

STUDY_PLAN_ERROR = "Error generating study plan. Please try again later."
QUESTION_ERROR_ANSWER = (
    "I encountered an error while analyzing your question. "
    "Please try again or rephrase your question."
)

DEADLINES_SCHEMA = {
    "type": "object",
    "properties": {
        "deadlines": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "The title or name of the deadline/assignment"},
                    "due_date": {"type": "string", "description": "The due date in YYYY-MM-DD format"},
                    "description": {"type": "string", "description": "A brief description of the deadline/assignment"},
                    "estimated_hours": {
                        "type": ["number", "null"],
                        "description": "Estimated hours to complete the assignment",
                    },
                },
                "required": ["title", "due_date", "description", "estimated_hours"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["deadlines"],
    "additionalProperties": False,
}

QUESTION_SCHEMA = {
    "type": "object",
    "properties": {
        "topic": {"type": "string", "description": "The main topic of the question"},
        "related_concepts": {"type": "array", "items": {"type": "string"}},
        "answer": {"type": "string", "description": "A concise answer to the student's question"},
        "further_resources": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["topic", "related_concepts", "answer", "further_resources"],
    "additionalProperties": False,
}


class StudyAssistant:
    def __init__(self, client: CompletionClient, max_chars: Optional[int] = None):
        self.client = client
        self.analyzer = TextAnalyzer(client, max_chars=max_chars)

    def _complete_json(self, prompt: str, schema: dict, schema_name: str, system: str) -> dict:
        is_valid, message = check_text_length(self.client.json_prompt(prompt, schema), self.analyzer.max_chars)
        if not is_valid:
            raise ValueError(message)
        raw = self.client.complete_json(prompt, schema, schema_name, system=system)
        return extract_json_object(raw)

    def summarize_course_content(self, course_text: str, max_length: int = 1000) -> AnalysisResult:
        system = (
            "You are an AI educational assistant that excels at creating concise, informative "
            "summaries of academic content. Focus on key concepts, definitions, and important details."
        )
        prompt = (
            "Please summarize the following course material in a clear, structured way:\n\n"
            f"{course_text}\n\n"
            f"Keep the summary under {max_length} characters. "
            "Highlight the most important concepts and organize logically."
        )
        return self.analyzer.analyze_text(prompt, system=system)

    def extract_deadlines_from_text(self, course_description: str,
                                    syllabus: Optional[str] = None) -> list[Deadline]:
        system = (
            "You are an AI assistant that extracts deadline information from course descriptions and syllabi. "
            "Extract all assignments, projects, exams, and other deadlines mentioned in the text. "
            "If a date is ambiguous, make your best guess at the specific date."
        )
        prompt = (
            "Extract all deadlines and assignments from the following course information:\n\n"
            f"Course Description: {course_description}\n\n"
        )
        if syllabus:
            prompt += f"Syllabus: {syllabus}\n\n"

        try:
            data = self._complete_json(prompt, DEADLINES_SCHEMA, "deadlines", system)
        except (LLMError, ValueError) as e:
            logger.warning(f"StudyAssistant: deadline extraction failed: {e}")
            return []

        deadlines = []
        for raw in data.get("deadlines") or []:
            try:
                deadlines.append(Deadline.model_validate(raw))
            except ValueError as e:
                logger.debug(f"StudyAssistant: dropping malformed deadline {raw!r}: {e}")
        return deadlines

    def analyze_student_question(self, question: str, course_context: str) -> QuestionAnalysis:
        system = (
            "You are an AI educational assistant that helps students understand their course material. "
            "Analyze questions, identify the main topics, and provide helpful, accurate responses."
        )
        prompt = (
            "Please analyze the following student question about their course:\n\n"
            f"Question: {question}\n\n"
            f"Course Context: {course_context}\n\n"
        )
        try:
            data = self._complete_json(prompt, QUESTION_SCHEMA, "question_analysis", system)
            return QuestionAnalysis.model_validate(data)
        except (LLMError, ValueError) as e:
            logger.warning(f"StudyAssistant: question analysis failed: {e}")
            return QuestionAnalysis(topic="Error analyzing question", answer=QUESTION_ERROR_ANSWER)

    def generate_study_plan(self, course_description: str, deadlines: list[Deadline],
                            student_preferences: str) -> str:
        system = (
            "You are an AI educational assistant that helps students create effective study plans. "
            "Create a detailed study plan that breaks down the course material into manageable chunks, "
            "taking into account the deadlines and student's preferences."
        )
        deadline_lines = []
        for d in deadlines:
            line = f"- {d.title}: Due on {d.due_date}, {d.description}"
            if d.estimated_hours:
                line += f", Est. hours: {d.estimated_hours}"
            deadline_lines.append(line)

        prompt = (
            "Please create a study plan for the following course:\n\n"
            f"Course Description: {course_description}\n\n"
            "Deadlines:\n" + "\n".join(deadline_lines) + "\n\n"
            f"Student Preferences: {student_preferences}\n\n"
            "The study plan should include weekly goals, suggested study sessions, "
            "and preparation for each deadline."
        )
        analysis = self.analyzer.analyze_text(prompt, system=system)
        if not analysis.ok:
            return STUDY_PLAN_ERROR
        return analysis.result
