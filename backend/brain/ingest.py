"""Course ingestion — syllabus PDF → text → AI description/dates/coursework/summary.

Runs as the pre-save hook of the course create/update actions. Stages run in
order and each one catches its own failure, so a broken AI call only costs
that stage's output. The record is never saved here; the calling action
persists it once afterwards.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from brain.analyzer import TextAnalyzer
from brain.assistant import StudyAssistant
from brain.coursework import empty_categories, normalize_coursework
from brain.llm import build_completion_client
from brain.pdf_extractor import extract_text_from_pdf
from courses.schemas import CourseRecord
from server import config

logger = logging.getLogger(__name__)

DESCRIPTION_HEADER = "--- Course Description ---"
KEY_DATES_HEADER = "--- Key Dates & Deadlines (AI Analysis) ---"
SYLLABUS_HEADER = "--- Extracted Syllabus Content ---"

MISSING_KEY_SUMMARY = (
    "AI summary unavailable — an AI provider API key is missing or invalid. "
    "Add a valid key to enable course summaries."
)


def append_section(description: Optional[str], header: str, body: str) -> str:
    section = f"{header}\n\n{body.strip()}"
    if description and description.strip():
        return f"{description.rstrip()}\n\n{section}"
    return section


class CourseIngestor:
    def __init__(self, analyzer: TextAnalyzer, assistant: StudyAssistant,
                 extract_text: Callable[[Optional[str], Optional[str]], str] = extract_text_from_pdf):
        self.analyzer = analyzer
        self.assistant = assistant
        self.extract_text = extract_text

    def run(self, record: CourseRecord) -> CourseRecord:
        """Mutate `record` in place with everything the syllabus yields. Never raises on AI failure."""
        ctx = f"course {record.id or '<new>'} ({record.name})"

        if not record.syllabus:
            logger.debug(f"Ingest {ctx}: no syllabus attached, skipping AI stages")
            return record

        # Fresh syllabus: derived fields are regenerated wholesale
        record.coursework = []
        record.coursework_categories = empty_categories()
        record.ai_summary = None

        text = self.extract_text(record.syllabus.url, record.syllabus.mime_type)
        record.syllabus_text = text
        if not text.strip():
            logger.info(f"Ingest {ctx}: no text extracted from syllabus, nothing to analyze")
            return record
        logger.info(f"Ingest {ctx}: extracted {len(text)} chars from syllabus")

        self._add_description(record, text, ctx)
        dates_ok = self._add_key_dates(record, text, ctx)
        if dates_ok:
            self._add_coursework(record, text, ctx)
        self._add_summary(record, ctx)
        return record

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _add_description(self, record: CourseRecord, text: str, ctx: str):
        try:
            analysis = self.analyzer.extract_course_description(text)
            if not analysis.ok:
                logger.warning(f"Ingest {ctx}: description extraction failed: {analysis.error}")
                return
            if not analysis.result.strip():
                logger.info(f"Ingest {ctx}: syllabus has no descriptive paragraph")
                return
            record.description = append_section(record.description, DESCRIPTION_HEADER, analysis.result)
            logger.info(f"Ingest {ctx}: added extracted course description")
        except Exception as e:
            logger.error(f"Ingest {ctx}: description stage crashed: {type(e).__name__}: {e}")

    def _add_key_dates(self, record: CourseRecord, text: str, ctx: str) -> bool:
        analysis = None
        try:
            analysis = self.analyzer.analyze_key_dates(text)
        except Exception as e:
            logger.error(f"Ingest {ctx}: key-dates stage crashed: {type(e).__name__}: {e}")

        if analysis is not None and analysis.ok and analysis.result.strip():
            description = append_section(record.description, KEY_DATES_HEADER, analysis.result)
            record.description = append_section(description, SYLLABUS_HEADER, text)
            logger.info(f"Ingest {ctx}: added key dates analysis and syllabus text")
            return True

        if analysis is not None and not analysis.ok:
            logger.warning(f"Ingest {ctx}: key-dates analysis failed: {analysis.error}")
        # Keep the raw syllabus even when every AI stage fails
        record.description = append_section(record.description, SYLLABUS_HEADER, text)
        return False

    def _add_coursework(self, record: CourseRecord, text: str, ctx: str):
        try:
            analysis = self.analyzer.extract_coursework(text)
            if not analysis.ok:
                logger.warning(f"Ingest {ctx}: coursework extraction failed: {analysis.error}")
                return
            coursework, categories = normalize_coursework(analysis.data)
            record.coursework = coursework
            record.coursework_categories = categories
            logger.info(f"Ingest {ctx}: extracted {len(coursework)} coursework items")
        except Exception as e:
            logger.error(f"Ingest {ctx}: coursework stage crashed: {type(e).__name__}: {e}")

    def _add_summary(self, record: CourseRecord, ctx: str):
        if not record.description or not record.description.strip():
            logger.debug(f"Ingest {ctx}: no description to summarize")
            return
        try:
            analysis = self.assistant.summarize_course_content(record.description)
        except Exception as e:
            logger.error(f"Ingest {ctx}: summary stage crashed: {type(e).__name__}: {e}")
            return

        if analysis.ok and analysis.result.strip():
            record.ai_summary = analysis.result.strip()
            logger.info(f"Ingest {ctx}: generated AI summary")
        elif analysis.is_auth_failure:
            record.ai_summary = MISSING_KEY_SUMMARY
            logger.warning(f"Ingest {ctx}: summary skipped, credential problem: {analysis.error}")
        else:
            logger.warning(f"Ingest {ctx}: summary generation failed: {analysis.error}")


def build_analyzer() -> TextAnalyzer:
    return TextAnalyzer(build_completion_client(config.ANALYZER_PROVIDER))


def build_assistant() -> StudyAssistant:
    return StudyAssistant(build_completion_client(config.ASSISTANT_PROVIDER))


def build_ingestor() -> CourseIngestor:
    """Wire the ingestor to the providers named in config."""
    return CourseIngestor(build_analyzer(), build_assistant())
