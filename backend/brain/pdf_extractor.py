"""PDF text extractor — fetch a syllabus by URL and decode it with PyMuPDF."""
from __future__ import annotations

import logging
from typing import Optional

import fitz  # PyMuPDF
import httpx

from server import config

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        return "\n".join(page.get_text() for page in doc).strip()
    finally:
        doc.close()


def extract_text_from_pdf(url: Optional[str], mime_type: Optional[str]) -> str:
    """Return the plain text of the PDF at `url`, or "" when there is nothing usable.

    Non-PDF files are skipped without touching the network. Fetch and decode
    errors are logged and reported as "" so course saves never fail on a bad file.
    """
    if not url or mime_type != PDF_MIME_TYPE:
        logger.debug(f"Skipping text extraction: not a PDF or missing URL (mime_type={mime_type})")
        return ""

    try:
        response = httpx.get(url, timeout=config.PDF_FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
        return extract_text_from_pdf_bytes(response.content)
    except Exception as e:
        logger.error(f"Failed to extract text from PDF at {url}: {type(e).__name__}: {e}")
        return ""
