"""Run the syllabus analyzer against a local PDF and print what it finds.

Run from the project root:  python scripts/extract_syllabus.py path/to/syllabus.pdf
"""
import json
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend"))

from brain.coursework import normalize_coursework  # noqa: E402
from brain.ingest import build_analyzer  # noqa: E402
from brain.pdf_extractor import extract_text_from_pdf_bytes  # noqa: E402


def extract_syllabus(pdf_path: str):
    with open(pdf_path, "rb") as f:
        text = extract_text_from_pdf_bytes(f.read())
    print(f"Extracted {len(text)} characters from {pdf_path}")
    if not text:
        print("No text found (scanned PDF?)")
        return

    analyzer = build_analyzer()
    quick = analyzer.process_syllabus(text)
    if quick.error:
        print(f"Quick extract failed: {quick.error}")
    else:
        print(f"Quick extract: {len(quick.assignments)} assignments, {len(quick.tests)} tests")

    analysis = analyzer.extract_coursework(text)
    if not analysis.ok:
        print(f"Coursework extraction failed: {analysis.error}")
        return
    coursework, categories = normalize_coursework(analysis.data)
    print(json.dumps(categories, indent=2))


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/extract_syllabus.py <syllabus.pdf>")
        sys.exit(1)
    extract_syllabus(sys.argv[1])
