"""Global configuration — paths, env vars, AI providers.

DEPLOYMENT:
  Copy .env.example → .env and fill in the values.
  To switch servers or AI providers, only the .env file needs to change — no code edits required.
"""

import os
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # backend/
PROJECT_DIR = os.path.dirname(BASE_DIR)  # project root

# Load .env from project root (overrides any system env vars with same name)
load_dotenv(os.path.join(PROJECT_DIR, ".env"), override=True)

# ─── Paths ───────────────────────────────────────────────────
DB_PATH = os.environ.get("DB_PATH", os.path.join(BASE_DIR, "course_planner.db"))
UPLOAD_DIR = os.environ.get("UPLOAD_DIR", os.path.join(BASE_DIR, "uploads"))

# ─── Environment ─────────────────────────────────────────────
# Set ENVIRONMENT=production in .env to enable HTTPS-only cookies.
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT == "production"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# ─── Server ──────────────────────────────────────────────────
PORT = int(os.environ.get("PORT", 8000))
# Base URL used to build public links for uploaded syllabus files.
PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", f"http://127.0.0.1:{PORT}").rstrip("/")

# ─── CORS ────────────────────────────────────────────────────
# Dev:  ALLOWED_ORIGINS=*   (allows any origin)
# Prod: ALLOWED_ORIGINS=https://yourdomain.com,https://www.yourdomain.com
_raw_origins = os.environ.get("ALLOWED_ORIGINS", "*")
ALLOWED_ORIGINS = ["*"] if _raw_origins.strip() == "*" else [
    o.strip() for o in _raw_origins.split(",") if o.strip()
]

# ─── API keys ────────────────────────────────────────────────
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")

# ─── AI providers ────────────────────────────────────────────
# ANALYZER_PROVIDER drives syllabus ingestion and /analyze,
# ASSISTANT_PROVIDER drives summaries, deadlines, questions and study plans.
# Each one of: gemini | openai | anthropic
ANALYZER_PROVIDER = os.environ.get("ANALYZER_PROVIDER", "gemini")
ASSISTANT_PROVIDER = os.environ.get("ASSISTANT_PROVIDER", "openai")

GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
ANTHROPIC_MODEL = os.environ.get("ANTHROPIC_MODEL", "claude-3-haiku-20240307")

# Gemini's context window is ~30k tokens, roughly 100k characters; stay well under it.
MAX_PROMPT_CHARS = int(os.environ.get("MAX_PROMPT_CHARS", 80_000))
PDF_FETCH_TIMEOUT = float(os.environ.get("PDF_FETCH_TIMEOUT", 30))
