"""Server — FastAPI app creation, middleware, startup."""

import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from server import config
from server.database import init_db

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from auth.routes import router as auth_router
from users.routes import router as users_router
from courses.routes import router as courses_router
from brain.routes import router as brain_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    init_db()
    if not config.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set — syllabus analysis will fall back to raw text")
    if not config.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set — summaries and study assistant are unavailable")
    yield
    logger.info("Application shutdown")


app = FastAPI(title="Course Planner API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=config.ALLOWED_ORIGINS != ["*"],
)


# ─── Uploaded syllabus files ─────────────────────────────────
os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR), name="uploads")


# ─── API routes ──────────────────────────────────────────────
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(users_router, tags=["users"])
app.include_router(courses_router, tags=["courses"])
app.include_router(brain_router, tags=["brain"])


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "version": "1.0.0",
        "analyzer_provider": config.ANALYZER_PROVIDER,
        "assistant_provider": config.ASSISTANT_PROVIDER,
    }
