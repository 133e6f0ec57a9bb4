"""SQLite database — connection + schema + migrations."""

import logging
import os
import sqlite3
from server import config

logger = logging.getLogger(__name__)


def get_db():
    conn = sqlite3.connect(config.DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db():
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    db_dir = os.path.dirname(config.DB_PATH)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    conn = get_db()

    conn.executescript("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT UNIQUE,
            password_hash TEXT DEFAULT '',
            auth_token TEXT,
            created_at TEXT DEFAULT (datetime('now'))
        );

        CREATE TABLE IF NOT EXISTS courses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            code TEXT NOT NULL,
            description TEXT,
            color TEXT,
            start_date TEXT,
            end_date TEXT,
            syllabus TEXT,
            syllabus_text TEXT,
            ai_summary TEXT,
            coursework TEXT DEFAULT '[]',
            coursework_categories TEXT DEFAULT '{}',
            created_at TEXT DEFAULT (datetime('now')),
            updated_at TEXT DEFAULT (datetime('now')),
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_courses_user ON courses(user_id);
    """)

    # Migrations: add auth columns if missing
    columns = {row[1] for row in conn.execute("PRAGMA table_info(users)").fetchall()}
    if "password_hash" not in columns:
        conn.execute("ALTER TABLE users ADD COLUMN password_hash TEXT DEFAULT ''")
    if "auth_token" not in columns:
        conn.execute("ALTER TABLE users ADD COLUMN auth_token TEXT")

    conn.execute("CREATE INDEX IF NOT EXISTS idx_users_token ON users(auth_token)")

    # Migrations: AI-derived course fields were added after the first release
    course_columns = {row[1] for row in conn.execute("PRAGMA table_info(courses)").fetchall()}
    if "syllabus_text" not in course_columns:
        conn.execute("ALTER TABLE courses ADD COLUMN syllabus_text TEXT")
    if "ai_summary" not in course_columns:
        conn.execute("ALTER TABLE courses ADD COLUMN ai_summary TEXT")
    if "coursework" not in course_columns:
        conn.execute("ALTER TABLE courses ADD COLUMN coursework TEXT DEFAULT '[]'")
    if "coursework_categories" not in course_columns:
        conn.execute("ALTER TABLE courses ADD COLUMN coursework_categories TEXT DEFAULT '{}'")
    if "updated_at" not in course_columns:
        conn.execute("ALTER TABLE courses ADD COLUMN updated_at TEXT")

    conn.commit()
    conn.close()
    logger.info(f"Database ready at {config.DB_PATH}")
