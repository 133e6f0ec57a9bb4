"""Authentication utilities: password hashing + session token lookup."""

import hashlib
import secrets
from fastapi import HTTPException, Request, Response
from server import config
from server.database import get_db

SESSION_COOKIE = "session_token"
SESSION_MAX_AGE = 2592000  # 30 days
PBKDF2_ROUNDS = 100_000


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    h = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ROUNDS)
    return f"{salt}${h.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    if not stored_hash or "$" not in stored_hash:
        return False
    salt, h = stored_hash.split("$", 1)
    new_h = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ROUNDS)
    return secrets.compare_digest(new_h.hex(), h)


def generate_token() -> str:
    return secrets.token_urlsafe(48)


def set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=config.IS_PRODUCTION,
        samesite="lax",
        path="/",
        max_age=SESSION_MAX_AGE,
    )


def get_current_user(request: Request) -> dict:
    """FastAPI dependency: resolve the session cookie to the signed-in user."""
    session_token = request.cookies.get(SESSION_COOKIE)
    if not session_token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    db = get_db()
    try:
        user = db.execute(
            "SELECT * FROM users WHERE auth_token = ?", (session_token,)
        ).fetchone()
    finally:
        db.close()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return dict(user)
