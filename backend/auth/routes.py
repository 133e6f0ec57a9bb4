"""Authentication routes: register, login, logout, me."""

import logging
from fastapi import APIRouter, HTTPException, Depends, Response
from server.database import get_db
from auth.utils import (
    SESSION_COOKIE, generate_token, get_current_user, hash_password,
    set_session_cookie, verify_password,
)
from auth.schemas import RegisterRequest, LoginRequest, AuthResponse
from users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse)
def register(body: RegisterRequest, response: Response):
    if len(body.password) < 6:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")
    if not body.email or "@" not in body.email:
        raise HTTPException(status_code=400, detail="Valid email required")
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")

    email = body.email.lower().strip()
    db = get_db()
    try:
        existing = db.execute("SELECT id FROM users WHERE email = ?", (email,)).fetchone()
        if existing:
            raise HTTPException(status_code=409, detail="Email already registered")

        token = generate_token()
        cursor = db.execute(
            "INSERT INTO users (name, email, password_hash, auth_token) VALUES (?, ?, ?, ?)",
            (body.name.strip(), email, hash_password(body.password), token)
        )
        db.commit()
        user_id = cursor.lastrowid
    finally:
        db.close()

    # Token lives only in the HttpOnly cookie, never in the JSON body
    set_session_cookie(response, token)
    logger.info(f"Registered user {user_id}")
    return AuthResponse(user=UserResponse(id=user_id, name=body.name.strip(), email=email))


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, response: Response):
    db = get_db()
    try:
        row = db.execute(
            "SELECT * FROM users WHERE email = ?", (body.email.lower().strip(),)
        ).fetchone()
        if not row or not verify_password(body.password, row["password_hash"]):
            raise HTTPException(status_code=401, detail="Invalid email or password")

        token = generate_token()
        db.execute("UPDATE users SET auth_token = ? WHERE id = ?", (token, row["id"]))
        db.commit()
    finally:
        db.close()

    set_session_cookie(response, token)
    return AuthResponse(user=UserResponse(**{k: row[k] for k in UserResponse.model_fields}))


@router.post("/logout")
def logout(response: Response, current_user: dict = Depends(get_current_user)):
    db = get_db()
    db.execute("UPDATE users SET auth_token = NULL WHERE id = ?", (current_user["id"],))
    db.commit()
    db.close()

    response.delete_cookie(key=SESSION_COOKIE, httponly=True, samesite="lax", path="/")
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def get_me(current_user: dict = Depends(get_current_user)):
    return UserResponse(**{k: current_user[k] for k in UserResponse.model_fields})
