"""Auth request/response schemas."""

from pydantic import BaseModel
from users.schemas import UserResponse


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    user: UserResponse
