"""User schemas."""

from pydantic import BaseModel
from typing import Optional


class UserResponse(BaseModel):
    id: int
    name: str
    email: str


class UserUpdate(BaseModel):
    name: Optional[str] = None
