"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.profile import ProfileResponse


class RegisterRequest(BaseModel):
    """Register request schema."""

    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Optional[str] = "STUDENT"


class RegisterResponse(BaseModel):
    """Register response schema."""

    message: str
    user_id: UUID
    user: "UserResponse"


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Login response schema. The token is also set as the auth cookie."""

    access_token: str
    token_type: str
    user: "UserResponse"


class UserResponse(BaseModel):
    """User response schema (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: str
    created_at: datetime
    profile: Optional[ProfileResponse] = None


class SessionUser(BaseModel):
    id: UUID
    email: str
    role: str
    name: Optional[str] = None


class SessionResponse(BaseModel):
    """Soft session check: ``user`` is null instead of a 401."""

    user: Optional[SessionUser] = None


class MessageResponse(BaseModel):
    message: str


# Rebuild models to resolve forward references
RegisterResponse.model_rebuild()
LoginResponse.model_rebuild()
