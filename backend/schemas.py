"""
Pydantic v2 request and response schemas.

Request models validate input early with actionable messages; response
models only serialize (``from_attributes``) so any row already in the
database renders without tripping a validator.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.password import MAX_PASSWORD_BYTES


# ═══════════════════════════════════════════════════════════════════════
# USER SCHEMAS
# ═══════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        size = len(v.encode("utf-8"))
        if size > MAX_PASSWORD_BYTES:
            raise ValueError(
                f"Password too long ({size} bytes). "
                f"Maximum {MAX_PASSWORD_BYTES} bytes allowed"
            )
        return v


class UserResponse(BaseModel):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    email: str

    model_config = ConfigDict(from_attributes=True)


# ═══════════════════════════════════════════════════════════════════════
# LOGIN SCHEMAS
# ═══════════════════════════════════════════════════════════════════════


class LoginRequest(BaseModel):
    email: str
    password: str
    # Absent, non-positive or too-large values fall back to the default lifetime
    expires_in_seconds: Optional[int] = None


class LoginResponse(UserResponse):
    token: str


# ═══════════════════════════════════════════════════════════════════════
# CHIRP SCHEMAS
# ═══════════════════════════════════════════════════════════════════════


class ChirpCreate(BaseModel):
    body: str


class ChirpResponse(BaseModel):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    body: str
    user_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)


class ValidateChirpRequest(BaseModel):
    body: str


class ValidateChirpResponse(BaseModel):
    cleaned_body: str
