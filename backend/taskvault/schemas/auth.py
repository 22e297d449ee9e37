"""Auth Schemas — Pydantic models for registration, login and identity payloads.

Invariants:
    - Request bodies reject unknown fields (extra="forbid")
    - email is syntactically valid; password is 1-72 UTF-8 bytes (bcrypt input limit)
    - Response models never include password_hash

Design Decisions:
    - EmailStr over a regex: email-validator handles the edge cases
    - Login does not apply the byte limit: an over-long password must fail as
      INVALID_CREDENTIALS, not as a 400 that reveals the rule to a guesser
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from taskvault.core.passwords import MAX_PASSWORD_BYTES


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=1)
    name: str | None = Field(None, max_length=255)

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(
                f"password must be at most {MAX_PASSWORD_BYTES} bytes",
            )
        return v


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    """Public identity — what register and /auth/me return."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str | None
    created_at: datetime
    updated_at: datetime


class LoginUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str | None


class LoginResponse(BaseModel):
    token: str
    user: LoginUser
