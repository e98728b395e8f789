"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

from magilearn.users.schemas import LearningStyle, SpecialNeed, UserResponse


class SignupRequest(BaseModel):
    """Create an account. Profile fields are optional; the survey fills them later."""

    username: str = Field(..., min_length=3, max_length=32)
    password: str = Field(..., min_length=1, max_length=128)
    email: EmailStr | None = None
    name: str | None = Field(None, min_length=1, max_length=128)
    age: int | None = Field(None, ge=6, le=18)
    class_label: str | None = Field(None, min_length=1, max_length=64)
    special_need: SpecialNeed | None = None
    learning_style: LearningStyle | None = None
    interests: list[str] | None = None
    subjects: list[str] | None = None
    current_mood: str | None = None
    accessibility_needs: list[str] | None = None

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: object) -> object:
        """Usernames are compared exactly, so drop surrounding whitespace before the length check."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        """Normalize email to lowercase."""
        return v.lower().strip() if v else v


class LoginRequest(BaseModel):
    """Login with username + password."""

    username: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class TokenResponse(BaseModel):
    """Access token plus the logged-in learner."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
