"""Request/response schemas for learner profile endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

SpecialNeed = Literal["autism", "adhd", "dyslexia", "physical", "other", "none"]
LearningStyle = Literal["visual", "auditory", "kinesthetic"]


class SurveyRequest(BaseModel):
    """Learning profile submitted through the onboarding survey."""

    name: str = Field(..., min_length=1, max_length=128)
    age: int = Field(..., ge=6, le=18)
    class_label: str = Field(
        ..., min_length=1, max_length=64, validation_alias=AliasChoices("class_label", "class")
    )
    special_need: SpecialNeed
    learning_style: LearningStyle
    subjects: list[str] = Field(..., min_length=1)
    current_mood: str
    accessibility_needs: list[str] | None = None


class UserResponse(BaseModel):
    """Full learner profile. Never includes the password hash."""

    id: str
    username: str
    email: str | None = None
    name: str | None = None
    age: int | None = None
    class_label: str | None = None
    special_need: str | None = None
    learning_style: str | None = None
    interests: list[str] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    current_mood: str | None = None
    accessibility_needs: list[str] = Field(default_factory=list)
    ai_learning_profile: dict[str, Any] | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
