"""Pydantic schemas for AI learning profiles and recommendations."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class LearningProfile(BaseModel):
    """Structured learner analysis. Accepts camelCase keys from the model."""

    strengths: list[str]
    challenges: list[str]
    recommendations: list[str]
    adaptive_difficulty: int = Field(
        ..., ge=1, le=10, validation_alias=AliasChoices("adaptive_difficulty", "adaptiveDifficulty")
    )
    preferred_content_types: list[str] = Field(
        ..., validation_alias=AliasChoices("preferred_content_types", "preferredContentTypes")
    )
    last_analyzed: datetime | None = Field(
        None, validation_alias=AliasChoices("last_analyzed", "lastAnalyzed")
    )


class DifficultyAdvice(BaseModel):
    difficulty: int = Field(..., ge=1, le=10)
    suggestions: list[str]


class DifficultyRequest(BaseModel):
    """One game session's performance."""

    score: int = Field(0, ge=0)
    time_spent: float = Field(0, ge=0, description="Seconds")
    mistakes: int = Field(0, ge=0)


class RecommendationsResponse(BaseModel):
    recommendations: list[str]


class AnalyzeProgressResponse(BaseModel):
    profile: LearningProfile
