"""AI learning recommendations — Claude API with static fallback.

Each operation makes exactly one model call. Any failure (no API key,
transport error, unparsable or off-schema output) is logged and answered
with a fixed fallback payload, so callers always get a usable result.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

import anthropic
from pydantic import ValidationError

from magilearn.ai.prompts import (
    DIFFICULTY_SYSTEM,
    PROFILE_SYSTEM,
    RECOMMENDATIONS_SYSTEM,
    difficulty_prompt,
    learning_profile_prompt,
    recommendations_prompt,
)
from magilearn.ai.schemas import DifficultyAdvice, LearningProfile
from magilearn.config import Settings
from magilearn.errors import ExternalServiceFailed
from magilearn.storage.entities import GameStats, Progress, User

logger = logging.getLogger(__name__)

FALLBACK_STRENGTHS = ["Consistent learning", "Good engagement"]
FALLBACK_CHALLENGES = ["Continue practicing", "Try new subjects"]
FALLBACK_PROFILE_RECOMMENDATIONS = [
    "Keep up daily practice",
    "Explore challenging content",
    "Mix different learning styles",
]
FALLBACK_DIFFICULTY = 5
FALLBACK_CONTENT_TYPES = ["interactive", "visual"]

FALLBACK_ACTIVITIES = [
    "Try a math puzzle game to boost problem-solving skills",
    "Read a short story and discuss it with someone",
    "Create art inspired by your favorite subject",
]

FALLBACK_SUGGESTIONS = ["Keep practicing to improve your skills!"]

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def fallback_profile() -> LearningProfile:
    """Generic encouragement profile used whenever analysis is unavailable."""
    return LearningProfile(
        strengths=list(FALLBACK_STRENGTHS),
        challenges=list(FALLBACK_CHALLENGES),
        recommendations=list(FALLBACK_PROFILE_RECOMMENDATIONS),
        adaptive_difficulty=FALLBACK_DIFFICULTY,
        preferred_content_types=list(FALLBACK_CONTENT_TYPES),
        last_analyzed=datetime.now(timezone.utc),
    )


def extract_json(text: str) -> Any:
    """Parse the JSON payload of a model reply.

    Handles ```json fenced blocks and prose around a single object.

    Raises:
        ExternalServiceFailed: no JSON could be recovered.
    """
    cleaned = _FENCE_RE.sub("", text.strip()) if text else ""
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass
    match = _OBJECT_RE.search(cleaned)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            pass
    msg = "Model reply is not valid JSON"
    raise ExternalServiceFailed(msg)


class RecommendationService:
    """Generate learner profiles, activity ideas and difficulty advice."""

    def __init__(
        self,
        client: anthropic.AsyncAnthropic | None = None,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 800,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> RecommendationService:
        """Build the service; without an API key every call falls back."""
        client = None
        if settings.anthropic_api_key:
            client = anthropic.AsyncAnthropic(
                api_key=settings.anthropic_api_key,
                timeout=settings.ai_timeout_seconds,
                max_retries=0,
            )
        return cls(client=client, model=settings.ai_model, max_tokens=settings.ai_max_tokens)

    async def _complete_json(self, system: str, prompt: str, temperature: float) -> Any:
        if self.client is None:
            msg = "AI client not configured"
            raise ExternalServiceFailed(msg)
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        return extract_json(response.content[0].text)

    async def generate_learning_profile(
        self,
        user: User,
        progress: Progress | None,
        game_stats: list[GameStats] | None = None,
    ) -> LearningProfile:
        """Analyze a learner. Falls back to a generic profile on any failure."""
        prompt = learning_profile_prompt(user, progress, game_stats or [])
        try:
            payload = await self._complete_json(PROFILE_SYSTEM, prompt, temperature=0.7)
            profile = LearningProfile.model_validate(payload)
        except (ExternalServiceFailed, ValidationError) as e:
            logger.warning("Learning profile unavailable for %s, using fallback: %s", user.id, e)
            return fallback_profile()
        except Exception:
            logger.exception("Claude API learning profile failed for %s, using fallback", user.id)
            return fallback_profile()

        profile.last_analyzed = datetime.now(timezone.utc)
        return profile

    async def get_personalized_recommendations(self, user: User, progress: Progress | None) -> list[str]:
        """Three activity ideas for today. Falls back to generic activities."""
        prompt = recommendations_prompt(user, progress)
        try:
            payload = await self._complete_json(RECOMMENDATIONS_SYSTEM, prompt, temperature=0.8)
            items = payload.get("recommendations") if isinstance(payload, dict) else payload
            if not isinstance(items, list) or not items or not all(isinstance(i, str) for i in items):
                msg = "Model reply has no recommendations list"
                raise ExternalServiceFailed(msg)
        except ExternalServiceFailed as e:
            logger.warning("Recommendations unavailable for %s, using fallback: %s", user.id, e)
            return list(FALLBACK_ACTIVITIES)
        except Exception:
            logger.exception("Claude API recommendations failed for %s, using fallback", user.id)
            return list(FALLBACK_ACTIVITIES)
        return items

    async def adapt_game_difficulty(
        self,
        game_id: str,
        score: int,
        time_spent: float,
        mistakes: int,
    ) -> DifficultyAdvice:
        """Recommend a 1-10 difficulty from one session. Falls back to 5."""
        prompt = difficulty_prompt(game_id, score, time_spent, mistakes)
        try:
            payload = await self._complete_json(DIFFICULTY_SYSTEM, prompt, temperature=0.6)
            return DifficultyAdvice.model_validate(payload)
        except (ExternalServiceFailed, ValidationError) as e:
            logger.warning("Difficulty advice unavailable for %s, using fallback: %s", game_id, e)
        except Exception:
            logger.exception("Claude API difficulty adaptation failed for %s, using fallback", game_id)
        return DifficultyAdvice(difficulty=FALLBACK_DIFFICULTY, suggestions=list(FALLBACK_SUGGESTIONS))
