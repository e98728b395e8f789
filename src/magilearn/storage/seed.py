"""Demo learner seed data — the placeholder user the dashboard shows without a login."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from magilearn.auth.password import hash_password
from magilearn.storage.base import Storage

logger = logging.getLogger(__name__)

DEMO_USER: dict = {
    "username": "Alex",
    "name": "Alex Martinez",
    "age": 10,
    "class_label": "5th Grade",
    "special_need": "adhd",
    "learning_style": "visual",
    "interests": ["math", "puzzles"],
    "subjects": ["math", "science", "art"],
    "current_mood": "happy",
    "accessibility_needs": [],
}

DEMO_PROGRESS: dict = {
    "total_xp": 1247,
    "math_skills": 78,
    "english_skills": 65,
    "science_skills": 70,
    "coding_skills": 45,
    "art_skills": 85,
    "language_skills": 65,
    "problem_solving": 82,
    "memory_skills": 71,
    "learning_streak": 5,
}

STARTER_GAMES: list[str] = [
    "math-ninja",
    "memory-flip",
    "puzzle-portal",
    "quiz-attack",
    "color-match",
]

DEMO_ACHIEVEMENTS: list[dict] = [
    {"achievement_id": "math-master", "title": "Math Master", "description": "Completed 10 math games!"},
    {"achievement_id": "5-day-streak", "title": "5-Day Streak", "description": "Learning every day!"},
    {"achievement_id": "first-spin", "title": "First Spin", "description": "Unlocked your first game!"},
]


async def seed_demo_user(storage: Storage, user_id: str, today: date | None = None) -> bool:
    """Create the demo learner if it does not exist yet (idempotent).

    Returns True when the user was created.
    """
    if await storage.get_user(user_id) is not None:
        return False

    if today is None:
        today = datetime.now(timezone.utc).date()

    profile = dict(DEMO_USER)
    username = profile.pop("username")
    await storage.create_user(
        username=username,
        password_hash=hash_password("password"),
        user_id=user_id,
        **profile,
    )
    await storage.update_progress(user_id, last_active_date=datetime.now(timezone.utc), **DEMO_PROGRESS)
    await storage.update_daily_spins(user_id, today, spins_used=1)
    for game_id in STARTER_GAMES:
        await storage.unlock_game(user_id, game_id)
    for achievement in DEMO_ACHIEVEMENTS:
        await storage.add_achievement(user_id, **achievement)
    await storage.commit()

    logger.info("Seeded demo user %s", user_id)
    return True
