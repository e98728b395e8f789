"""Prompt text for the learning-analysis model."""

from __future__ import annotations

from magilearn.storage.entities import GameStats, Progress, User

PROFILE_SYSTEM = (
    "You are an expert educational AI that analyzes student learning patterns and creates "
    "personalized learning profiles. Focus on being encouraging while providing actionable "
    "insights. Reply with a single JSON object and nothing else."
)

RECOMMENDATIONS_SYSTEM = (
    "You are an educational AI that provides personalized, age-appropriate learning "
    "recommendations. Make suggestions fun and engaging. Reply with a single JSON object "
    "and nothing else."
)

DIFFICULTY_SYSTEM = (
    "You are an adaptive learning AI that adjusts game difficulty based on student "
    "performance. Balance challenge with encouragement. Reply with a single JSON object "
    "and nothing else."
)


def _join(values: list[str] | None, empty: str) -> str:
    return ", ".join(values) if values else empty


def _skills_block(progress: Progress | None) -> str:
    p = progress or Progress(id="", user_id="")
    return (
        f"- Math: {p.math_skills}%\n"
        f"- English: {p.english_skills}%\n"
        f"- Science: {p.science_skills}%\n"
        f"- Coding: {p.coding_skills}%\n"
        f"- Art: {p.art_skills}%\n"
        f"- Language: {p.language_skills}%\n"
        f"- Problem solving: {p.problem_solving}%\n"
        f"- Memory: {p.memory_skills}%"
    )


def learning_profile_prompt(user: User, progress: Progress | None, game_stats: list[GameStats]) -> str:
    games_played = sum(s.times_played for s in game_stats)
    streak = progress.learning_streak if progress else 0
    total_xp = progress.total_xp if progress else 0
    return (
        "Analyze this student's learning data and create a personalized learning profile.\n\n"
        "Student Info:\n"
        f"- Name: {user.name or user.username}\n"
        f"- Age: {user.age if user.age is not None else 'unknown'}\n"
        f"- Grade: {user.class_label or 'unknown'}\n"
        f"- Special Needs: {user.special_need or 'none'}\n"
        f"- Learning Style: {user.learning_style or 'unknown'}\n"
        f"- Current Mood: {user.current_mood or 'unknown'}\n"
        f"- Favorite Subjects: {_join(user.subjects, 'none specified')}\n"
        f"- Accessibility Needs: {_join(user.accessibility_needs, 'none')}\n\n"
        "Learning Progress:\n"
        f"- Total XP: {total_xp}\n"
        f"{_skills_block(progress)}\n"
        f"- Learning Streak: {streak} days\n\n"
        "Recent Activity:\n"
        f"- Games Played: {games_played}\n"
        f"- Different Games Tried: {len(game_stats)}\n\n"
        "Respond with JSON in exactly this shape:\n"
        "{\n"
        '  "strengths": ["2-3 key learning strengths"],\n'
        '  "challenges": ["2-3 areas needing improvement"],\n'
        '  "recommendations": ["3-4 specific actionable recommendations"],\n'
        '  "adaptive_difficulty": <integer 1-10>,\n'
        '  "preferred_content_types": ["e.g. visual, interactive, gamified"]\n'
        "}"
    )


def recommendations_prompt(user: User, progress: Progress | None) -> str:
    return (
        "Based on this student's profile, suggest 3 specific learning activities for today.\n\n"
        f"Student: {user.name or user.username}, Age {user.age if user.age is not None else 'unknown'}, "
        f"{user.class_label or 'unknown grade'}\n"
        f"Current Mood: {user.current_mood or 'unknown'}\n"
        f"Learning Style: {user.learning_style or 'unknown'}\n"
        f"Special Needs: {user.special_need or 'none'}\n"
        f"Favorite Subjects: {_join(user.subjects, 'various')}\n\n"
        "Recent Progress:\n"
        f"{_skills_block(progress)}\n\n"
        'Respond with JSON: {"recommendations": ["activity 1", "activity 2", "activity 3"]}'
    )


def difficulty_prompt(game_id: str, score: int, time_spent: float, mistakes: int) -> str:
    return (
        "Analyze this game performance and recommend a difficulty adjustment.\n\n"
        f"Game: {game_id}\n"
        "Performance:\n"
        f"- Score: {score}\n"
        f"- Time Spent: {time_spent:g} seconds\n"
        f"- Mistakes: {mistakes}\n\n"
        "Respond with JSON in exactly this shape:\n"
        '{"difficulty": <integer 1-10>, "suggestions": ["specific suggestions for the student"]}'
    )
