"""Mini-game catalog and the game -> skill mapping.

The catalog mirrors the dashboard's game list. ``skill`` names the single
skill a game trains; games without one still award XP but move no skill.
"""

from __future__ import annotations

SKILL_CATEGORY_FIELDS: dict[str, str] = {
    "math": "math_skills",
    "english": "english_skills",
    "science": "science_skills",
    "coding": "coding_skills",
    "art": "art_skills",
    "language": "language_skills",
    "problem_solving": "problem_solving",
    "memory": "memory_skills",
}

GAME_CATALOG: list[dict] = [
    {"id": "math-ninja", "title": "Math Ninja", "description": "Master addition and subtraction!",
     "xp": 50, "category": "Math", "difficulty": "easy", "skill": "math"},
    {"id": "typing-dash", "title": "Typing Dash", "description": "Improve your typing speed!",
     "xp": 40, "category": "Language", "difficulty": "medium", "skill": "language"},
    {"id": "memory-flip", "title": "Memory Flip", "description": "Match pairs and boost memory!",
     "xp": 30, "category": "Memory", "difficulty": "easy", "skill": "memory"},
    {"id": "puzzle-portal", "title": "Puzzle Portal", "description": "Solve logic puzzles!",
     "xp": 45, "category": "Logic", "difficulty": "medium", "skill": "problem_solving"},
    {"id": "grammar-builder", "title": "Grammar Builder", "description": "Build better sentences!",
     "xp": 35, "category": "Language", "difficulty": "easy", "skill": "english"},
    {"id": "quiz-attack", "title": "Quiz Attack", "description": "Test your knowledge!",
     "xp": 60, "category": "General", "difficulty": "medium", "skill": None},
    {"id": "color-match", "title": "Color Match", "description": "Learn colors and patterns!",
     "xp": 25, "category": "Visual", "difficulty": "easy", "skill": "art"},
    {"id": "code-runner", "title": "Code Runner", "description": "Learn basic coding!",
     "xp": 55, "category": "STEM", "difficulty": "hard", "skill": "coding"},
    {"id": "reaction-hero", "title": "Reaction Hero", "description": "Test your reflexes!",
     "xp": 35, "category": "Action", "difficulty": "medium", "skill": None},
    {"id": "speed-sort", "title": "Speed Sort", "description": "Sort items by category!",
     "xp": 40, "category": "Logic", "difficulty": "medium", "skill": "problem_solving"},
    {"id": "word-builder", "title": "Word Builder", "description": "Create words from letters!",
     "xp": 45, "category": "Language", "difficulty": "medium", "skill": "language"},
    {"id": "number-crunch", "title": "Number Crunch", "description": "Advanced math challenges!",
     "xp": 65, "category": "Math", "difficulty": "hard", "skill": "math"},
    {"id": "pattern-master", "title": "Pattern Master", "description": "Recognize and complete patterns!",
     "xp": 50, "category": "Logic", "difficulty": "medium", "skill": "problem_solving"},
    {"id": "story-spinner", "title": "Story Spinner", "description": "Create amazing stories!",
     "xp": 40, "category": "Creative", "difficulty": "easy", "skill": "english"},
    {"id": "science-quest", "title": "Science Quest", "description": "Explore the world of science!",
     "xp": 55, "category": "Science", "difficulty": "medium", "skill": "science"},
    {"id": "art-adventure", "title": "Art Adventure", "description": "Express your creativity!",
     "xp": 35, "category": "Art", "difficulty": "easy", "skill": "art"},
]

# Games the daily spin can unlock. Order is irrelevant to selection.
LOCKABLE_GAMES: tuple[str, ...] = (
    "typing-dash",
    "grammar-builder",
    "code-runner",
    "reaction-hero",
    "speed-sort",
    "word-builder",
    "number-crunch",
    "pattern-master",
)

GAME_SKILLS: dict[str, str | None] = {game["id"]: game["skill"] for game in GAME_CATALOG}


def get_game(game_id: str) -> dict | None:
    """Look up a catalog entry by id."""
    return next((g for g in GAME_CATALOG if g["id"] == game_id), None)


def skill_field_for(game_id: str) -> str | None:
    """Progress field trained by a game, or None for unknown/untagged games."""
    skill = GAME_SKILLS.get(game_id)
    return SKILL_CATEGORY_FIELDS[skill] if skill else None
