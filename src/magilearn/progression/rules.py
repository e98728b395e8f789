"""Fixed reward amounts and the skill clamping rule."""

from __future__ import annotations

SPIN_XP_REWARD = 50
CONTINUE_LEARNING_XP = 25
CONTINUE_LEARNING_SKILL_BOOST = 5
GAME_SKILL_BOOST = 2

SKILL_MIN = 0
SKILL_MAX = 100

CONTINUE_LEARNING_MESSAGE = "Great progress! Keep learning!"


def clamp_skill(value: int) -> int:
    """Clamp a skill percentage into [0, 100]."""
    return max(SKILL_MIN, min(SKILL_MAX, value))


def bump_skill(current: int | None, amount: int) -> int:
    """Raise a skill percentage by ``amount``, clamped."""
    return clamp_skill((current or 0) + amount)
