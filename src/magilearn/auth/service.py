"""
Account business logic.

Handles signup (user + empty progress + best-effort AI profile) and login.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from magilearn.auth.password import (
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from magilearn.errors import StorageUnavailable

if TYPE_CHECKING:
    from magilearn.ai.service import RecommendationService
    from magilearn.auth.schemas import SignupRequest
    from magilearn.storage.base import Storage
    from magilearn.storage.entities import User

logger = structlog.get_logger()


async def signup(
    storage: Storage,
    body: SignupRequest,
    recommender: RecommendationService | None = None,
) -> User:
    """
    Register a new learner.

    Creates the user and an empty progress record in one commit, then tries
    to attach an AI learning profile. Failing to store the profile never
    fails the signup.

    Raises:
        ValueError: If the username or email is taken, or the password is too weak.
    """
    validate_password_strength(body.password)

    if await storage.get_user_by_username(body.username) is not None:
        msg = "Username already taken"
        raise ValueError(msg)

    if body.email and await storage.get_user_by_email(body.email) is not None:
        msg = "Email already registered"
        raise ValueError(msg)

    profile = body.model_dump(exclude={"username", "password"}, exclude_none=True)
    user = await storage.create_user(
        username=body.username,
        password_hash=hash_password(body.password),
        **profile,
    )
    progress = await storage.update_progress(user.id)
    await storage.commit()
    logger.info("user_created", user_id=user.id, username=user.username)

    if recommender is not None:
        ai_profile = await recommender.generate_learning_profile(user, progress, [])
        try:
            updated = await storage.update_user(user.id, ai_learning_profile=ai_profile.model_dump(mode="json"))
            await storage.commit()
        except StorageUnavailable:
            logger.warning("ai_profile_store_failed", user_id=user.id)
            await storage.rollback()
        else:
            if updated is not None:
                user = updated

    return user


async def authenticate(storage: Storage, username: str, password: str) -> User | None:
    """
    Check credentials. Returns the user, or None on unknown user / wrong password.

    Upgrades the stored hash when the argon2 parameters have changed.
    """
    user = await storage.get_user_by_username(username)
    if user is None or not verify_password(password, user.password_hash):
        return None

    if check_needs_rehash(user.password_hash):
        rehashed = await storage.update_user(user.id, password_hash=hash_password(password))
        await storage.commit()
        if rehashed is not None:
            user = rehashed

    logger.info("user_logged_in", user_id=user.id)
    return user
