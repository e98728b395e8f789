"""Survey submission: validate a learning profile and merge it into the user."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from magilearn.errors import UserNotFound, ValidationFailed
from magilearn.storage.base import Storage
from magilearn.storage.entities import User
from magilearn.users.schemas import SurveyRequest

logger = structlog.get_logger()


def validate_survey(payload: dict[str, Any]) -> SurveyRequest:
    """
    Validate a raw survey payload.

    Raises:
        ValidationFailed: with one ``{field, message}`` entry per problem.
    """
    try:
        return SurveyRequest.model_validate(payload)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]) or "body", "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationFailed("Invalid survey data", errors=errors) from e


class SurveyService:
    """Stores the learner's self-reported profile."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    async def submit(self, user_id: str, payload: dict[str, Any]) -> User:
        """
        Validate and store a survey for ``user_id``.

        Nothing is written when validation fails.

        Raises:
            ValidationFailed: if a field is missing or out of range.
            UserNotFound: if the user does not exist.
        """
        survey = validate_survey(payload)
        fields = survey.model_dump()
        fields["accessibility_needs"] = survey.accessibility_needs or []

        user = await self.storage.update_user(user_id, **fields)
        if user is None:
            await self.storage.rollback()
            raise UserNotFound
        await self.storage.commit()

        logger.info(
            "survey_submitted",
            user_id=user_id,
            learning_style=survey.learning_style,
            subjects=len(survey.subjects),
        )
        return user
