"""FastAPI current-user dependencies.

The resolved user id is handed explicitly to every service call.
"""

from __future__ import annotations

import jwt
from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from magilearn.auth.jwt import verify_token
from magilearn.config import get_settings

_optional_bearer = HTTPBearer(auto_error=False)
_bearer = HTTPBearer()


def _user_id_from_token(token: str) -> str:
    try:
        payload = verify_token(token, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    return str(payload["sub"])


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Security(_optional_bearer),
) -> str:
    """
    Resolve the current learner.

    A valid bearer token wins. Without a token, guest mode answers with the
    placeholder learner; otherwise 401. An invalid token is always 401.
    """
    if credentials is not None:
        return _user_id_from_token(credentials.credentials)

    settings = get_settings()
    if settings.allow_guest:
        return settings.default_user_id
    raise HTTPException(status_code=401, detail="Authentication required")


async def get_authenticated_user_id(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
) -> str:
    """Like get_current_user_id but never falls back to the guest learner."""
    return _user_id_from_token(credentials.credentials)
