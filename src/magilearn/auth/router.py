"""Authentication router — all /api/auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException

from magilearn.ai.service import RecommendationService
from magilearn.auth.dependencies import get_authenticated_user_id
from magilearn.auth.jwt import create_access_token
from magilearn.auth.password import PasswordStrengthError
from magilearn.auth.schemas import (
    LoginRequest,
    MessageResponse,
    SignupRequest,
    TokenResponse,
)
from magilearn.auth.service import authenticate, signup
from magilearn.config import get_settings
from magilearn.dependencies import get_recommendation_service, get_storage
from magilearn.errors import UserNotFound
from magilearn.storage.base import Storage
from magilearn.storage.entities import User
from magilearn.users.schemas import UserResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _token_response(user: User) -> TokenResponse:
    """Issue an access token for a user."""
    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(user.id, user.username),
        token_type="bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/signup", response_model=TokenResponse)
async def signup_user(
    body: SignupRequest,
    storage: Storage = Depends(get_storage),
    recommender: RecommendationService = Depends(get_recommendation_service),
) -> TokenResponse:
    """Create an account with an empty progress record."""
    try:
        user = await signup(storage, body, recommender)
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    storage: Storage = Depends(get_storage),
) -> TokenResponse:
    """Login with username + password."""
    user = await authenticate(storage, body.username, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _token_response(user)


@router.post("/logout", response_model=MessageResponse)
async def logout() -> MessageResponse:
    """Tokens are stateless; the client drops its copy."""
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(
    user_id: str = Depends(get_authenticated_user_id),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    """Profile of the token's owner."""
    user = await storage.get_user(user_id)
    if user is None:
        raise UserNotFound
    return UserResponse.model_validate(user)
