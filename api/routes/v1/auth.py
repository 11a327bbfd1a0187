"""
Authentication endpoints.

Provides:
- Email/password registration (employer or job seeker)
- Login
- Token refresh
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import jwt

from database.engine import get_db
from database.models.users import User
from core.exceptions import UnauthorizedError
from core.security import create_token_pair, verify_jwt_token
from api.schemas.users import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)
from api.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


def auth_response(user: User) -> AuthResponse:
    tokens = create_token_pair(user.id, user.email, user.role.value)
    return AuthResponse(**tokens, user=UserResponse.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create an account and return tokens for it."""
    user = await user_service.register_user(db, data)
    return auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange credentials for a token pair."""
    try:
        user = await user_service.authenticate_user(db, data.email, data.password)
    except UnauthorizedError as e:
        if e.message == user_service.DISABLED_ACCOUNT:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info(f"User {user.id} logged in")
    return auth_response(user)


@router.post("/refresh", response_model=AuthResponse)
async def refresh(
    data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Issue a new token pair from a refresh token."""
    try:
        payload = verify_jwt_token(data.refresh_token, expected_type="refresh")
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    user = await db.get(User, payload.get("user_id"))
    if user is None or not user.is_enabled:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )
    return auth_response(user)
