"""FastAPI dependencies for dependency injection."""

from typing import Callable, Optional
from fastapi import Depends, HTTPException, Query, UploadFile, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
import jwt
import logging

from database.engine import get_db
from database.models.users import User, UserRole
from core.middleware.authorization import ensure_role
from core.security import verify_jwt_token
from core.storage.local import LocalStorage, get_storage
from api.schemas.common import PaginationParams

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the caller from the bearer access token.

    The user is reloaded on every request so a disabled account is rejected
    even while its tokens are still valid.
    """
    if credentials is None:
        raise _unauthenticated("Authentication required")

    try:
        payload = verify_jwt_token(credentials.credentials, expected_type="access")
    except jwt.ExpiredSignatureError:
        raise _unauthenticated("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise _unauthenticated("Invalid authentication token")

    user = await db.get(User, payload.get("user_id"))
    if user is None:
        raise _unauthenticated("User no longer exists")
    if not user.is_enabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    return user


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: the caller must hold one of ``roles``."""

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        ensure_role(current_user, *roles)
        return current_user

    return dependency


require_admin_user = require_roles(UserRole.ADMIN)
require_employer = require_roles(UserRole.EMPLOYER)
require_job_seeker = require_roles(UserRole.JOB_SEEKER)


def get_pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    """Pagination query parameters."""
    return PaginationParams(page=page, page_size=page_size)


def get_file_storage() -> LocalStorage:
    """Storage gateway for uploaded documents."""
    return get_storage()


async def store_upload(storage: LocalStorage, upload: UploadFile, category: str) -> str:
    """Validate and persist an uploaded file. Returns its storage reference."""
    data = await upload.read()
    return storage.store(
        data,
        category,
        filename=upload.filename,
        content_type=upload.content_type,
    )
