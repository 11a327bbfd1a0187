"""
User service functions for API endpoints.

Registration, credential checks, profile edits and the admin user views.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    UnauthorizedError,
)
from core.security import hash_password, verify_password
from database.models.applications import Application
from database.models.companies import Company
from database.models.jobs import Job, JobStatus
from database.models.payments import ManualPayment, PaymentStatus
from database.models.users import User, UserRole
from api.schemas.users import ProfileUpdate, RegisterRequest
from api.services.transitions import flush_unique

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "Email is already registered"
INVALID_CREDENTIALS = "Invalid email or password"
DISABLED_ACCOUNT = "Account is disabled"
SELF_DISABLE = "You cannot disable your own account"
ADMIN_DISABLE = "Admin accounts cannot be disabled"


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def find_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def register_user(session: AsyncSession, data: RegisterRequest) -> User:
    """
    Create an account.

    Raises:
        ConflictError: email already registered
    """
    email = normalize_email(data.email)
    if await find_user_by_email(session, email) is not None:
        raise ConflictError(DUPLICATE_EMAIL)

    user = User(
        email=email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
        phone=data.phone,
        address=data.address,
        is_enabled=True,
    )
    session.add(user)
    await flush_unique(session, DUPLICATE_EMAIL)
    await session.commit()
    await session.refresh(user)

    logger.info(f"User {user.id} registered as {user.role.value}")
    return user


async def authenticate_user(session: AsyncSession, email: str, password: str) -> User:
    """
    Check credentials.

    Raises:
        UnauthorizedError: unknown email, wrong password or disabled account
    """
    user = await find_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not user.is_enabled:
        logger.warning(f"Login attempt for disabled user {user.id}")
        raise UnauthorizedError(DISABLED_ACCOUNT)
    return user


async def update_profile(session: AsyncSession, user: User, data: ProfileUpdate) -> User:
    """Apply the supplied profile fields; omitted fields stay unchanged."""
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    await session.commit()
    await session.refresh(user)
    return user


async def set_resume(session: AsyncSession, user: User, resume_path: str) -> User:
    user.resume_path = resume_path
    await session.commit()
    await session.refresh(user)
    logger.info(f"Resume updated for user {user.id}")
    return user


async def ensure_admin(
    session: AsyncSession,
    email: Optional[str],
    password: Optional[str],
    first_name: str = "Admin",
    last_name: str = "User",
) -> Optional[User]:
    """
    Provision the platform admin if no account holds ``email``.

    Safe to call on every startup. An existing account is returned untouched,
    whatever its role. Returns None when no credentials are configured.
    """
    if not email or not password:
        logger.info("No admin credentials configured; skipping admin provisioning")
        return None

    email = normalize_email(email)
    existing = await find_user_by_email(session, email)
    if existing is not None:
        if existing.role != UserRole.ADMIN:
            logger.warning(f"Admin e-mail belongs to {existing.role.value} user {existing.id}")
        return existing

    admin = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=UserRole.ADMIN,
        is_enabled=True,
    )
    session.add(admin)
    try:
        await flush_unique(session, DUPLICATE_EMAIL)
    except ConflictError:
        # another process provisioned it first
        return await find_user_by_email(session, email)
    await session.commit()
    await session.refresh(admin)

    logger.info(f"Provisioned admin user {admin.id}")
    return admin


# ===== Administration =====


async def list_users_by_role(session: AsyncSession, role: UserRole) -> List[User]:
    result = await session.execute(
        select(User).where(User.role == role).order_by(User.id.asc())
    )
    return list(result.scalars().all())


async def set_user_enabled(
    session: AsyncSession, admin: User, user_id: int, enabled: bool
) -> User:
    """
    Enable or disable an account. Disabled users cannot authenticate.

    Raises:
        NotFoundError: unknown user
        PreconditionFailedError: admin tried to disable their own account
        UnauthorizedError: target is another admin
    """
    user = await get_user(session, user_id)
    if not enabled:
        if user.id == admin.id:
            raise PreconditionFailedError(SELF_DISABLE)
        if user.role == UserRole.ADMIN:
            raise UnauthorizedError(ADMIN_DISABLE)
    user.is_enabled = enabled
    await session.commit()
    await session.refresh(user)
    logger.info(f"User {user_id} {'enabled' if enabled else 'disabled'}")
    return user


async def _count(session: AsyncSession, model: Any, *criteria: Any) -> int:
    query = select(func.count()).select_from(model)
    if criteria:
        query = query.where(*criteria)
    return await session.scalar(query) or 0


async def get_platform_stats(session: AsyncSession) -> Dict[str, Any]:
    """Counters for the admin dashboard."""
    return {
        "total_users": await _count(session, User),
        "employers": await _count(session, User, User.role == UserRole.EMPLOYER),
        "job_seekers": await _count(session, User, User.role == UserRole.JOB_SEEKER),
        "companies": await _count(session, Company),
        "verified_companies": await _count(
            session, Company, Company.payment_verified.is_(True)
        ),
        "total_jobs": await _count(session, Job),
        "active_jobs": await _count(session, Job, Job.status == JobStatus.ACTIVE),
        "pending_jobs": await _count(
            session, Job, Job.status == JobStatus.PENDING_APPROVAL
        ),
        "total_applications": await _count(session, Application),
        "pending_payments": await _count(
            session, ManualPayment, ManualPayment.status == PaymentStatus.PENDING_REVIEW
        ),
        "generated_at": datetime.now(timezone.utc),
    }
