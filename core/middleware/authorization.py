"""
Role and ownership checks.

Authentication happens at the API boundary; by the time a workflow service
runs it receives an already resolved ``User``. These helpers are the only
authorization rules the services apply: the caller's role, and ownership of
the company a job belongs to.
"""

import logging

from core.exceptions import UnauthorizedError
from database.models.users import User, UserRole

logger = logging.getLogger(__name__)


ROLE_LABELS = {
    UserRole.ADMIN: "Admin",
    UserRole.EMPLOYER: "Employer",
    UserRole.JOB_SEEKER: "Job seeker",
}


def has_role(user: User, *roles: UserRole) -> bool:
    """Check whether the user holds one of the given roles."""
    return user is not None and user.role in roles


def ensure_role(user: User, *roles: UserRole) -> None:
    """
    Raise ``UnauthorizedError`` unless the user holds one of ``roles``.

    Args:
        user: Authenticated caller
        roles: Accepted roles
    """
    if has_role(user, *roles):
        return
    labels = " or ".join(ROLE_LABELS[role] for role in roles)
    logger.warning(
        f"Role check failed: user={getattr(user, 'id', None)} "
        f"role={getattr(user, 'role', None)} required={[r.value for r in roles]}"
    )
    raise UnauthorizedError(f"{labels} access required")


def ensure_owner(user: User, owner_id: int, resource: str = "resource") -> None:
    """Raise ``UnauthorizedError`` unless ``user`` is the owner."""
    if user is None or user.id != owner_id:
        logger.warning(
            f"Ownership check failed: user={getattr(user, 'id', None)} "
            f"owner={owner_id} resource={resource}"
        )
        raise UnauthorizedError(f"You do not own this {resource}")
