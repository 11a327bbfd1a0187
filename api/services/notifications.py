"""
Notification service.

The ``Notifier`` is bound to the session of the workflow operation that
produces the notifications: rows are added to that unit of work and commit
(or roll back) together with the transition. E-mail copies are queued and
only sent by ``deliver()`` after the caller has committed; delivery problems
are logged and never reach the caller.

The inbox functions below serve the recipient's side: listing, unread count
and read flags.
"""

from typing import List, Optional, Tuple
import logging

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.exceptions import NotFoundError
from core.integrations.email import EmailService, get_email_service, notification_email_body
from core.middleware.authorization import ensure_owner
from database.models.notifications import Notification, NotificationCategory
from database.models.users import User, UserRole
from api.schemas.common import PaginatedResponse, PaginationParams
from api.schemas.users import NotificationResponse

logger = logging.getLogger(__name__)


class Notifier:
    """Collects notifications for one unit of work."""

    def __init__(self, session: AsyncSession, email_service: Optional[EmailService] = None):
        self.session = session
        self.email_service = email_service
        self._outbox: List[Tuple[int, str, str, Optional[str]]] = []

    def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        category: NotificationCategory | str,
        link: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        Add one unread notification for ``user_id`` to the current session.

        Returns:
            The pending ``Notification`` or None if it could not be built
        """
        try:
            notification = Notification(
                user_id=user_id,
                title=title,
                message=message,
                category=getattr(category, "value", category),
                link=link,
                is_read=False,
            )
            self.session.add(notification)
        except Exception as e:
            logger.warning(f"Could not queue notification for user {user_id}: {e}")
            return None

        self._outbox.append((user_id, title, message, link))
        return notification

    async def broadcast(
        self,
        role: UserRole,
        title: str,
        message: str,
        category: NotificationCategory | str,
        link: Optional[str] = None,
    ) -> int:
        """Notify every enabled user holding ``role``. Returns recipient count."""
        result = await self.session.execute(
            select(User.id).where(User.role == role, User.is_enabled.is_(True))
        )
        user_ids = result.scalars().all()
        for user_id in user_ids:
            self.notify(user_id, title, message, category, link)
        return len(user_ids)

    @property
    def pending(self) -> int:
        return len(self._outbox)

    async def deliver(self) -> None:
        """Send queued e-mail copies. Call only after the transition committed."""
        outbox, self._outbox = self._outbox, []
        if not outbox:
            return

        email_service = self.email_service
        if email_service is None:
            if not settings.email_notifications_enabled:
                return
            email_service = get_email_service()

        try:
            result = await self.session.execute(
                select(User).where(User.id.in_({item[0] for item in outbox}))
            )
            recipients = {user.id: user for user in result.scalars().all()}
        except Exception as e:
            logger.warning(f"Skipping e-mail delivery, recipient lookup failed: {e}")
            return

        for user_id, title, message, link in outbox:
            user = recipients.get(user_id)
            if user is None or not user.email:
                continue
            body = notification_email_body(user.first_name, title, message, link)
            try:
                sent = await run_in_threadpool(
                    email_service.send_email, user.email, title, body
                )
            except Exception as e:
                logger.warning(f"E-mail delivery to user {user_id} raised: {e}")
                continue
            if not sent:
                logger.warning(f"E-mail delivery to user {user_id} failed: {title}")


# ===== Inbox =====


async def list_notifications(
    session: AsyncSession,
    user: User,
    pagination: PaginationParams,
) -> PaginatedResponse[NotificationResponse]:
    """Newest-first page of the user's notifications."""
    query = select(Notification).where(Notification.user_id == user.id)

    total = await session.scalar(select(func.count()).select_from(query.subquery())) or 0

    result = await session.execute(
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(pagination.page_size)
        .offset(pagination.offset)
    )
    items = [NotificationResponse.model_validate(n) for n in result.scalars().all()]
    return PaginatedResponse[NotificationResponse].create(items, total, pagination)


async def count_unread(session: AsyncSession, user: User) -> int:
    total = await session.scalar(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user.id, Notification.is_read.is_(False))
    )
    return total or 0


async def mark_as_read(session: AsyncSession, notification_id: int, user: User) -> Notification:
    """Mark one of the caller's notifications as read."""
    notification = await session.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification", notification_id)
    ensure_owner(user, notification.user_id, "notification")

    notification.is_read = True
    await session.commit()
    return notification


async def mark_all_as_read(session: AsyncSession, user: User) -> int:
    """Mark every unread notification of the caller as read. Returns count."""
    result = await session.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    logger.info(f"Marked {result.rowcount} notifications read for user {user.id}")
    return result.rowcount
