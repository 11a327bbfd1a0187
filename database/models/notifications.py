"""
Notifications Module

In-app messages produced as side effects of workflow transitions. Users
never create them directly; they can only read them and mark them read.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Boolean,
    ForeignKey,
    BigInteger,
    DateTime,
    Text,
    Index,
)
from database.engine import Base, BigIntPK
from database.models.payments import utcnow
from datetime import datetime
from enum import Enum as PyEnum


class NotificationCategory(str, PyEnum):
    """Category tag for notifications."""

    NEW_PAYMENT = "NEW_PAYMENT"
    PAYMENT_VERIFIED = "PAYMENT_VERIFIED"
    PAYMENT_REJECTED = "PAYMENT_REJECTED"
    JOB_APPROVED = "JOB_APPROVED"
    JOB_REJECTED = "JOB_REJECTED"
    NEW_APPLICATION = "NEW_APPLICATION"
    APPLICATION_STATUS_UPDATED = "APPLICATION_STATUS_UPDATED"


class Notification(Base):
    """
    In-app notification addressed to one user.
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(
        BigIntPK, primary_key=True, nullable=False, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    link: Mapped[str | None] = mapped_column(String(500))
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        Index("idx_notifications_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification id={self.id} user={self.user_id} category={self.category}>"
