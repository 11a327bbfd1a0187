"""
Manual Payments Module

Proof-of-payment documents uploaded by employers and reviewed by an admin.
A review is one-shot: once verified or rejected the record never changes
status again. Employers may resubmit; the newest upload is their current
status.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    ForeignKey,
    BigInteger,
    DateTime,
    Text,
    Enum as SQLEnum,
    Index,
)
from database.engine import Base, BigIntPK
from datetime import datetime, timezone
from enum import Enum as PyEnum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentStatus(str, PyEnum):
    """Review status of a payment proof."""

    PENDING_REVIEW = "pending_review"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ManualPayment(Base):
    """
    One proof-of-payment submission.
    """

    __tablename__: str = "manual_payments"
    id: Mapped[int] = mapped_column(
        BigIntPK, primary_key=True, nullable=False, autoincrement=True
    )
    employer_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=False, index=True
    )
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    reference_number: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, native_enum=False, length=50),
        nullable=False,
        default=PaymentStatus.PENDING_REVIEW,
        index=True,
    )
    admin_notes: Mapped[str | None] = mapped_column(Text)
    verified_by_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=True
    )

    # Timestamps (set client side so ordering by upload time is exact)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_manual_payments_employer_uploaded", "employer_id", "uploaded_at"),
    )

    def __repr__(self) -> str:
        return f"<ManualPayment id={self.id} employer={self.employer_id} status={self.status}>"
