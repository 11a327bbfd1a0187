"""
Applications Module

A job seeker's submission against one job. At most one application exists
per (job, applicant) pair; the unique constraint is what guarantees it under
concurrent submissions.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    ForeignKey,
    BigInteger,
    DateTime,
    Text,
    Enum as SQLEnum,
    UniqueConstraint,
)
from database.engine import Base, BigIntPK
from database.models.payments import utcnow
from datetime import datetime
from enum import Enum as PyEnum


class ApplicationStatus(str, PyEnum):
    """Employer-assigned application status."""

    SUBMITTED = "submitted"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    HIRED = "hired"


class Application(Base):
    """
    Job application.
    """

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(
        BigIntPK, primary_key=True, nullable=False, autoincrement=True
    )
    job_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("jobs.id"), nullable=False, index=True
    )
    applicant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=False, index=True
    )

    resume_path: Mapped[str] = mapped_column(String(500), nullable=False)
    cover_letter: Mapped[str | None] = mapped_column(Text)

    status: Mapped[ApplicationStatus] = mapped_column(
        SQLEnum(ApplicationStatus, native_enum=False, length=50),
        nullable=False,
        default=ApplicationStatus.SUBMITTED,
    )
    employer_notes: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
    )

    def __repr__(self) -> str:
        return f"<Application id={self.id} job={self.job_id} applicant={self.applicant_id} status={self.status}>"
