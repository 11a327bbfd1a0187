"""
Application workflow.

Job seekers apply once per active job; the owning employer moves
applications between statuses freely and each change is pushed to the
applicant.
"""

from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    UnauthorizedError,
    ValidationError,
    is_blank,
)
from core.middleware.authorization import ensure_owner, ensure_role, has_role
from database.models.applications import Application, ApplicationStatus
from database.models.jobs import JobStatus
from database.models.notifications import NotificationCategory
from database.models.users import User, UserRole
from api.services.jobs import get_job, get_job_owner_id
from api.services.notifications import Notifier
from api.services.transitions import flush_unique

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "You have already applied to this job"

STATUS_PHRASES = {
    ApplicationStatus.SHORTLISTED: "Shortlisted",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.HIRED: "Hired",
}


def status_phrase(status: ApplicationStatus) -> str:
    """Human readable phrase used in applicant notifications."""
    return STATUS_PHRASES.get(status, "Updated")


def application_link(application_id: int) -> str:
    return f"/applications/{application_id}"


async def has_applied(session: AsyncSession, job_id: int, applicant_id: int) -> bool:
    result = await session.execute(
        select(Application.id).where(
            Application.job_id == job_id,
            Application.applicant_id == applicant_id,
        )
    )
    return result.first() is not None


async def apply_to_job(
    session: AsyncSession,
    job_seeker: User,
    job_id: int,
    resume_path: Optional[str] = None,
    cover_letter: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> Application:
    """
    Submit an application to an active job.

    The uploaded resume wins; otherwise the profile resume is used.

    Raises:
        NotFoundError: unknown job
        PreconditionFailedError: job is not active
        ValidationError: no resume available
        ConflictError: the seeker already applied to this job
    """
    ensure_role(job_seeker, UserRole.JOB_SEEKER)
    job = await get_job(session, job_id)
    if job.status != JobStatus.ACTIVE:
        raise PreconditionFailedError("Cannot apply to a job that is not approved")

    resume = resume_path if not is_blank(resume_path) else job_seeker.resume_path
    if is_blank(resume):
        raise ValidationError(
            "A resume is required. Upload one or add it to your profile.", field="resume"
        )

    applicant_id = job_seeker.id
    applicant_name = job_seeker.full_name
    job_title = job.title
    employer_id = await get_job_owner_id(session, job)

    if await has_applied(session, job_id, applicant_id):
        raise ConflictError(DUPLICATE_MESSAGE)

    notifier = notifier or Notifier(session)
    application = Application(
        job_id=job_id,
        applicant_id=applicant_id,
        resume_path=resume,
        cover_letter=None if is_blank(cover_letter) else cover_letter.strip(),
        status=ApplicationStatus.SUBMITTED,
    )
    session.add(application)
    await flush_unique(session, DUPLICATE_MESSAGE)

    notifier.notify(
        employer_id,
        "New Application",
        f"{applicant_name} applied to '{job_title}'",
        NotificationCategory.NEW_APPLICATION,
        application_link(application.id),
    )
    await session.commit()
    await notifier.deliver()

    logger.info(f"Application {application.id} submitted to job {job_id} by user {applicant_id}")
    return application


async def list_applications_by_applicant(session: AsyncSession, user: User) -> List[Application]:
    result = await session.execute(
        select(Application)
        .where(Application.applicant_id == user.id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
    )
    return list(result.scalars().all())


async def list_applications_by_job(
    session: AsyncSession,
    job_id: int,
    employer: User,
) -> List[Application]:
    """Applications received for one of the caller's jobs."""
    job = await get_job(session, job_id)
    ensure_owner(employer, await get_job_owner_id(session, job), "job")
    result = await session.execute(
        select(Application)
        .where(Application.job_id == job_id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
    )
    return list(result.scalars().all())


async def _load_application(session: AsyncSession, application_id: int) -> Application:
    application = await session.get(Application, application_id)
    if application is None:
        raise NotFoundError("Application", application_id)
    return application


async def get_application(session: AsyncSession, application_id: int, user: User) -> Application:
    """
    Visible to the applicant, the employer owning the job, and admins.
    """
    application = await _load_application(session, application_id)
    if has_role(user, UserRole.ADMIN) or application.applicant_id == user.id:
        return application

    job = await get_job(session, application.job_id)
    if await get_job_owner_id(session, job) != user.id:
        raise UnauthorizedError("You do not have access to this application")
    return application


async def update_application_status(
    session: AsyncSession,
    application_id: int,
    employer: User,
    status: Optional[ApplicationStatus],
    notes: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> Application:
    """
    Set a new status and notes. Any status may replace any other.

    Raises:
        NotFoundError: unknown application
        UnauthorizedError: caller does not own the job
        ValidationError: status missing
    """
    application = await _load_application(session, application_id)
    job = await get_job(session, application.job_id)
    ensure_owner(employer, await get_job_owner_id(session, job), "job")
    if status is None:
        raise ValidationError("Application status is required", field="status")
    status = ApplicationStatus(status)

    notifier = notifier or Notifier(session)
    application.status = status
    application.employer_notes = notes

    phrase = status_phrase(status)
    notifier.notify(
        application.applicant_id,
        f"Application {phrase}",
        f"Your application for '{job.title}' has been {phrase.lower()}.",
        NotificationCategory.APPLICATION_STATUS_UPDATED,
        application_link(application_id),
    )
    await session.commit()
    await notifier.deliver()

    logger.info(f"Application {application_id} set to {status.value} by employer {employer.id}")
    return application
