"""
Job workflow.

Postings are created by employers whose company payment is verified, then
moderated by an admin:

    pending_approval -> active    (approve_job)
    pending_approval -> rejected  (reject_job)
    active           -> closed    (close_job, owner only)

Only active jobs are visible in search and accept applications.
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import (
    AlreadyProcessedError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
    is_blank,
)
from core.middleware.authorization import ensure_owner, ensure_role
from database.models.companies import Company
from database.models.jobs import Job, JobStatus
from database.models.notifications import NotificationCategory
from database.models.users import User, UserRole
from api.schemas.common import PaginatedResponse, PaginationParams
from api.schemas.jobs import JobCreate, JobResponse, JobSearchFilters, JobUpdate
from api.services.companies import get_company_by_employer
from api.services.notifications import Notifier
from api.services.transitions import compare_and_set

logger = logging.getLogger(__name__)

JOB_FIELDS = (
    "title",
    "description",
    "category",
    "location",
    "employment_type",
    "salary_min",
    "salary_max",
    "requirements",
    "responsibilities",
)

EDITABLE_STATUSES = (JobStatus.PENDING_APPROVAL, JobStatus.ACTIVE)


def job_link(job_id: int) -> str:
    return f"/jobs/{job_id}"


async def get_job(session: AsyncSession, job_id: int) -> Job:
    job = await session.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job", job_id)
    return job


async def get_job_owner_id(session: AsyncSession, job: Job) -> int:
    """Employer id of the company that owns ``job``."""
    employer_id = await session.scalar(
        select(Company.employer_id).where(Company.id == job.company_id)
    )
    if employer_id is None:
        raise NotFoundError("Company", job.company_id)
    return employer_id


async def create_job(
    session: AsyncSession,
    employer: User,
    data: JobCreate,
    payment_proof_path: Optional[str] = None,
) -> Job:
    """
    Create a posting in ``pending_approval``.

    No notification is sent; admins find new postings in the pending list.

    Raises:
        NotFoundError: the employer has no company
        PreconditionFailedError: the company's payment is not verified
    """
    ensure_role(employer, UserRole.EMPLOYER)
    company = await get_company_by_employer(session, employer)
    if not company.payment_verified:
        raise PreconditionFailedError(
            "Company payment must be verified before posting jobs"
        )

    job = Job(
        company_id=company.id,
        status=JobStatus.PENDING_APPROVAL,
        payment_proof_path=payment_proof_path,
        **{field: getattr(data, field) for field in JOB_FIELDS},
    )
    session.add(job)
    await session.commit()

    logger.info(f"Job {job.id} created by company {company.id}")
    return job


async def approve_job(
    session: AsyncSession,
    job_id: int,
    admin: User,
    notifier: Optional[Notifier] = None,
) -> Job:
    """Publish a pending job and tell its employer."""
    ensure_role(admin, UserRole.ADMIN)
    job = await get_job(session, job_id)
    if job.status != JobStatus.PENDING_APPROVAL:
        raise AlreadyProcessedError("Job", job.status)

    notifier = notifier or Notifier(session)
    admin_id = admin.id
    employer_id = await get_job_owner_id(session, job)

    await compare_and_set(
        session,
        Job,
        "Job",
        job_id,
        JobStatus.PENDING_APPROVAL,
        status=JobStatus.ACTIVE,
        approved_by_id=admin_id,
        published_at=datetime.now(timezone.utc),
    )
    notifier.notify(
        employer_id,
        "Job Approved",
        f"Your job posting '{job.title}' has been approved and is now live.",
        NotificationCategory.JOB_APPROVED,
        job_link(job_id),
    )

    await session.commit()
    await session.refresh(job)
    await notifier.deliver()

    logger.info(f"Job {job_id} approved by admin {admin_id}")
    return job


async def reject_job(
    session: AsyncSession,
    job_id: int,
    admin: User,
    reason: Optional[str],
    notifier: Optional[Notifier] = None,
) -> Job:
    """Reject a pending job with a reason shown to the employer."""
    ensure_role(admin, UserRole.ADMIN)
    job = await get_job(session, job_id)
    if job.status != JobStatus.PENDING_APPROVAL:
        raise AlreadyProcessedError("Job", job.status)
    if is_blank(reason):
        raise ValidationError("Rejection reason is required", field="reason")

    notifier = notifier or Notifier(session)
    admin_id = admin.id
    reason = reason.strip()
    employer_id = await get_job_owner_id(session, job)

    await compare_and_set(
        session,
        Job,
        "Job",
        job_id,
        JobStatus.PENDING_APPROVAL,
        status=JobStatus.REJECTED,
        approved_by_id=admin_id,
        rejection_reason=reason,
    )
    notifier.notify(
        employer_id,
        "Job Rejected",
        f"Your job posting '{job.title}' has been rejected. Reason: {reason}",
        NotificationCategory.JOB_REJECTED,
        job_link(job_id),
    )

    await session.commit()
    await session.refresh(job)
    await notifier.deliver()

    logger.info(f"Job {job_id} rejected by admin {admin_id}")
    return job


async def close_job(session: AsyncSession, job_id: int, employer: User) -> Job:
    """
    Close an active job. Owner only.

    Raises:
        UnauthorizedError: caller does not own the job's company
        PreconditionFailedError: the job is not active
    """
    job = await get_job(session, job_id)
    ensure_owner(employer, await get_job_owner_id(session, job), "job")
    if job.status != JobStatus.ACTIVE:
        raise PreconditionFailedError(
            f"Only active jobs can be closed. Current status: {job.status.value}"
        )

    try:
        await compare_and_set(
            session, Job, "Job", job_id, JobStatus.ACTIVE, status=JobStatus.CLOSED
        )
    except AlreadyProcessedError as e:
        current = getattr(e.current_status, "value", e.current_status)
        raise PreconditionFailedError(
            f"Only active jobs can be closed. Current status: {current}"
        ) from e

    await session.commit()
    await session.refresh(job)

    logger.info(f"Job {job_id} closed by employer {employer.id}")
    return job


async def update_job(
    session: AsyncSession,
    job_id: int,
    employer: User,
    data: JobUpdate,
) -> Job:
    """Replace the posting fields of a pending or active job. Status is unchanged."""
    job = await get_job(session, job_id)
    ensure_owner(employer, await get_job_owner_id(session, job), "job")
    if job.status not in EDITABLE_STATUSES:
        raise PreconditionFailedError(
            f"Job can no longer be edited. Current status: {job.status.value}"
        )

    for field in JOB_FIELDS:
        setattr(job, field, getattr(data, field))

    await session.commit()
    logger.info(f"Job {job_id} updated")
    return job


def _to_response(job: Job, company_name: Optional[str]) -> JobResponse:
    response = JobResponse.model_validate(job)
    response.company_name = company_name
    return response


async def search_jobs(
    session: AsyncSession,
    filters: JobSearchFilters,
    pagination: PaginationParams,
) -> PaginatedResponse[JobResponse]:
    """
    Search active jobs.

    Filters combine with AND; absent or blank filters do not constrain.
    Results are ordered newest published first.
    """
    query = (
        select(Job, Company.name)
        .join(Company, Company.id == Job.company_id)
        .where(Job.status == JobStatus.ACTIVE)
    )

    if filters.keyword:
        pattern = f"%{filters.keyword.lower()}%"
        query = query.where(
            or_(
                func.lower(Job.title).like(pattern),
                func.lower(func.coalesce(Job.description, "")).like(pattern),
            )
        )
    if filters.category:
        query = query.where(func.lower(Job.category) == filters.category.lower())
    if filters.location:
        query = query.where(func.lower(Job.location).like(f"%{filters.location.lower()}%"))
    if filters.min_salary is not None:
        query = query.where(Job.salary_min >= filters.min_salary)
    if filters.max_salary is not None:
        query = query.where(Job.salary_max <= filters.max_salary)

    total = await session.scalar(select(func.count()).select_from(query.subquery())) or 0

    result = await session.execute(
        query.order_by(Job.published_at.desc(), Job.id.desc())
        .limit(pagination.page_size)
        .offset(pagination.offset)
    )
    items = [_to_response(job, company_name) for job, company_name in result.all()]
    return PaginatedResponse[JobResponse].create(items, total, pagination)


async def get_job_detail(session: AsyncSession, job_id: int) -> JobResponse:
    """Job with its company name resolved."""
    result = await session.execute(
        select(Job, Company.name)
        .join(Company, Company.id == Job.company_id)
        .where(Job.id == job_id)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("Job", job_id)
    return _to_response(*row)


async def list_jobs_by_company(session: AsyncSession, employer: User) -> List[Job]:
    """All postings of the caller's company, newest first."""
    company = await get_company_by_employer(session, employer)
    result = await session.execute(
        select(Job)
        .where(Job.company_id == company.id)
        .order_by(Job.created_at.desc(), Job.id.desc())
    )
    return list(result.scalars().all())


async def list_pending_jobs(session: AsyncSession) -> List[JobResponse]:
    """Moderation queue, oldest first, with company names."""
    result = await session.execute(
        select(Job, Company.name)
        .join(Company, Company.id == Job.company_id)
        .where(Job.status == JobStatus.PENDING_APPROVAL)
        .order_by(Job.created_at.asc(), Job.id.asc())
    )
    return [_to_response(job, name) for job, name in result.all()]
