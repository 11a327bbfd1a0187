"""
Company registry.

One company per employer, enforced by a service check and by the unique
constraint on ``companies.employer_id``. ``payment_verified`` is never part
of employer input; the payment workflow sets it through
``set_payment_verified`` inside its own unit of work.
"""

from typing import Optional
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError, NotFoundError
from core.middleware.authorization import ensure_role
from database.models.companies import Company
from database.models.users import User, UserRole
from api.schemas.companies import CompanyRequest
from api.services.transitions import flush_unique

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "industry", "website", "address", "phone")


async def find_company_by_employer(session: AsyncSession, employer_id: int) -> Optional[Company]:
    result = await session.execute(
        select(Company).where(Company.employer_id == employer_id)
    )
    return result.scalar_one_or_none()


async def register_company(
    session: AsyncSession,
    employer: User,
    data: CompanyRequest,
) -> Company:
    """
    Create the caller's company profile.

    Raises:
        UnauthorizedError: caller is not an employer
        ConflictError: the employer already has a company
    """
    ensure_role(employer, UserRole.EMPLOYER)
    employer_id = employer.id

    if await find_company_by_employer(session, employer_id) is not None:
        raise ConflictError("Company already exists for this employer")

    company = Company(
        employer_id=employer_id,
        payment_verified=False,
        **{field: getattr(data, field) for field in EDITABLE_FIELDS},
    )
    session.add(company)
    await flush_unique(session, "Company already exists for this employer")
    await session.commit()

    logger.info(f"Company {company.id} registered by employer {employer_id}")
    return company


async def get_company_by_employer(session: AsyncSession, employer: User) -> Company:
    company = await find_company_by_employer(session, employer.id)
    if company is None:
        raise NotFoundError("Company")
    return company


async def update_company(
    session: AsyncSession,
    employer: User,
    data: CompanyRequest,
) -> Company:
    """Replace the editable fields of the caller's company."""
    ensure_role(employer, UserRole.EMPLOYER)
    company = await get_company_by_employer(session, employer)

    for field in EDITABLE_FIELDS:
        setattr(company, field, getattr(data, field))

    await session.commit()
    await session.refresh(company)
    logger.info(f"Company {company.id} updated")
    return company


async def set_company_logo(session: AsyncSession, employer: User, logo_path: str) -> Company:
    ensure_role(employer, UserRole.EMPLOYER)
    company = await get_company_by_employer(session, employer)
    company.logo_path = logo_path
    await session.commit()
    await session.refresh(company)
    return company


async def set_payment_verified(session: AsyncSession, company_id: int, verified: bool) -> None:
    """
    Set the verification flag. Does not commit; the caller owns the
    transaction.
    """
    await session.execute(
        update(Company)
        .where(Company.id == company_id)
        .values(payment_verified=verified)
        .execution_options(synchronize_session="fetch")
    )
