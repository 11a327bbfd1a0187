"""Tests for the company registry."""

import pytest

from api.schemas.companies import CompanyRequest
from api.services import companies as company_service
from core.exceptions import ConflictError, NotFoundError, UnauthorizedError


def company_data(**overrides) -> CompanyRequest:
    values = {"name": "  Globex  ", "address": "42 Harbour Road", "website": " "}
    values.update(overrides)
    return CompanyRequest(**values)


class TestRegisterCompany:

    @pytest.mark.asyncio
    async def test_register_starts_unverified(self, session, employer):
        company = await company_service.register_company(
            session, employer, company_data(payment_verified=True)
        )

        assert company.employer_id == employer.id
        assert company.name == "Globex"
        assert company.website is None
        assert company.payment_verified is False

    @pytest.mark.asyncio
    async def test_second_company_conflicts(self, session, employer):
        await company_service.register_company(session, employer, company_data())

        with pytest.raises(ConflictError) as exc_info:
            await company_service.register_company(session, employer, company_data(name="Other"))
        assert "already exists" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_only_employers_register(self, session, job_seeker):
        with pytest.raises(UnauthorizedError):
            await company_service.register_company(session, job_seeker, company_data())


class TestCompanyProfile:

    @pytest.mark.asyncio
    async def test_lookup_without_company(self, session, employer):
        with pytest.raises(NotFoundError):
            await company_service.get_company_by_employer(session, employer)

    @pytest.mark.asyncio
    async def test_update_leaves_verification_alone(self, session, employer, make_company):
        await make_company(employer, verified=True)

        updated = await company_service.update_company(
            session, employer, company_data(name="Globex Ltd", industry="Logistics")
        )

        assert updated.name == "Globex Ltd"
        assert updated.industry == "Logistics"
        assert updated.payment_verified is True
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_set_logo(self, session, employer, make_company):
        await make_company(employer)
        company = await company_service.set_company_logo(session, employer, "logos/globex.png")
        assert company.logo_path == "logos/globex.png"
        assert company.updated_at is not None
