"""
Tests for the application workflow.

Tests:
- Apply gates (role, job status, resume)
- Duplicate detection, including the unique-constraint backstop
- Status updates and applicant notifications
- Visibility of applications
"""

import pytest
from unittest.mock import AsyncMock, patch

from api.services import applications as application_service
from core.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    UnauthorizedError,
    ValidationError,
)
from database.models.applications import ApplicationStatus
from database.models.jobs import JobStatus
from database.models.users import UserRole


@pytest.fixture
def active_job(employer, make_company, make_job):
    """Coroutine factory for an active job owned by ``employer``."""

    async def _active_job(**overrides):
        company = await make_company(employer, verified=True)
        return await make_job(company, status=JobStatus.ACTIVE, **overrides)

    return _active_job


class TestApplyToJob:
    """Test submitting applications."""

    @pytest.mark.asyncio
    async def test_apply_uses_profile_resume_and_notifies_employer(
        self, session, employer, job_seeker, active_job, notifications_for
    ):
        job = await active_job(title="QA Analyst")

        application = await application_service.apply_to_job(
            session, job_seeker, job.id, cover_letter="  Hello  "
        )

        assert application.status == ApplicationStatus.SUBMITTED
        assert application.resume_path == "resumes/profile.pdf"
        assert application.cover_letter == "Hello"
        notes = await notifications_for(employer.id)
        assert [n.category for n in notes] == ["NEW_APPLICATION"]
        assert "Sam Seeker applied to 'QA Analyst'" == notes[0].message
        assert notes[0].link == f"/applications/{application.id}"

    @pytest.mark.asyncio
    async def test_uploaded_resume_overrides_profile(self, session, job_seeker, active_job):
        job = await active_job()
        application = await application_service.apply_to_job(
            session, job_seeker, job.id, resume_path="resumes/tailored.pdf"
        )
        assert application.resume_path == "resumes/tailored.pdf"

    @pytest.mark.asyncio
    async def test_resume_required(self, session, make_user, active_job):
        seeker = await make_user(UserRole.JOB_SEEKER, resume_path=None)
        job = await active_job()

        with pytest.raises(ValidationError) as exc_info:
            await application_service.apply_to_job(session, seeker, job.id)
        assert exc_info.value.field == "resume"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status", [JobStatus.PENDING_APPROVAL, JobStatus.REJECTED, JobStatus.CLOSED]
    )
    async def test_only_active_jobs_accept_applications(
        self, session, employer, job_seeker, make_company, make_job, status
    ):
        company = await make_company(employer, verified=True)
        job = await make_job(company, status=status)

        with pytest.raises(PreconditionFailedError):
            await application_service.apply_to_job(session, job_seeker, job.id)

    @pytest.mark.asyncio
    async def test_unknown_job(self, session, job_seeker):
        with pytest.raises(NotFoundError):
            await application_service.apply_to_job(session, job_seeker, 4242)

    @pytest.mark.asyncio
    async def test_employer_cannot_apply(self, session, employer, active_job):
        job = await active_job()
        with pytest.raises(UnauthorizedError):
            await application_service.apply_to_job(session, employer, job.id)

    @pytest.mark.asyncio
    async def test_duplicate_application_conflicts(self, session, job_seeker, active_job):
        job = await active_job()
        await application_service.apply_to_job(session, job_seeker, job.id)

        with pytest.raises(ConflictError):
            await application_service.apply_to_job(session, job_seeker, job.id)

    @pytest.mark.asyncio
    async def test_unique_constraint_catches_racing_duplicate(
        self, session, job_seeker, active_job
    ):
        job = await active_job()
        job_id, seeker_id = job.id, job_seeker.id
        await application_service.apply_to_job(session, job_seeker, job_id)

        # Simulate a second request that passed the existence check before
        # the first one committed.
        with patch.object(
            application_service, "has_applied", AsyncMock(return_value=False)
        ):
            with pytest.raises(ConflictError):
                await application_service.apply_to_job(session, job_seeker, job_id)

        assert await application_service.has_applied(session, job_id, seeker_id)


class TestUpdateApplicationStatus:
    """Test employer status changes."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,phrase",
        [
            (ApplicationStatus.SHORTLISTED, "Shortlisted"),
            (ApplicationStatus.REJECTED, "Rejected"),
            (ApplicationStatus.HIRED, "Hired"),
            (ApplicationStatus.SUBMITTED, "Updated"),
        ],
    )
    async def test_status_change_notifies_applicant(
        self, session, employer, job_seeker, active_job, notifications_for, status, phrase
    ):
        job = await active_job(title="Support Lead")
        application = await application_service.apply_to_job(session, job_seeker, job.id)

        updated = await application_service.update_application_status(
            session, application.id, employer, status, "great fit"
        )

        assert updated.status == status
        assert updated.employer_notes == "great fit"
        notes = await notifications_for(job_seeker.id)
        assert notes[-1].category == "APPLICATION_STATUS_UPDATED"
        assert phrase in notes[-1].title
        assert f"'Support Lead' has been {phrase.lower()}" in notes[-1].message

    @pytest.mark.asyncio
    async def test_hired_can_be_reopened(self, session, employer, job_seeker, active_job):
        job = await active_job()
        application = await application_service.apply_to_job(session, job_seeker, job.id)
        await application_service.update_application_status(
            session, application.id, employer, ApplicationStatus.HIRED
        )

        reopened = await application_service.update_application_status(
            session, application.id, employer, ApplicationStatus.SHORTLISTED
        )
        assert reopened.status == ApplicationStatus.SHORTLISTED

    @pytest.mark.asyncio
    async def test_status_required(self, session, employer, job_seeker, active_job):
        job = await active_job()
        application = await application_service.apply_to_job(session, job_seeker, job.id)

        with pytest.raises(ValidationError):
            await application_service.update_application_status(
                session, application.id, employer, None
            )

    @pytest.mark.asyncio
    async def test_only_owning_employer(
        self, session, job_seeker, make_user, active_job
    ):
        job = await active_job()
        application = await application_service.apply_to_job(session, job_seeker, job.id)
        other = await make_user(UserRole.EMPLOYER)

        with pytest.raises(UnauthorizedError):
            await application_service.update_application_status(
                session, application.id, other, ApplicationStatus.HIRED
            )

    @pytest.mark.asyncio
    async def test_unknown_application(self, session, employer):
        with pytest.raises(NotFoundError):
            await application_service.update_application_status(
                session, 777, employer, ApplicationStatus.HIRED
            )


class TestApplicationVisibility:
    """Test read access."""

    @pytest.mark.asyncio
    async def test_applicant_employer_and_admin_can_read(
        self, session, employer, job_seeker, admin, active_job
    ):
        job = await active_job()
        application = await application_service.apply_to_job(session, job_seeker, job.id)

        for viewer in (job_seeker, employer, admin):
            found = await application_service.get_application(session, application.id, viewer)
            assert found.id == application.id

    @pytest.mark.asyncio
    async def test_stranger_cannot_read(self, session, job_seeker, make_user, active_job):
        job = await active_job()
        application = await application_service.apply_to_job(session, job_seeker, job.id)
        stranger = await make_user(UserRole.JOB_SEEKER)

        with pytest.raises(UnauthorizedError):
            await application_service.get_application(session, application.id, stranger)

    @pytest.mark.asyncio
    async def test_listings(self, session, employer, job_seeker, make_user, active_job):
        job = await active_job()
        mine = await application_service.apply_to_job(session, job_seeker, job.id)
        other_seeker = await make_user(UserRole.JOB_SEEKER, resume_path="resumes/o.pdf")
        theirs = await application_service.apply_to_job(session, other_seeker, job.id)

        by_applicant = await application_service.list_applications_by_applicant(session, job_seeker)
        assert [a.id for a in by_applicant] == [mine.id]

        by_job = await application_service.list_applications_by_job(session, job.id, employer)
        assert {a.id for a in by_job} == {mine.id, theirs.id}

        with pytest.raises(UnauthorizedError):
            await application_service.list_applications_by_job(session, job.id, other_seeker)
