"""
Job application endpoints.

Job seekers apply and follow their applications; employers review the
applications received for their jobs.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_current_user,
    get_file_storage,
    require_employer,
    require_job_seeker,
    store_upload,
)
from api.schemas.applications import ApplicationResponse, ApplicationStatusUpdate
from api.services import applications as application_service
from core.storage.local import LocalStorage
from database.engine import get_db
from database.models.users import User

router = APIRouter(prefix="/applications")


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply(
    job_id: int = Form(..., description="Job to apply to"),
    cover_letter: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None, description="Overrides the profile resume"),
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_file_storage),
):
    """Apply to an active job. Falls back to the profile resume when none is uploaded."""
    resume_path = None
    if resume is not None and resume.filename:
        resume_path = await store_upload(storage, resume, "resumes")
    return await application_service.apply_to_job(
        db, current_user, job_id, resume_path=resume_path, cover_letter=cover_letter
    )


@router.get("/mine", response_model=List[ApplicationResponse])
async def list_my_applications(
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.list_applications_by_applicant(db, current_user)


@router.get("/job/{job_id}", response_model=List[ApplicationResponse])
async def list_job_applications(
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Applications received for one of the caller's jobs."""
    return await application_service.list_applications_by_job(db, job_id, current_user)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: int = Path(..., description="Application ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.get_application(db, application_id, current_user)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    data: ApplicationStatusUpdate,
    application_id: int = Path(..., description="Application ID"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Move an application to a new status; the applicant is notified."""
    return await application_service.update_application_status(
        db, application_id, current_user, data.status, data.notes
    )
