"""
Job posting endpoints.

Search and detail are public; posting, editing and closing are for the
owning employer.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_file_storage,
    get_pagination_params,
    require_employer,
    store_upload,
)
from api.schemas.common import PaginatedResponse, PaginationParams
from api.schemas.jobs import JobCreate, JobResponse, JobSearchFilters, JobUpdate
from api.services import jobs as job_service
from core.storage.local import LocalStorage
from database.engine import get_db
from database.models.users import User

router = APIRouter(prefix="/jobs")


def get_search_filters(
    keyword: Optional[str] = Query(None, description="Search title and description"),
    category: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    min_salary: Optional[int] = Query(None, ge=0),
    max_salary: Optional[int] = Query(None, ge=0),
) -> JobSearchFilters:
    return JobSearchFilters(
        keyword=keyword,
        category=category,
        location=location,
        min_salary=min_salary,
        max_salary=max_salary,
    )


@router.get("", response_model=PaginatedResponse[JobResponse])
async def search_jobs(
    filters: JobSearchFilters = Depends(get_search_filters),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db),
):
    """Active jobs matching all supplied filters, newest first."""
    return await job_service.search_jobs(db, filters, pagination)


@router.get("/mine", response_model=List[JobResponse])
async def list_my_jobs(
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Every posting of the caller's company regardless of status."""
    return await job_service.list_jobs_by_company(db, current_user)


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: JobCreate,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Submit a posting for admin approval."""
    return await job_service.create_job(db, current_user, data)


@router.post("/with-proof", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job_with_proof(
    title: str = Form(...),
    category: str = Form(...),
    location: str = Form(...),
    description: Optional[str] = Form(None),
    employment_type: Optional[str] = Form(None),
    salary_min: Optional[int] = Form(None),
    salary_max: Optional[int] = Form(None),
    requirements: Optional[str] = Form(None),
    responsibilities: Optional[str] = Form(None),
    payment_proof: Optional[UploadFile] = File(None, description="Receipt image or PDF"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_file_storage),
):
    """Submit a posting as a multipart form with an optional payment proof attached."""
    try:
        data = JobCreate(
            title=title,
            category=category,
            location=location,
            description=description,
            employment_type=employment_type,
            salary_min=salary_min,
            salary_max=salary_max,
            requirements=requirements,
            responsibilities=responsibilities,
        )
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())

    proof_path = None
    if payment_proof is not None and payment_proof.filename:
        proof_path = await store_upload(storage, payment_proof, "payments")
    return await job_service.create_job(db, current_user, data, payment_proof_path=proof_path)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int = Path(..., description="Job ID"),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.get_job_detail(db, job_id)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    data: JobUpdate,
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Edit a pending or active posting."""
    return await job_service.update_job(db, job_id, current_user, data)


@router.put("/{job_id}/close", response_model=JobResponse)
async def close_job(
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Stop accepting applications. Only active jobs can be closed."""
    return await job_service.close_job(db, job_id, current_user)
