"""
Admin moderation endpoints: payment review, job approval and user management.
"""

from typing import List

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_admin_user
from api.schemas.jobs import JobRejectRequest, JobResponse
from api.schemas.payments import PaymentResponse, PaymentReviewRequest
from api.schemas.users import PlatformStats, UserResponse, UserStatusUpdate
from api.services import jobs as job_service
from api.services import payments as payment_service
from api.services import users as user_service
from database.engine import get_db
from database.models.users import User, UserRole

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin_user)])


# ==================== Payments ==================== #

@router.get("/payments/pending", response_model=List[PaymentResponse])
async def list_pending_payments(db: AsyncSession = Depends(get_db)):
    """Review queue, oldest first."""
    return await payment_service.list_pending_payments(db)


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int = Path(..., description="Payment ID"),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.get_payment(db, payment_id)


@router.put("/payments/{payment_id}/review", response_model=PaymentResponse)
async def review_payment(
    data: PaymentReviewRequest,
    payment_id: int = Path(..., description="Payment ID"),
    current_user: User = Depends(require_admin_user),
    db: AsyncSession = Depends(get_db),
):
    """Verify or reject a pending payment. Rejections need notes."""
    return await payment_service.review_payment(
        db, payment_id, current_user, data.status, data.admin_notes
    )


# ==================== Jobs ==================== #

@router.get("/jobs/pending", response_model=List[JobResponse])
async def list_pending_jobs(db: AsyncSession = Depends(get_db)):
    return await job_service.list_pending_jobs(db)


@router.put("/jobs/{job_id}/approve", response_model=JobResponse)
async def approve_job(
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(require_admin_user),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.approve_job(db, job_id, current_user)


@router.put("/jobs/{job_id}/reject", response_model=JobResponse)
async def reject_job(
    data: JobRejectRequest = Body(...),
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(require_admin_user),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.reject_job(db, job_id, current_user, data.reason)


# ==================== Users ==================== #

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    role: UserRole,
    db: AsyncSession = Depends(get_db),
):
    return await user_service.list_users_by_role(db, role)


@router.put("/users/{user_id}/status", response_model=UserResponse)
async def set_user_status(
    data: UserStatusUpdate,
    user_id: int = Path(..., description="User ID"),
    current_user: User = Depends(require_admin_user),
    db: AsyncSession = Depends(get_db),
):
    """Enable or disable an account. Admins cannot disable themselves or each other."""
    return await user_service.set_user_enabled(db, current_user, user_id, data.enabled)


@router.get("/stats", response_model=PlatformStats)
async def platform_stats(db: AsyncSession = Depends(get_db)):
    return await user_service.get_platform_stats(db)
