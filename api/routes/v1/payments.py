"""
Proof-of-payment endpoints for employers.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_file_storage, require_employer, store_upload
from api.schemas.payments import PaymentResponse
from api.services import payments as payment_service
from core.exceptions import ValidationError, is_blank
from core.storage.local import LocalStorage
from database.engine import get_db
from database.models.users import User

router = APIRouter(prefix="/payments")


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def upload_payment(
    file: UploadFile = File(..., description="Receipt image or PDF"),
    reference_number: str = Form(..., description="Transfer reference"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_file_storage),
):
    """Upload a proof of payment for admin review."""
    if is_blank(reference_number):
        raise ValidationError("Reference number is required", field="reference_number")
    reference = await store_upload(storage, file, "payments")
    return await payment_service.submit_payment(db, current_user, reference, reference_number)


@router.get("/me", response_model=List[PaymentResponse])
async def list_my_payments(
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """All of the caller's submissions, newest first."""
    return await payment_service.list_payments_by_employer(db, current_user)


@router.get("/me/latest", response_model=Optional[PaymentResponse])
async def latest_payment(
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Most recent submission, or null when none exists."""
    return await payment_service.get_latest_payment(db, current_user)
