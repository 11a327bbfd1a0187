"""Manual payment schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from api.schemas.common import ORMModel
from database.models.payments import PaymentStatus


class PaymentResponse(ORMModel):
    id: int
    employer_id: int
    file_path: str
    reference_number: str
    status: PaymentStatus
    admin_notes: Optional[str] = None
    verified_by_id: Optional[int] = None
    uploaded_at: datetime
    verified_at: Optional[datetime] = None


class PaymentReviewRequest(BaseModel):
    """Admin decision on a pending payment."""

    status: Optional[PaymentStatus] = Field(None, description="verified or rejected")
    admin_notes: Optional[str] = Field(None, description="Required when rejecting")
