"""Job application schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from api.schemas.common import ORMModel
from database.models.applications import ApplicationStatus


class ApplicationResponse(ORMModel):
    id: int
    job_id: int
    applicant_id: int
    resume_path: str
    cover_letter: Optional[str] = None
    status: ApplicationStatus
    employer_notes: Optional[str] = None
    applied_at: datetime
    updated_at: Optional[datetime] = None


class ApplicationStatusUpdate(BaseModel):
    """Employer decision on an application."""

    status: Optional[ApplicationStatus] = Field(None, description="New status")
    notes: Optional[str] = Field(None, description="Private employer notes")
