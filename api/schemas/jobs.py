"""Job posting schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from api.schemas.common import Timestamped, strip_text, blank_to_none
from database.models.jobs import JobStatus


class JobCreate(BaseModel):
    """Fields supplied by an employer when posting a job."""

    title: str = Field(min_length=1, max_length=255, description="Job title")
    description: Optional[str] = Field(None, description="Full job description")
    category: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1, max_length=255)
    employment_type: Optional[str] = Field(None, max_length=50)
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None

    @field_validator("title", "category", "location", mode="before")
    @classmethod
    def strip_required(cls, v):
        return strip_text(v)

    @field_validator(
        "description", "employment_type", "requirements", "responsibilities", mode="before"
    )
    @classmethod
    def strip_optional(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def check_salary_range(self):
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError("salary_min cannot exceed salary_max")
        return self


class JobUpdate(JobCreate):
    """Full replacement of the editable posting fields."""


class JobRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, description="Shown to the employer")


class JobSearchFilters(BaseModel):
    """
    Public search filters. All optional, combined with AND.

    Blank strings are treated as no filter.
    """

    keyword: Optional[str] = Field(None, description="Substring of title or description")
    category: Optional[str] = Field(None, description="Exact category, case-insensitive")
    location: Optional[str] = Field(None, description="Substring of location")
    min_salary: Optional[int] = Field(None, ge=0, description="Lower bound on salary_min")
    max_salary: Optional[int] = Field(None, ge=0, description="Upper bound on salary_max")

    @field_validator("keyword", "category", "location", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return blank_to_none(v)


class JobResponse(Timestamped):
    id: int
    company_id: int
    company_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    category: str
    location: str
    employment_type: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    payment_proof_path: Optional[str] = None
    status: JobStatus
    approved_by_id: Optional[int] = None
    rejection_reason: Optional[str] = None
    published_at: Optional[datetime] = None
