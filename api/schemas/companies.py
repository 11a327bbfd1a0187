"""Company profile schemas."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from api.schemas.common import Timestamped, strip_text, blank_to_none


class CompanyRequest(BaseModel):
    """
    Editable company fields.

    ``payment_verified`` is intentionally absent: only the payment review
    workflow can set it.
    """

    name: str = Field(min_length=1, max_length=255, description="Company name")
    description: Optional[str] = Field(None, description="About the company")
    industry: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=500)
    address: str = Field(min_length=1, max_length=500, description="Company address")
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("name", "address", mode="before")
    @classmethod
    def strip_required(cls, v):
        return strip_text(v)

    @field_validator("description", "industry", "website", "phone", mode="before")
    @classmethod
    def strip_optional(cls, v):
        return blank_to_none(v)


class CompanyResponse(Timestamped):
    id: int
    employer_id: int
    name: str
    description: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    address: str
    phone: Optional[str] = None
    logo_path: Optional[str] = None
    payment_verified: bool
