"""User and authentication schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from api.schemas.common import ORMModel, Timestamped, strip_text, blank_to_none
from database.models.users import UserRole


PHONE_PATTERN = r"^\+?[0-9\s-]{10,15}$"


class RegisterRequest(BaseModel):
    """Self-service registration."""

    email: EmailStr
    password: str = Field(min_length=6, max_length=128, description="Account password")
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: UserRole = Field(description="employer or job_seeker")
    phone: str = Field(pattern=PHONE_PATTERN, description="10-15 digits, optional leading +")
    address: Optional[str] = Field(None, max_length=500)

    @field_validator("first_name", "last_name", "phone", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return strip_text(v)

    @field_validator("role")
    @classmethod
    def no_admin_signup(cls, v: UserRole) -> UserRole:
        """Admins are provisioned, never self-registered."""
        if v == UserRole.ADMIN:
            raise ValueError("Cannot self-register as admin")
        return v


class LoginRequest(BaseModel):
    """Email and password credentials."""

    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class UserResponse(Timestamped):
    """Public view of a user."""

    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    resume_path: Optional[str] = None
    is_enabled: bool = True


class AuthResponse(BaseModel):
    """Token pair plus the authenticated user."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse


class ProfileUpdate(BaseModel):
    """Editable profile fields. Omitted fields are left unchanged."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, max_length=500)

    @field_validator("first_name", "last_name", "phone", "address", mode="before")
    @classmethod
    def normalize(cls, v):
        return blank_to_none(v)


class UserStatusUpdate(BaseModel):
    enabled: bool


class PlatformStats(BaseModel):
    """Admin dashboard counters."""

    total_users: int
    employers: int
    job_seekers: int
    companies: int
    verified_companies: int
    total_jobs: int
    active_jobs: int
    pending_jobs: int
    total_applications: int
    pending_payments: int
    generated_at: datetime


class NotificationResponse(ORMModel):
    id: int
    title: str
    message: str
    category: str
    link: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None


class UnreadCount(BaseModel):
    unread: int
