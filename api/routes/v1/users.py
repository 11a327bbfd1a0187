"""
Current-user endpoints: profile, resume and notification inbox.
"""

from fastapi import APIRouter, Depends, File, Path, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_current_user,
    get_file_storage,
    get_pagination_params,
    require_job_seeker,
    store_upload,
)
from api.schemas.common import MessageResponse, PaginatedResponse, PaginationParams
from api.schemas.users import (
    NotificationResponse,
    ProfileUpdate,
    UnreadCount,
    UserResponse,
)
from api.services import notifications as notification_service
from api.services import users as user_service
from core.storage.local import LocalStorage
from database.engine import get_db
from database.models.users import User

router = APIRouter(prefix="/users")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Profile of the authenticated user."""
    return current_user


@router.put("/me", response_model=UserResponse)
async def update_me(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit profile fields."""
    return await user_service.update_profile(db, current_user, data)


@router.post("/me/resume", response_model=UserResponse)
async def upload_resume(
    file: UploadFile = File(..., description="PDF or Word document"),
    current_user: User = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_file_storage),
):
    """Store a resume and make it the profile default."""
    reference = await store_upload(storage, file, "resumes")
    return await user_service.set_resume(db, current_user, reference)


@router.get("/me/notifications", response_model=PaginatedResponse[NotificationResponse])
async def list_my_notifications(
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Newest first."""
    return await notification_service.list_notifications(db, current_user, pagination)


@router.get("/me/notifications/unread-count", response_model=UnreadCount)
async def unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return UnreadCount(unread=await notification_service.count_unread(db, current_user))


@router.put("/me/notifications/read-all", response_model=MessageResponse)
async def read_all_notifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    count = await notification_service.mark_all_as_read(db, current_user)
    return MessageResponse(message=f"{count} notification(s) marked as read")


@router.put("/me/notifications/{notification_id}/read", response_model=NotificationResponse)
async def read_notification(
    notification_id: int = Path(..., description="Notification ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.mark_as_read(db, notification_id, current_user)
