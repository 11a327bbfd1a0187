"""
Company profile endpoints for employers.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_file_storage, require_employer, store_upload
from api.schemas.companies import CompanyRequest, CompanyResponse
from api.services import companies as company_service
from core.storage.local import LocalStorage
from database.engine import get_db
from database.models.users import User

router = APIRouter(prefix="/companies")


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def register_company(
    data: CompanyRequest,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Create the caller's company. One per employer."""
    return await company_service.register_company(db, current_user, data)


@router.get("/me", response_model=CompanyResponse)
async def get_my_company(
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.get_company_by_employer(db, current_user)


@router.put("/me", response_model=CompanyResponse)
async def update_my_company(
    data: CompanyRequest,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Replace the editable company fields."""
    return await company_service.update_company(db, current_user, data)


@router.post("/me/logo", response_model=CompanyResponse)
async def upload_logo(
    file: UploadFile = File(..., description="Image file"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_file_storage),
):
    reference = await store_upload(storage, file, "logos")
    return await company_service.set_company_logo(db, current_user, reference)
