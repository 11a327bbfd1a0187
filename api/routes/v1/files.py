"""
Stored file download.
"""

import mimetypes

from fastapi import APIRouter, Depends, Query, Response

from api.dependencies import get_current_user, get_file_storage
from core.storage.local import LocalStorage
from database.models.users import User

router = APIRouter(prefix="/files")


@router.get("")
async def download_file(
    reference: str = Query(..., description="Storage reference, e.g. resumes/<id>.pdf"),
    current_user: User = Depends(get_current_user),
    storage: LocalStorage = Depends(get_file_storage),
):
    """Return the raw bytes of a stored file. Authenticated users only."""
    data = storage.load(reference)
    media_type = mimetypes.guess_type(reference)[0] or "application/octet-stream"
    filename = reference.rsplit("/", 1)[-1]
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
