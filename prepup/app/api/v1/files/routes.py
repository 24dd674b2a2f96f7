"""
File endpoints - presigned read URLs and listing, restricted to the caller's own keys
"""
from fastapi import APIRouter, Depends, Query

from prepup.app.core.config import LIST_FILES_DEFAULT_LIMIT, LIST_FILES_MAX_LIMIT
from prepup.app.core.dependencies import get_current_identity
from prepup.app.schemas.resume import PresignedUrlIn
from prepup.app.schemas.user import Identity
from prepup.app.services import file_service

router = APIRouter()


@router.post("/presigned-url")
def create_presigned_url(
    payload: PresignedUrlIn,
    identity: Identity = Depends(get_current_identity),
):
    """
    Presigned GET URL for a file under resumes/{user_id}/.

    - **fileKey**: object key (must belong to the caller)
    - **expiresIn**: optional seconds, default 3600, capped at 7 days
    """
    return file_service.get_presigned_url(identity, payload)


@router.get("")
def list_files(
    limit: int = Query(LIST_FILES_DEFAULT_LIMIT, ge=1, le=LIST_FILES_MAX_LIMIT),
    identity: Identity = Depends(get_current_identity),
):
    """List the caller's stored files."""
    return file_service.list_user_files(identity, limit)
