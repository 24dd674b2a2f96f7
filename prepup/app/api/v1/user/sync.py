"""
User sync endpoint - mirrors the identity-provider account into the users table
"""
from fastapi import APIRouter, Depends

from prepup.app.core.dependencies import get_current_identity, get_resume_repository
from prepup.app.core.logging_config import get_logger
from prepup.app.repositories.base import ResumeRepository
from prepup.app.schemas.user import Identity, UserSyncResponse

logger = get_logger("api.user.sync")
router = APIRouter()


@router.post("/sync", response_model=UserSyncResponse)
def sync_user(
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """
    Ensure the caller has a users row. Idempotent; covers identity-provider webhooks
    that failed or arrived late.
    """
    repo.ensure_user(identity.user_id, identity.email)
    logger.info("User synced user_id=%s", identity.user_id)
    return UserSyncResponse(userId=identity.user_id)
