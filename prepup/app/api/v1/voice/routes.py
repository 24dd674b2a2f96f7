"""
Voice interview endpoints - ephemeral realtime session for a mock interview
"""
from fastapi import APIRouter, Depends

from prepup.app.core.dependencies import (
    get_current_identity,
    get_question_repository,
    get_resume_repository,
)
from prepup.app.repositories.base import QuestionRepository, ResumeRepository
from prepup.app.schemas.user import Identity
from prepup.app.services.voice.session import VoiceSessionIn, create_voice_session

router = APIRouter()


@router.post("/session")
def create_session(
    payload: VoiceSessionIn,
    resume_repo: ResumeRepository = Depends(get_resume_repository),
    question_repo: QuestionRepository = Depends(get_question_repository),
    identity: Identity = Depends(get_current_identity),
):
    """
    Start a mock interview for one of the caller's questions against an analysed resume.
    Returns the realtime client secret plus the question/resume context for the UI.
    """
    return create_voice_session(resume_repo, question_repo, identity, payload)
