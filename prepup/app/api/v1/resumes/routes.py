"""
Resume endpoints - CRUD, uploads (direct and presigned), file replacement, history, download URLs
"""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from prepup.app.core.config import HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT
from prepup.app.core.dependencies import get_current_identity, get_resume_repository
from prepup.app.core.logging_config import get_logger
from prepup.app.repositories.base import ResumeRepository
from prepup.app.schemas.resume import (
    AnalyzeIn,
    FileReplaceIn,
    ResumeCreateIn,
    ResumeUpdateIn,
    UploadCompleteIn,
    UploadUrlIn,
)
from prepup.app.schemas.user import Identity
from prepup.app.services import resume_analysis, resume_service

logger = get_logger("api.resumes")
router = APIRouter()


@router.get("")
def list_resumes(
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """List the caller's active resumes, newest first."""
    resumes = repo.list_resumes(identity.user_id)
    return {"resumes": [r.model_dump(mode="json") for r in resumes]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_resume(
    payload: ResumeCreateIn,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """Create a resume record without a file (title required)."""
    resume = resume_service.create_resume(repo, identity, payload)
    return {"success": True, "resume": resume.model_dump(mode="json")}


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_resume(
    file: UploadFile = File(...),
    title: str | None = Form(None),
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """
    Upload a resume file (PDF, DOC, DOCX; max 5MB).

    Stores the file under resumes/{user_id}/{timestamp}-{filename} and records a new
    resume with version 1.

    Returns:
        - **resume**: the created record
        - **fileUrl**: object key of the stored file
    """
    logger.info(
        "Resume upload started user_id=%s filename=%s content_type=%s",
        identity.user_id,
        file.filename,
        file.content_type,
    )
    contents = await file.read()
    resume = resume_service.upload_resume(
        repo,
        identity,
        filename=file.filename or "",
        content_type=file.content_type,
        contents=contents,
        title=title,
    )
    return {"success": True, "resume": resume.model_dump(mode="json"), "fileUrl": resume.file_url}


@router.post("/upload/presigned-url")
def create_upload_url(
    payload: UploadUrlIn,
    identity: Identity = Depends(get_current_identity),
):
    """Presigned PUT URL so the browser can upload directly; register it via /upload/complete."""
    return resume_service.create_upload_url(identity, payload)


@router.post("/upload/complete", status_code=status.HTTP_201_CREATED)
def complete_upload(
    payload: UploadCompleteIn,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """Register a client-direct upload once the object is confirmed in storage."""
    resume = resume_service.complete_upload(repo, identity, payload)
    return {"success": True, "resume": resume.model_dump(mode="json"), "fileUrl": resume.file_url}


@router.get("/{resume_id}")
def get_resume(
    resume_id: str,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    resume = resume_service.get_owned_resume(repo, identity, resume_id)
    return {"resume": resume.model_dump(mode="json")}


@router.patch("/{resume_id}")
def update_resume(
    resume_id: str,
    payload: ResumeUpdateIn,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """Update title/content/is_active. Title or content changes are versioned."""
    resume = resume_service.update_resume(repo, identity, resume_id, payload)
    return {"success": True, "resume": resume.model_dump(mode="json")}


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: str,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """Soft delete (is_active = false). The stored file is kept."""
    resume_service.delete_resume(repo, identity, resume_id)
    return {"success": True, "message": "Resume deleted successfully"}


@router.put("/{resume_id}/file")
def replace_resume_file(
    resume_id: str,
    payload: FileReplaceIn,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """Swap the resume's file for an already-uploaded key; previous state goes to history."""
    resume = resume_service.replace_resume_file(repo, identity, resume_id, payload)
    return {"success": True, "resume": resume.model_dump(mode="json")}


@router.get("/{resume_id}/history")
def get_resume_history(
    resume_id: str,
    limit: int = Query(HISTORY_DEFAULT_LIMIT, ge=1, le=HISTORY_MAX_LIMIT),
    offset: int = Query(0, ge=0),
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    return resume_service.list_history(repo, identity, resume_id, limit, offset)


@router.get("/{resume_id}/download")
def download_resume(
    resume_id: str,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """Short-lived (5 minute) presigned URL for the original file. Bytes are not proxied."""
    return resume_service.get_download_url(repo, identity, resume_id)


@router.post("/{resume_id}/analyze")
def analyze_resume(
    resume_id: str,
    payload: AnalyzeIn,
    repo: ResumeRepository = Depends(get_resume_repository),
    identity: Identity = Depends(get_current_identity),
):
    """
    Score the resume with the LLM and store the result as ai_feedback.

    Uses **extractedText** when given, otherwise the stored content.
    """
    resume, analysis = resume_analysis.analyze_resume(repo, identity, resume_id, payload)
    return {"success": True, "resume": resume.model_dump(mode="json"), "analysis": analysis.model_dump()}
