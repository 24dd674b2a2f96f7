"""
Resume service - upload, registration, file replacement, history and download URLs.
Used by the /api/resumes routes. All metadata access goes through a ResumeRepository,
so the same code runs against the ORM and the GraphQL gateway.
"""
import uuid
from datetime import datetime, timezone
from urllib.parse import quote, unquote

from prepup.app.core.config import UNTITLED_RESUME, settings
from prepup.app.core.exceptions import NotFoundError, UploadNotFoundError, ValidationError
from prepup.app.core.logging_config import get_logger
from prepup.app.repositories.base import ResumeRepository
from prepup.app.schemas.resume import (
    FileReplaceIn,
    NewResume,
    ResumeChanges,
    ResumeCreateIn,
    ResumeHistoryRecord,
    ResumeRecord,
    ResumeUpdateIn,
    UploadCompleteIn,
    UploadUrlIn,
)
from prepup.app.schemas.user import Identity
from prepup.app.services import s3_service
from prepup.app.services.file_keys import (
    authorize_key,
    build_resume_key,
    sanitize_filename,
    strip_extension,
    validate_upload,
)

logger = get_logger("services.resume")


def _new_id() -> str:
    return str(uuid.uuid4())


def snapshot_of(resume: ResumeRecord, change_reason: str | None = None) -> ResumeHistoryRecord:
    """History row capturing `resume` exactly as it is now (pre-update state)."""
    return ResumeHistoryRecord(
        history_id=_new_id(),
        resume_id=resume.resume_id,
        user_id=resume.user_id,
        title=resume.title,
        content=resume.content,
        version=resume.version,
        file_url=resume.file_url,
        ai_feedback=resume.ai_feedback,
        score=resume.score,
        change_reason=change_reason or None,
    )


def get_owned_resume(repo: ResumeRepository, identity: Identity, resume_id: str) -> ResumeRecord:
    """Resume owned by the caller. Missing and foreign resumes both raise the same 404."""
    resume = repo.get_resume(resume_id, identity.user_id)
    if resume is None:
        raise NotFoundError("Resume not found")
    return resume


def _register(repo: ResumeRepository, identity: Identity, title: str, file_key: str | None) -> ResumeRecord:
    # identity-provider sync can lag behind the first upload
    repo.ensure_user(identity.user_id, identity.email)
    return repo.insert_resume(
        NewResume(
            resume_id=_new_id(),
            user_id=identity.user_id,
            title=title,
            content=None,
            file_url=file_key,
        )
    )


def upload_resume(
    repo: ResumeRepository,
    identity: Identity,
    filename: str,
    content_type: str | None,
    contents: bytes,
    title: str | None = None,
) -> ResumeRecord:
    """
    Store an uploaded resume and record its metadata.

    The object is written first. If the metadata write then fails the object is left
    in the bucket (logged as orphaned) and the error propagates.
    """
    validate_upload(content_type, len(contents))

    key = build_resume_key(identity.user_id, filename)
    s3_service.put_object(
        key,
        contents,
        mime_type=content_type,
        metadata={
            "originalFilename": quote(filename),  # object metadata must be ASCII
            "uploadedBy": identity.user_id,
            "uploadedAt": datetime.now(timezone.utc).isoformat(),
        },
    )

    resume_title = (title or "").strip() or strip_extension(filename).strip() or UNTITLED_RESUME
    try:
        resume = _register(repo, identity, resume_title, key)
    except Exception:
        logger.exception(
            "Resume metadata write failed after upload - orphaned object user_id=%s key=%s",
            identity.user_id,
            key,
        )
        raise

    logger.info(
        "Resume uploaded user_id=%s resume_id=%s key=%s size_bytes=%d",
        identity.user_id,
        resume.resume_id,
        key,
        len(contents),
    )
    return resume


def complete_upload(repo: ResumeRepository, identity: Identity, body: UploadCompleteIn) -> ResumeRecord:
    """Register a file the client uploaded directly with a presigned PUT URL."""
    key = authorize_key(identity.user_id, body.file_key, "Invalid file key")

    if s3_service.head_object(key) is None:
        logger.error("Upload complete rejected - object missing user_id=%s key=%s", identity.user_id, key)
        raise UploadNotFoundError(fileKey=key)

    resume_title = (
        (body.title or "").strip()
        or strip_extension(body.original_filename or "").strip()
        or UNTITLED_RESUME
    )
    resume = _register(repo, identity, resume_title, key)
    logger.info(
        "Resume upload completed user_id=%s resume_id=%s key=%s",
        identity.user_id,
        resume.resume_id,
        key,
    )
    return resume


def create_upload_url(identity: Identity, body: UploadUrlIn) -> dict:
    """Presigned PUT URL for a client-direct upload, plus the key to register afterwards."""
    validate_upload(body.content_type, body.file_size)
    key = build_resume_key(identity.user_id, body.filename)
    expires_in = settings.s3_upload_url_expiration
    url = s3_service.generate_presigned_upload_url(key, body.content_type, expires_in)
    logger.info("Upload URL issued user_id=%s key=%s", identity.user_id, key)
    return {"presignedUrl": url, "fileKey": key, "expiresIn": expires_in}


def create_resume(repo: ResumeRepository, identity: Identity, body: ResumeCreateIn) -> ResumeRecord:
    """Metadata-only resume (no file yet)."""
    title = (body.title or "").strip()
    if not title:
        raise ValidationError("Title is required and must be a non-empty string")
    repo.ensure_user(identity.user_id, identity.email)
    new = NewResume(
        resume_id=_new_id(),
        user_id=identity.user_id,
        title=title,
        content=(body.content or "").strip() or None,
        file_url=None,
    )
    return repo.insert_resume(new)


def update_resume(
    repo: ResumeRepository,
    identity: Identity,
    resume_id: str,
    body: ResumeUpdateIn,
) -> ResumeRecord:
    """
    Edit title/content/is_active. A title or content change snapshots the previous
    state into history and bumps the version.
    """
    current = get_owned_resume(repo, identity, resume_id)

    values: dict = {}
    if body.title is not None:
        if not body.title.strip():
            raise ValidationError("Title must be a non-empty string")
        values["title"] = body.title.strip()
    if body.content is not None:
        values["content"] = body.content.strip() or None
    if body.is_active is not None:
        values["is_active"] = body.is_active
    if not values:
        raise ValidationError("No valid fields to update")

    changed = (
        ("title" in values and values["title"] != current.title)
        or ("content" in values and values["content"] != current.content)
    )
    snapshot = snapshot_of(current, body.change_reason) if changed else None
    changes = ResumeChanges(**values, bump_version=changed)
    return repo.update_resume(current, changes, snapshot)


def delete_resume(repo: ResumeRepository, identity: Identity, resume_id: str) -> None:
    get_owned_resume(repo, identity, resume_id)
    repo.soft_delete(resume_id, identity.user_id)


def replace_resume_file(
    repo: ResumeRepository,
    identity: Identity,
    resume_id: str,
    body: FileReplaceIn,
) -> ResumeRecord:
    """
    Point a resume at a newly uploaded file. The previous state goes to history first;
    both writes happen in one transaction.
    """
    current = get_owned_resume(repo, identity, resume_id)
    key = authorize_key(identity.user_id, body.file_key, "Invalid file key")
    if s3_service.head_object(key) is None:
        raise UploadNotFoundError(fileKey=key)

    updated = repo.replace_file(current, key, snapshot_of(current, body.change_reason))
    logger.info(
        "Resume file replaced user_id=%s resume_id=%s version=%d->%d key=%s",
        identity.user_id,
        resume_id,
        current.version,
        updated.version,
        key,
    )
    return updated


def list_history(
    repo: ResumeRepository,
    identity: Identity,
    resume_id: str,
    limit: int,
    offset: int,
) -> dict:
    get_owned_resume(repo, identity, resume_id)
    page = repo.list_history(resume_id, identity.user_id, limit, offset)
    return {
        "history": [h.model_dump(mode="json") for h in page.items],
        "pagination": {
            "total": page.total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < page.total,
        },
    }


def get_download_url(repo: ResumeRepository, identity: Identity, resume_id: str) -> dict:
    """Short-lived presigned GET URL for the resume's file (served as an attachment)."""
    resume = get_owned_resume(repo, identity, resume_id)
    if not resume.file_url:
        raise NotFoundError("File not found for this resume")

    head = s3_service.head_object(resume.file_url)
    if head is None:
        logger.error(
            "Resume file missing from storage user_id=%s resume_id=%s key=%s",
            identity.user_id,
            resume_id,
            resume.file_url,
        )
        raise NotFoundError("File not found in storage")

    # S3 returns user metadata keys lowercased
    metadata = {k.lower(): v for k, v in head["metadata"].items()}
    original = unquote(metadata.get("originalfilename", "")) or resume.file_url.rsplit("/", 1)[-1]
    filename = sanitize_filename(original)
    expires_in = settings.download_url_expiration
    url = s3_service.generate_presigned_url(resume.file_url, expires_in, download_filename=filename)
    return {
        "downloadUrl": url,
        "fileKey": resume.file_url,
        "filename": filename,
        "expiresIn": expires_in,
    }
