"""
Object key construction and the ownership guard.

Every key a user may reference lives under resumes/{user_id}/. The bucket does not
enforce this; authorize_key is the one place it is checked.
"""
import re
import time

from prepup.app.core.config import (
    ALLOWED_RESUME_MIME_TYPES,
    DEFAULT_FILENAME_EXTENSION,
    DEFAULT_FILENAME_STEM,
    settings,
)
from prepup.app.core.exceptions import OwnershipError, ValidationError

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")
_EXTENSION = re.compile(r"\.[A-Za-z0-9]+")


def sanitize_filename(filename: str) -> str:
    """
    Make a filename safe for an object key while keeping its extension.

    "Backend Engineer.pdf" -> "Backend_Engineer.pdf", "???" -> "resume.pdf".
    An extension that is not purely alphanumeric is sanitized as part of the name.
    """
    name, extension = filename, ""
    dot = filename.rfind(".")
    if dot > 0 and _EXTENSION.fullmatch(filename[dot:]):
        name, extension = filename[:dot], filename[dot:]
    safe = _UNSAFE_CHARS.sub("_", name)
    safe = _REPEATED_UNDERSCORES.sub("_", safe).strip("_")
    return f"{safe or DEFAULT_FILENAME_STEM}{extension or DEFAULT_FILENAME_EXTENSION}"


def user_prefix(user_id: str) -> str:
    if not user_id or "/" in user_id:
        raise OwnershipError("Invalid user id")
    return f"{settings.s3_key_prefix}/{user_id}/"


def build_resume_key(user_id: str, filename: str, timestamp_ms: int | None = None) -> str:
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    return f"{user_prefix(user_id)}{ts}-{sanitize_filename(filename)}"


def is_owned_key(user_id: str, key: str) -> bool:
    if not user_id or "/" in user_id or not key.startswith(user_prefix(user_id)):
        return False
    # some S3-compatible stores normalize dot segments
    return ".." not in key.split("/")


def authorize_key(user_id: str, key: str, detail: str | None = None) -> str:
    """Return `key` if it belongs to user_id, else raise OwnershipError."""
    if not is_owned_key(user_id, key):
        raise OwnershipError(detail)
    return key


def validate_upload(content_type: str | None, size: int) -> None:
    """Size and MIME allow-list check shared by direct and presigned uploads."""
    if size > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes / 1024 / 1024
        raise ValidationError(f"File size exceeds maximum limit of {limit_mb:g}MB")
    if content_type not in ALLOWED_RESUME_MIME_TYPES:
        raise ValidationError("Invalid file type. Only PDF, DOC, and DOCX files are allowed.")


def strip_extension(filename: str) -> str:
    """'cv.final.pdf' -> 'cv.final'"""
    dot = filename.rfind(".")
    return filename[:dot] if dot > 0 else filename
