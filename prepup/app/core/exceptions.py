"""
Domain errors raised by services and repositories.
Each carries the HTTP status it maps to; main.py turns them into JSON responses.
"""
from typing import Any


class AppError(Exception):
    """Base class for errors that are safe to report to the caller."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None, **extra: Any):
        self.detail = detail or self.default_detail
        self.extra = extra
        super().__init__(self.detail)

    def to_payload(self) -> dict:
        return {"detail": self.detail, **self.extra}


class ValidationError(AppError):
    status_code = 400
    default_detail = "Invalid request"


class UploadNotFoundError(AppError):
    """The client claimed an upload that is not in object storage."""

    status_code = 400
    default_detail = "File upload failed. The file was not found in storage. Please try again."


class OwnershipError(AppError):
    status_code = 403
    default_detail = "Forbidden: You can only access your own files"


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Resume not found"


class StorageError(AppError):
    status_code = 500
    default_detail = "Storage operation failed"


class UpstreamError(AppError):
    """Metadata gateway or realtime API returned an error."""

    status_code = 500
    default_detail = "Upstream service error"
