"""
Resume Pydantic schemas - records returned by the metadata repositories and request bodies.
Request bodies accept the camelCase keys the web client sends (fileKey, changeReason, ...).
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ResumeRecord(BaseModel):
    """A resume row as stored, independent of the backend that produced it."""
    model_config = ConfigDict(from_attributes=True)

    resume_id: str
    user_id: str
    title: str
    content: Optional[str] = None
    version: int = 1
    is_active: bool = True
    file_url: Optional[str] = None
    ai_feedback: Optional[str] = None
    score: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ResumeHistoryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    history_id: str
    resume_id: str
    user_id: str
    title: str
    content: Optional[str] = None
    version: int
    file_url: Optional[str] = None
    ai_feedback: Optional[str] = None
    score: Optional[int] = None
    change_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class NewResume(BaseModel):
    """Values for a resume insert. version/is_active always start at 1/True."""
    resume_id: str
    user_id: str
    title: str
    content: Optional[str] = None
    file_url: Optional[str] = None


class ResumeChanges(BaseModel):
    """Partial metadata update. Only fields explicitly set are written."""
    title: Optional[str] = None
    content: Optional[str] = None
    is_active: Optional[bool] = None
    ai_feedback: Optional[str] = None
    score: Optional[int] = None
    bump_version: bool = False

    def as_values(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"bump_version"})


class HistoryPage(BaseModel):
    items: list[ResumeHistoryRecord]
    total: int


class _CamelBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ResumeCreateIn(_CamelBody):
    title: Optional[str] = None
    content: Optional[str] = None


class ResumeUpdateIn(_CamelBody):
    title: Optional[str] = None
    content: Optional[str] = None
    is_active: Optional[bool] = None
    change_reason: Optional[str] = Field(default=None, alias="changeReason")


class UploadCompleteIn(_CamelBody):
    file_key: str = Field(alias="fileKey", min_length=1)
    title: Optional[str] = None
    original_filename: Optional[str] = Field(default=None, alias="originalFilename")


class UploadUrlIn(_CamelBody):
    filename: str = Field(min_length=1)
    content_type: str = Field(alias="contentType", min_length=1)
    file_size: int = Field(alias="fileSize", gt=0)


class FileReplaceIn(_CamelBody):
    file_key: str = Field(alias="fileKey", min_length=1)
    change_reason: Optional[str] = Field(default=None, alias="changeReason")


class PresignedUrlIn(_CamelBody):
    file_key: str = Field(alias="fileKey", min_length=1)
    expires_in: Optional[int] = Field(default=None, alias="expiresIn", gt=0)


class AnalyzeIn(_CamelBody):
    """Resume text extracted client-side. Falls back to the stored content when omitted."""
    extracted_text: Optional[str] = Field(default=None, alias="extractedText")
