"""
Interview question schemas - stored questions, filters and stats.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class QuestionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: str
    resume_id: str
    user_id: str
    question_text: str
    category: Optional[str] = None
    difficulty: Optional[str] = None
    suggested_answer: Optional[str] = None
    tips: Optional[str] = None
    tags: Optional[str] = None  # JSON array as text
    is_bookmarked: bool = False
    created_at: Optional[datetime] = None


class NewQuestion(BaseModel):
    question_id: str
    resume_id: str
    user_id: str
    question_text: str
    category: Optional[str] = None
    difficulty: Optional[str] = None
    suggested_answer: Optional[str] = None
    tips: Optional[str] = None
    tags: Optional[str] = None


class QuestionFilters(BaseModel):
    category: Optional[str] = None
    is_bookmarked: Optional[bool] = None
    resume_id: Optional[str] = None


class QuestionStats(BaseModel):
    total: int
    bookmarked: int
    byCategory: dict[str, int]


class GenerateQuestionsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_id: str = Field(alias="resumeId", min_length=1)
    count: int = Field(default=10, ge=1, le=20)
