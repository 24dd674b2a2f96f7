"""
Interview questions generated from a resume.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text

from prepup.app.db.base import Base


class Question(Base):
    __tablename__ = "interview_questions"
    __table_args__ = (
        Index("ix_interview_questions_category_difficulty", "category", "difficulty"),
    )

    question_id = Column(String(36), primary_key=True)
    resume_id = Column(String(36), ForeignKey("resumes.resume_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    question_text = Column(Text, nullable=False)
    category = Column(String(32), nullable=True)
    difficulty = Column(String(16), nullable=True)
    suggested_answer = Column(Text, nullable=True)
    tips = Column(Text, nullable=True)
    tags = Column(Text, nullable=True)  # JSON array as TEXT
    is_bookmarked = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
