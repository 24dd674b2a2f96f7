"""
Resume and ResumeHistory models.
file_url holds the object-store key (resumes/{user_id}/...), not a public URL.
"""
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from prepup.app.db.base import Base


class Resume(Base):
    __tablename__ = "resumes"
    __table_args__ = (
        CheckConstraint("score IS NULL OR (score BETWEEN 0 AND 100)", name="ck_resumes_score"),
    )

    resume_id = Column(String(36), primary_key=True)
    user_id = Column(String(255), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    version = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    file_url = Column(String(1024), nullable=True)
    ai_feedback = Column(Text, nullable=True)  # JSON as TEXT
    score = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    history = relationship(
        "ResumeHistory",
        back_populates="resume",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ResumeHistory(Base):
    """Immutable snapshot of a resume taken right before it was changed."""
    __tablename__ = "resume_history"

    history_id = Column(String(36), primary_key=True)
    resume_id = Column(String(36), ForeignKey("resumes.resume_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    version = Column(Integer, nullable=False)
    file_url = Column(String(1024), nullable=True)
    ai_feedback = Column(Text, nullable=True)
    score = Column(Integer, nullable=True)
    change_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    resume = relationship("Resume", back_populates="history")
