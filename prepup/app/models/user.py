"""
User model - local mirror of an identity-provider account, kept for foreign keys
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from prepup.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(255), primary_key=True)  # identity-provider subject
    email = Column(String(255), nullable=True)
    language_preference = Column(String(10), nullable=False, default="en")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
