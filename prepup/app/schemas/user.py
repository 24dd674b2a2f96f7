"""
User Pydantic schemas
"""
from pydantic import BaseModel
from typing import Optional


class Identity(BaseModel):
    """Caller identity as asserted by the identity provider's token"""
    user_id: str
    email: Optional[str] = None


class UserSyncResponse(BaseModel):
    success: bool = True
    userId: str
