"""Authentication schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from reservo.models.user import UserRole


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseModel):
    """User response"""
    id: int
    email: str
    full_name: Optional[str]
    role: UserRole
    tenant_id: Optional[int]
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True
