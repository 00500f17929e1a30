"""Tenant and reservation policy schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from reservo.booking.clock import normalize_time


class TenantResponse(BaseModel):
    """Tenant response"""
    id: int
    name: str
    is_active: bool
    max_auto_confirm_people: int
    same_day_cutoff: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PolicyResponse(BaseModel):
    tenant_id: int
    max_auto_confirm_people: int
    same_day_cutoff: str


class PolicyUpdate(BaseModel):
    """Update reservation policy"""
    max_auto_confirm_people: Optional[int] = Field(None, ge=1, le=50)
    same_day_cutoff: Optional[str] = None

    @field_validator("same_day_cutoff")
    @classmethod
    def validate_cutoff(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and normalize_time(value) != value:
            raise ValueError("same_day_cutoff must be a zero-padded HH:MM time")
        return value
