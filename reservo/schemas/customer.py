"""Customer schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CustomerResponse(BaseModel):
    id: int
    tenant_id: int
    phone: str
    full_name: Optional[str]
    first_seen_at: Optional[datetime]
    last_seen_at: Optional[datetime]
    visits_count: int

    class Config:
        from_attributes = True


class CustomerListResponse(BaseModel):
    items: List[CustomerResponse]
    total: int
