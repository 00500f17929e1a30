"""Customer (guest) API endpoints"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from reservo.database import get_db
from reservo.models.customer import Customer
from reservo.models.user import User
from reservo.schemas.customer import CustomerResponse, CustomerListResponse
from reservo.api.auth import get_current_active_user, verify_tenant_access

router = APIRouter()


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    tenant_id: int,
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Guests ordered by most recent visit, then by visit count"""
    await verify_tenant_access(tenant_id, current_user)

    total_result = await db.execute(
        select(func.count(Customer.id)).where(Customer.tenant_id == tenant_id)
    )
    total = total_result.scalar()

    result = await db.execute(
        select(Customer)
        .where(Customer.tenant_id == tenant_id)
        .order_by(
            Customer.last_seen_at.is_(None),
            Customer.last_seen_at.desc(),
            Customer.visits_count.desc(),
        )
        .limit(limit)
    )
    customers = result.scalars().all()

    return CustomerListResponse(
        items=[CustomerResponse.model_validate(c) for c in customers],
        total=total,
    )
