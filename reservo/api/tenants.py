"""Tenant and reservation policy API endpoints"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reservo.database import get_db
from reservo.models.tenant import Tenant
from reservo.models.user import User, UserRole
from reservo.schemas.tenant import TenantResponse, PolicyResponse, PolicyUpdate
from reservo.api.auth import get_current_active_user, verify_tenant_access

router = APIRouter()
logger = structlog.get_logger()


async def get_tenant_or_404(db: AsyncSession, tenant_id: int) -> Tenant:
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    tenant = result.scalar_one_or_none()

    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")

    return tenant


def _policy_response(tenant: Tenant) -> PolicyResponse:
    return PolicyResponse(
        tenant_id=tenant.id,
        max_auto_confirm_people=tenant.max_auto_confirm_people,
        same_day_cutoff=tenant.same_day_cutoff,
    )


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: int,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get tenant details"""
    await verify_tenant_access(tenant_id, current_user)
    return await get_tenant_or_404(db, tenant_id)


@router.get("/{tenant_id}/policy", response_model=PolicyResponse)
async def get_policy(
    tenant_id: int,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the stored reservation policy"""
    await verify_tenant_access(tenant_id, current_user)
    tenant = await get_tenant_or_404(db, tenant_id)
    return _policy_response(tenant)


@router.put("/{tenant_id}/policy", response_model=PolicyResponse)
async def update_policy(
    tenant_id: int,
    policy_data: PolicyUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update the auto-confirm ceiling and/or the same-day cutoff"""
    await verify_tenant_access(tenant_id, current_user)

    if not current_user.has_permission(UserRole.RESTAURANT_ADMIN):
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    tenant = await get_tenant_or_404(db, tenant_id)

    for field, value in policy_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(tenant, field, value)

    await db.commit()
    await db.refresh(tenant)

    logger.info(
        "Reservation policy updated",
        tenant_id=tenant_id,
        max_auto_confirm_people=tenant.max_auto_confirm_people,
        same_day_cutoff=tenant.same_day_cutoff,
    )
    return _policy_response(tenant)
