"""Per-tenant reservation policy with safe fallback defaults"""

from typing import Optional, Tuple

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reservo.booking.clock import normalize_time
from reservo.booking.errors import PolicyUnavailable
from reservo.config import settings
from reservo.models.tenant import Tenant

logger = structlog.get_logger()

FALLBACK_MAX_AUTO_CONFIRM_PEOPLE = 6
FALLBACK_SAME_DAY_CUTOFF = "11:00"


class ReservationPolicy(BaseModel):
    """Rules deciding whether a reservation is auto-confirmed"""
    max_auto_confirm_people: int
    cutoff_time: str


def default_policy() -> ReservationPolicy:
    """Policy from environment settings, falling back to hard-coded values"""
    max_people = settings.default_max_auto_confirm_people
    if not isinstance(max_people, int) or max_people <= 0:
        max_people = FALLBACK_MAX_AUTO_CONFIRM_PEOPLE

    cutoff = normalize_time(settings.default_same_day_cutoff) or FALLBACK_SAME_DAY_CUTOFF

    return ReservationPolicy(max_auto_confirm_people=max_people, cutoff_time=cutoff)


async def _load_tenant_policy(db: AsyncSession, tenant_id: int) -> Optional[Tuple]:
    try:
        result = await db.execute(
            select(Tenant.max_auto_confirm_people, Tenant.same_day_cutoff).where(
                Tenant.id == tenant_id
            )
        )
        return result.first()
    except Exception as e:
        raise PolicyUnavailable(str(e)) from e


async def resolve_policy(db: AsyncSession, tenant_id: int) -> ReservationPolicy:
    """
    Read the tenant's policy. Never raises: a missing tenant, malformed values
    or a failed lookup all degrade to the defaults so reservation intake is
    never blocked by policy resolution.
    """
    fallback = default_policy()

    try:
        row = await _load_tenant_policy(db, tenant_id)
    except PolicyUnavailable as e:
        logger.warning("Tenant policy unavailable, using defaults", tenant_id=tenant_id, error=str(e))
        return fallback

    if row is None:
        logger.warning("Tenant policy missing, using defaults", tenant_id=tenant_id)
        return fallback

    max_people, cutoff_raw = row

    if not isinstance(max_people, int) or isinstance(max_people, bool) or max_people <= 0:
        logger.warning("Invalid max_auto_confirm_people", tenant_id=tenant_id, value=max_people)
        max_people = fallback.max_auto_confirm_people

    cutoff = normalize_time(cutoff_raw)
    if cutoff is None:
        logger.warning("Invalid same_day_cutoff", tenant_id=tenant_id, value=cutoff_raw)
        cutoff = fallback.cutoff_time

    return ReservationPolicy(max_auto_confirm_people=max_people, cutoff_time=cutoff)
