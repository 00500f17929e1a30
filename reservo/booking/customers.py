"""Customer records and visit statistics"""

from datetime import datetime
from typing import Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from reservo.booking.clock import utcnow
from reservo.models.customer import Customer
from reservo.models.reservation import Reservation


def _insert(db: AsyncSession):
    """INSERT construct supporting ON CONFLICT for the session's database"""
    if db.get_bind().dialect.name == "postgresql":
        return postgresql.insert(Customer)
    return sqlite.insert(Customer)


async def _get_customer(db: AsyncSession, tenant_id: int, phone: str) -> Customer:
    result = await db.execute(
        select(Customer)
        .where(Customer.tenant_id == tenant_id, Customer.phone == phone)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def register_customer(
    db: AsyncSession,
    tenant_id: int,
    phone: str,
    full_name: Optional[str],
    seen_at: datetime,
) -> Customer:
    """Create the guest record on first contact. Visits are not counted here."""
    stmt = _insert(db).values(
        tenant_id=tenant_id,
        phone=phone,
        full_name=full_name or None,
        first_seen_at=seen_at,
        visits_count=0,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Customer.tenant_id, Customer.phone],
        set_={
            "full_name": func.coalesce(stmt.excluded.full_name, Customer.full_name),
            "first_seen_at": func.coalesce(Customer.first_seen_at, stmt.excluded.first_seen_at),
            "updated_at": utcnow(),
        },
    )
    await db.execute(stmt)

    customer = await _get_customer(db, tenant_id, phone)
    await db.commit()
    return customer


async def record_visit(db: AsyncSession, reservation: Reservation, visited_at: datetime) -> Customer:
    """
    Count a completed visit and move last_seen_at forward.

    The increment happens inside a single upsert so that completions racing
    each other (owner action and auto-close sweep) are all counted.
    """
    tenant_id, phone = reservation.tenant_id, reservation.phone

    stmt = _insert(db).values(
        tenant_id=tenant_id,
        phone=phone,
        full_name=reservation.customer_name or None,
        first_seen_at=visited_at,
        last_seen_at=visited_at,
        visits_count=1,
    )
    excluded = stmt.excluded
    stmt = stmt.on_conflict_do_update(
        index_elements=[Customer.tenant_id, Customer.phone],
        set_={
            "visits_count": func.coalesce(Customer.visits_count, 0) + 1,
            "last_seen_at": case(
                (
                    or_(Customer.last_seen_at.is_(None), Customer.last_seen_at < excluded.last_seen_at),
                    excluded.last_seen_at,
                ),
                else_=Customer.last_seen_at,
            ),
            "first_seen_at": func.coalesce(Customer.first_seen_at, excluded.first_seen_at),
            "full_name": func.coalesce(excluded.full_name, Customer.full_name),
            "updated_at": utcnow(),
        },
    )
    await db.execute(stmt)

    customer = await _get_customer(db, tenant_id, phone)
    await db.commit()
    return customer
