"""Auto-close sweep for reservations whose service slot is long past"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reservo.booking.clock import Clock, subtract_minutes
from reservo.booking.errors import ReservationNotFound, StateConflict
from reservo.booking.lifecycle import AUTO_CLOSE_REASON, SWEEP_OUTCOMES, ReservationLifecycle
from reservo.config import settings
from reservo.models.reservation import OPEN_STATUSES, Reservation, ReservationStatus
from reservo.notifications.base import NotificationDispatcher

logger = structlog.get_logger()


class SweepSummary(BaseModel):
    scanned: int = 0
    completed: int = 0
    noshow: int = 0
    today: date
    now: str
    cutoff: str


class AutoCloseSweeper:
    """
    Finalizes open reservations across all tenants: Confirmed becomes Completed,
    Pending becomes NoShow. Rows that another actor closed first are skipped.
    """

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher,
        clock: Optional[Clock] = None,
        batch_limit: Optional[int] = None,
    ):
        self.db = db
        self.clock = clock or Clock()
        self.batch_limit = batch_limit or settings.auto_close_batch_limit
        self.lifecycle = ReservationLifecycle(db, dispatcher, self.clock)

    async def sweep(
        self,
        now: Optional[datetime] = None,
        buffer_minutes: Optional[int] = None,
    ) -> SweepSummary:
        now = now or self.clock.now()
        if buffer_minutes is None:
            buffer_minutes = settings.auto_close_buffer_minutes

        today = now.date()
        now_hhmm = now.strftime("%H:%M")
        # Wall-clock subtraction, floor-clamped at 00:00 rather than wrapping to yesterday
        cutoff = subtract_minutes(now_hhmm, buffer_minutes)

        result = await self.db.execute(
            select(Reservation)
            .where(
                Reservation.status.in_(OPEN_STATUSES),
                or_(
                    Reservation.service_date < today,
                    and_(Reservation.service_date == today, Reservation.service_time <= cutoff),
                ),
            )
            .order_by(Reservation.service_date.asc(), Reservation.service_time.asc(), Reservation.id.asc())
            .limit(self.batch_limit)
        )
        # A conflict rolls the session back and expires loaded rows, so keep plain values
        candidates = [(row.tenant_id, row.id, row.status) for row in result.scalars().all()]

        summary = SweepSummary(scanned=len(candidates), today=today, now=now_hhmm, cutoff=cutoff)

        for tenant_id, reservation_id, status in candidates:
            target = SWEEP_OUTCOMES[status]
            try:
                reservation = await self.lifecycle.get(tenant_id, reservation_id)
                await self.lifecycle.transition(reservation, status, target, AUTO_CLOSE_REASON)
            except (StateConflict, ReservationNotFound):
                logger.info(
                    "Auto-close skipped reservation closed concurrently",
                    reservation_id=reservation_id,
                    tenant_id=tenant_id,
                )
                continue

            if target == ReservationStatus.COMPLETED:
                summary.completed += 1
            else:
                summary.noshow += 1

        logger.info(
            "Auto-close sweep finished",
            scanned=summary.scanned,
            completed=summary.completed,
            noshow=summary.noshow,
            today=today.isoformat(),
            cutoff=cutoff,
        )
        return summary
