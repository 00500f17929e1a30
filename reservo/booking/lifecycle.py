"""
Reservation lifecycle state machine.

Pending and Confirmed are the only open states. Every transition is a single
conditional UPDATE guarded by the status the caller expects to replace, so
concurrent actors (dashboard, click link, auto-close sweep) cannot both win:
the loser gets a StateConflict carrying the status that is actually stored.
"""

from typing import Optional
import enum

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reservo.booking.clock import Clock
from reservo.booking.customers import record_visit
from reservo.booking.errors import AlreadyClosed, ReservationNotFound, StateConflict
from reservo.models.reservation import (
    Reservation,
    ReservationStatus,
    TERMINAL_STATUSES,
)
from reservo.notifications.base import NotificationDispatcher
from reservo.notifications.events import TRANSITION_EVENTS, reservation_event

logger = structlog.get_logger()


class OwnerAction(str, enum.Enum):
    CONFIRM = "confirm"
    DECLINE = "decline"
    COMPLETE = "complete"
    NO_SHOW = "no-show"
    CANCEL = "cancel"


# action -> (statuses it may start from, resulting status)
ACTION_RULES = {
    OwnerAction.CONFIRM: (frozenset({ReservationStatus.PENDING}), ReservationStatus.CONFIRMED),
    OwnerAction.DECLINE: (frozenset({ReservationStatus.PENDING}), ReservationStatus.DECLINED),
    OwnerAction.COMPLETE: (frozenset({ReservationStatus.CONFIRMED}), ReservationStatus.COMPLETED),
    OwnerAction.NO_SHOW: (
        frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED}),
        ReservationStatus.NO_SHOW,
    ),
    OwnerAction.CANCEL: (
        frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED}),
        ReservationStatus.CANCELLED,
    ),
}

# Auto-close outcome per open status
SWEEP_OUTCOMES = {
    ReservationStatus.CONFIRMED: ReservationStatus.COMPLETED,
    ReservationStatus.PENDING: ReservationStatus.NO_SHOW,
}

AUTO_CLOSE_REASON = "auto_close_cron"


class TransitionResult(BaseModel):
    reservation: Reservation
    status_before: ReservationStatus
    status_after: ReservationStatus

    class Config:
        arbitrary_types_allowed = True


async def load_reservation(db: AsyncSession, tenant_id: int, reservation_id: int) -> Reservation:
    """Fetch a tenant's reservation, re-reading the stored row"""
    result = await db.execute(
        select(Reservation)
        .where(Reservation.id == reservation_id, Reservation.tenant_id == tenant_id)
        .execution_options(populate_existing=True)
    )
    reservation = result.scalar_one_or_none()
    if reservation is None:
        raise ReservationNotFound(reservation_id)
    return reservation


class ReservationLifecycle:
    """Applies owner actions and closing transitions to stored reservations"""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.clock = clock or Clock()

    async def get(self, tenant_id: int, reservation_id: int) -> Reservation:
        return await load_reservation(self.db, tenant_id, reservation_id)

    async def apply(
        self,
        tenant_id: int,
        reservation_id: int,
        action: OwnerAction,
        actor: str = "owner",
    ) -> TransitionResult:
        """Run an owner action after checking it is legal from the stored status"""
        action = OwnerAction(action)
        reservation = await self.get(tenant_id, reservation_id)
        status_before = reservation.status

        if status_before in TERMINAL_STATUSES:
            self._log_decision(action, actor, reservation, status_before, status_before)
            raise AlreadyClosed(reservation)

        allowed_from, target = ACTION_RULES[action]
        if status_before not in allowed_from:
            self._log_decision(action, actor, reservation, status_before, status_before)
            raise StateConflict(
                status_before,
                f"Cannot {action.value} a {status_before.value} reservation",
                reservation=reservation,
            )

        reason = f"{actor}_{action.value.replace('-', '_')}"
        updated = await self.transition(reservation, status_before, target, reason)
        self._log_decision(action, actor, updated, status_before, target)

        return TransitionResult(reservation=updated, status_before=status_before, status_after=target)

    async def transition(
        self,
        reservation: Reservation,
        expected: ReservationStatus,
        new_status: ReservationStatus,
        reason: str,
    ) -> Reservation:
        """
        Atomically move `reservation` from `expected` to `new_status`.
        Terminal targets also record closed_at and closed_reason.
        """
        tenant_id, reservation_id = reservation.tenant_id, reservation.id
        now = self.clock.utcnow()
        values = {"status": new_status, "updated_at": now}
        if new_status in TERMINAL_STATUSES:
            values["closed_at"] = now
            values["closed_reason"] = reason

        result = await self.db.execute(
            update(Reservation)
            .where(
                Reservation.id == reservation_id,
                Reservation.tenant_id == tenant_id,
                Reservation.status == expected,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            await self.db.rollback()
            current = await load_reservation(self.db, tenant_id, reservation_id)
            raise StateConflict(current.status, reservation=current)

        await self.db.commit()
        await self.db.refresh(reservation)

        if new_status == ReservationStatus.COMPLETED:
            await self._refresh_visit_stats(reservation)

        self._emit(reservation, expected)
        return reservation

    async def _refresh_visit_stats(self, reservation: Reservation) -> None:
        visited_at = self.clock.civil_to_utc(reservation.service_date, reservation.service_time)
        try:
            await record_visit(self.db, reservation, visited_at)
        except Exception as e:
            logger.warning(
                "Failed to update customer visit stats",
                reservation_id=reservation.id,
                tenant_id=reservation.tenant_id,
                error=str(e),
            )
            await self.db.rollback()
            await self.db.refresh(reservation)

    def _emit(self, reservation: Reservation, status_before: ReservationStatus) -> None:
        event_type = TRANSITION_EVENTS.get(reservation.status)
        if event_type is None:
            return

        try:
            self.dispatcher.emit(reservation_event(event_type, reservation, status_before))
        except Exception as e:
            logger.error(
                "Failed to dispatch reservation event",
                event_type=event_type.value,
                reservation_id=reservation.id,
                error=str(e),
            )

    def _log_decision(
        self,
        action: OwnerAction,
        actor: str,
        reservation: Reservation,
        status_before: ReservationStatus,
        status_after: ReservationStatus,
    ) -> None:
        logger.info(
            "Owner decision",
            action=action.value,
            actor=actor,
            id=reservation.id,
            reservation_id=reservation.correlation_id,
            tenant_id=reservation.tenant_id,
            status_before=status_before.value,
            status_after=status_after.value,
        )
