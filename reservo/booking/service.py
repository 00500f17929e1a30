"""Reservation intake: decide the initial status and persist the reservation"""

from typing import Optional
import uuid

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reservo.booking.clock import Clock
from reservo.booking.customers import register_customer
from reservo.booking.decision import Decision, decide_status, is_time_passed_today
from reservo.booking.errors import DuplicateReservation, ReservationValidationError
from reservo.booking.intake import ReservationRequest
from reservo.booking.policy import resolve_policy
from reservo.booking.tokens import IssuedTokens, OwnerTokenService
from reservo.models.reservation import Reservation, ReservationStatus
from reservo.notifications.base import NotificationDispatcher
from reservo.notifications.events import EventType, reservation_event

logger = structlog.get_logger()


class CreatedReservation(BaseModel):
    reservation: Reservation
    decision: Decision
    tokens: Optional[IssuedTokens] = None

    class Config:
        arbitrary_types_allowed = True


class ReservationService:
    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.clock = clock or Clock()

    async def create(self, tenant_id: int, request: ReservationRequest) -> CreatedReservation:
        """
        Insert a reservation with its decided status. Pending reservations get
        owner click-link tokens in the same transaction. The owner notification
        is only emitted once the row is committed.
        """
        now = self.clock.now()

        if is_time_passed_today(request.service_date, request.service_time, now):
            raise ReservationValidationError(
                "The requested time has already passed today. Choose a later time or another day.",
                "TIME_PASSED_TODAY",
            )

        policy = await resolve_policy(self.db, tenant_id)
        decision = decide_status(
            policy,
            request.service_date,
            request.service_time,
            request.party_size,
            now,
        )

        correlation_id = request.correlation_id or str(uuid.uuid4())
        reservation = Reservation(
            tenant_id=tenant_id,
            correlation_id=correlation_id,
            customer_name=request.customer_name,
            phone=request.phone,
            service_date=request.service_date,
            service_time=request.service_time,
            party_size=request.party_size,
            channel=request.channel,
            area=request.area,
            allergies=request.allergies,
            special_requests=request.special_requests,
            status=decision.status,
            decision_reason=decision.reason.value,
        )

        tokens = None
        try:
            self.db.add(reservation)
            await self.db.flush()

            if decision.status == ReservationStatus.PENDING:
                tokens = await OwnerTokenService(self.db, self.clock).issue_tokens(reservation)

            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateReservation(correlation_id)

        await self.db.refresh(reservation)

        logger.info(
            "Reservation created",
            id=reservation.id,
            reservation_id=reservation.correlation_id,
            tenant_id=tenant_id,
            status=decision.status.value,
            reason=decision.reason.value,
            party_size=request.party_size,
        )

        await self._register_customer(reservation)
        self._notify_owner(reservation, decision, tokens)

        return CreatedReservation(reservation=reservation, decision=decision, tokens=tokens)

    async def _register_customer(self, reservation: Reservation) -> None:
        try:
            await register_customer(
                self.db,
                reservation.tenant_id,
                reservation.phone,
                reservation.customer_name,
                self.clock.utcnow(),
            )
        except Exception as e:
            logger.warning(
                "Failed to sync customer",
                reservation_id=reservation.id,
                tenant_id=reservation.tenant_id,
                error=str(e),
            )
            await self.db.rollback()
            await self.db.refresh(reservation)

    def _notify_owner(
        self,
        reservation: Reservation,
        decision: Decision,
        tokens: Optional[IssuedTokens],
    ) -> None:
        extra = {"reason": decision.reason.value}

        if tokens is not None:
            event_type = EventType.RESERVATION_CREATED
            extra["confirm_url"] = tokens.confirm_url
            extra["decline_url"] = tokens.decline_url
        else:
            event_type = EventType.RESERVATION_CONFIRMED

        try:
            self.dispatcher.emit(reservation_event(event_type, reservation, **extra))
        except Exception as e:
            logger.error(
                "Failed to dispatch reservation event",
                event_type=event_type.value,
                reservation_id=reservation.id,
                error=str(e),
            )
