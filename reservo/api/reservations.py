"""Reservation management API endpoints"""

from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status as http_status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from reservo.booking.clock import Clock
from reservo.booking.intake import normalize_reservation_request
from reservo.booking.lifecycle import OwnerAction, ReservationLifecycle, load_reservation
from reservo.booking.service import ReservationService
from reservo.database import get_db
from reservo.models.reservation import Reservation, ReservationStatus
from reservo.models.user import User, UserRole
from reservo.notifications.base import NotificationDispatcher
from reservo.schemas.reservation import (
    ReservationCreate,
    ReservationResponse,
    ReservationListResponse,
    ReservationCreatedResponse,
    TransitionResponse,
    UpcomingReservationsResponse,
)
from reservo.api.auth import get_current_active_user, require_role, verify_tenant_access
from reservo.api.deps import get_clock, get_dispatcher
from reservo.api.tenants import get_tenant_or_404

router = APIRouter()


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    tenant_id: int,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[ReservationStatus] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List reservations for a tenant with pagination"""
    await verify_tenant_access(tenant_id, current_user)

    query = select(Reservation).where(Reservation.tenant_id == tenant_id)
    count_query = select(func.count(Reservation.id)).where(Reservation.tenant_id == tenant_id)

    if status:
        query = query.where(Reservation.status == status)
        count_query = count_query.where(Reservation.status == status)

    if from_date:
        query = query.where(Reservation.service_date >= from_date)
        count_query = count_query.where(Reservation.service_date >= from_date)

    if to_date:
        query = query.where(Reservation.service_date <= to_date)
        count_query = count_query.where(Reservation.service_date <= to_date)

    # Get total
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Get paginated results
    offset = (page - 1) * page_size
    query = (
        query.order_by(Reservation.service_date.desc(), Reservation.service_time.desc(), Reservation.id.desc())
        .offset(offset)
        .limit(page_size)
    )

    result = await db.execute(query)
    reservations = result.scalars().all()

    return ReservationListResponse(
        items=[ReservationResponse.model_validate(r) for r in reservations],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/upcoming", response_model=UpcomingReservationsResponse)
async def upcoming_reservations(
    tenant_id: int,
    days: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Reservations from today (restaurant time) through the next `days` days"""
    await verify_tenant_access(tenant_id, current_user)

    today = clock.today()
    end = today + timedelta(days=days)

    result = await db.execute(
        select(Reservation)
        .where(
            Reservation.tenant_id == tenant_id,
            Reservation.service_date >= today,
            Reservation.service_date <= end,
        )
        .order_by(Reservation.service_date.asc(), Reservation.service_time.asc(), Reservation.created_at.asc())
    )
    reservations = result.scalars().all()

    return UpcomingReservationsResponse(
        from_date=today,
        to_date=end,
        days=days,
        count=len(reservations),
        items=[ReservationResponse.model_validate(r) for r in reservations],
    )


@router.post("", response_model=ReservationCreatedResponse, status_code=http_status.HTTP_201_CREATED)
async def create_reservation(
    tenant_id: int,
    reservation_data: ReservationCreate,
    response: Response,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """
    Create a reservation. Returns 201 when it was auto-confirmed and 202 when it
    waits for the owner, in which case the owner click links are included.
    """
    await verify_tenant_access(tenant_id, current_user)
    await get_tenant_or_404(db, tenant_id)

    request = normalize_reservation_request(reservation_data)
    created = await ReservationService(db, dispatcher, clock).create(tenant_id, request)

    if created.decision.status == ReservationStatus.PENDING:
        response.status_code = http_status.HTTP_202_ACCEPTED

    reservation = created.reservation
    return ReservationCreatedResponse(
        id=reservation.id,
        reservation_id=reservation.correlation_id,
        status=created.decision.status,
        reason=created.decision.reason.value,
        confirm_url=created.tokens.confirm_url if created.tokens else None,
        decline_url=created.tokens.decline_url if created.tokens else None,
        reservation=ReservationResponse.model_validate(reservation),
    )


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    tenant_id: int,
    reservation_id: int,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get reservation details"""
    await verify_tenant_access(tenant_id, current_user)

    reservation = await load_reservation(db, tenant_id, reservation_id)
    return ReservationResponse.model_validate(reservation)


async def _apply_owner_action(
    tenant_id: int,
    reservation_id: int,
    action: OwnerAction,
    current_user: User,
    db: AsyncSession,
    dispatcher: NotificationDispatcher,
    clock: Clock,
) -> TransitionResponse:
    await verify_tenant_access(tenant_id, current_user)

    lifecycle = ReservationLifecycle(db, dispatcher, clock)
    result = await lifecycle.apply(tenant_id, reservation_id, action, actor="owner")

    return TransitionResponse(
        status_before=result.status_before,
        status_after=result.status_after,
        reservation=ReservationResponse.model_validate(result.reservation),
    )


@router.post("/{reservation_id}/confirm", response_model=TransitionResponse)
async def confirm_reservation(
    tenant_id: int,
    reservation_id: int,
    current_user: User = Depends(require_role(UserRole.RESTAURANT_ADMIN)),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Pending -> Confirmed"""
    return await _apply_owner_action(
        tenant_id, reservation_id, OwnerAction.CONFIRM, current_user, db, dispatcher, clock
    )


@router.post("/{reservation_id}/decline", response_model=TransitionResponse)
async def decline_reservation(
    tenant_id: int,
    reservation_id: int,
    current_user: User = Depends(require_role(UserRole.RESTAURANT_ADMIN)),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Pending -> Declined"""
    return await _apply_owner_action(
        tenant_id, reservation_id, OwnerAction.DECLINE, current_user, db, dispatcher, clock
    )


@router.post("/{reservation_id}/complete", response_model=TransitionResponse)
async def complete_reservation(
    tenant_id: int,
    reservation_id: int,
    current_user: User = Depends(require_role(UserRole.RESTAURANT_ADMIN)),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Confirmed -> Completed"""
    return await _apply_owner_action(
        tenant_id, reservation_id, OwnerAction.COMPLETE, current_user, db, dispatcher, clock
    )


@router.post("/{reservation_id}/no-show", response_model=TransitionResponse)
async def no_show_reservation(
    tenant_id: int,
    reservation_id: int,
    current_user: User = Depends(require_role(UserRole.RESTAURANT_ADMIN)),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Pending or Confirmed -> NoShow"""
    return await _apply_owner_action(
        tenant_id, reservation_id, OwnerAction.NO_SHOW, current_user, db, dispatcher, clock
    )


@router.post("/{reservation_id}/cancel", response_model=TransitionResponse)
async def cancel_reservation(
    tenant_id: int,
    reservation_id: int,
    current_user: User = Depends(require_role(UserRole.RESTAURANT_ADMIN)),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Pending or Confirmed -> Cancelled"""
    return await _apply_owner_action(
        tenant_id, reservation_id, OwnerAction.CANCEL, current_user, db, dispatcher, clock
    )
