"""Typed reservation events sent to the external workflow webhook"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
import enum

from pydantic import BaseModel, Field

from reservo.models.reservation import Reservation, ReservationStatus


class EventType(str, enum.Enum):
    RESERVATION_CREATED = "reservation_created"
    RESERVATION_CONFIRMED = "reservation_confirmed"
    RESERVATION_DECLINED = "reservation_declined"
    RESERVATION_COMPLETED = "reservation_completed"
    RESERVATION_NO_SHOW = "reservation_no_show"
    RESERVATION_CANCELLED = "reservation_cancelled"


TRANSITION_EVENTS = {
    ReservationStatus.CONFIRMED: EventType.RESERVATION_CONFIRMED,
    ReservationStatus.DECLINED: EventType.RESERVATION_DECLINED,
    ReservationStatus.COMPLETED: EventType.RESERVATION_COMPLETED,
    ReservationStatus.NO_SHOW: EventType.RESERVATION_NO_SHOW,
    ReservationStatus.CANCELLED: EventType.RESERVATION_CANCELLED,
}


class NotificationEvent(BaseModel):
    """Webhook body: {type, restaurant_id, ts, data}"""
    type: EventType
    restaurant_id: int
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: Dict[str, Any] = Field(default_factory=dict)


def reservation_event(
    event_type: EventType,
    reservation: Reservation,
    status_before: Optional[ReservationStatus] = None,
    **extra: Any,
) -> NotificationEvent:
    """Build an event carrying the core reservation fields"""
    data = {
        "id": reservation.id,
        "reservation_id": reservation.correlation_id,
        "date": reservation.service_date.isoformat(),
        "time": reservation.service_time,
        "party_size": reservation.party_size,
        "customer_name": reservation.customer_name,
        "phone": reservation.phone,
        "channel": reservation.channel,
        "area": reservation.area,
        "status": reservation.status.value,
        "status_before": status_before.value if status_before else None,
        "status_after": reservation.status.value,
    }
    if reservation.closed_reason:
        data["closed_reason"] = reservation.closed_reason
    data.update(extra)

    return NotificationEvent(type=event_type, restaurant_id=reservation.tenant_id, data=data)
