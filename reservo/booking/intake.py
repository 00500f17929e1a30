"""Normalization of raw reservation payloads into a typed request"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel

from reservo.booking.clock import normalize_time
from reservo.booking.errors import ReservationValidationError
from reservo.models.reservation import Reservation
from reservo.schemas.reservation import ReservationCreate

REQUIRED_FIELDS = ("customer_name", "phone", "date", "time", "party_size")

MAX_PARTY_SIZE = 1000

# Payload field -> stored column; values must fit the column width
_COLUMNS = Reservation.__table__.c
FIELD_MAX_LENGTHS = {
    "customer_name": _COLUMNS.customer_name.type.length,
    "phone": _COLUMNS.phone.type.length,
    "channel": _COLUMNS.channel.type.length,
    "area": _COLUMNS.area.type.length,
    "reservation_id": _COLUMNS.correlation_id.type.length,
}


class ReservationRequest(BaseModel):
    """Validated reservation request, the only input shape the engine accepts"""
    customer_name: str
    phone: str
    service_date: date
    service_time: str
    party_size: int
    channel: Optional[str] = None
    area: Optional[str] = None
    allergies: str = ""
    special_requests: str = ""
    correlation_id: Optional[str] = None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_party_size(value: Any) -> int:
    size = None
    if isinstance(value, bool):
        size = None
    elif isinstance(value, int):
        size = value
    elif isinstance(value, float) and value.is_integer():
        size = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        size = int(value.strip())

    if size is None or size <= 0:
        raise ReservationValidationError("party_size must be a positive integer", "INVALID_PARTY_SIZE")
    if size > MAX_PARTY_SIZE:
        raise ReservationValidationError(
            f"party_size must not exceed {MAX_PARTY_SIZE}", "INVALID_PARTY_SIZE"
        )
    return size


def _check_lengths(payload: ReservationCreate) -> None:
    for field, max_length in FIELD_MAX_LENGTHS.items():
        value = getattr(payload, field)
        if value is not None and len(str(value).strip()) > max_length:
            raise ReservationValidationError(
                f"{field} must be at most {max_length} characters", "VALIDATION_ERROR"
            )


def _parse_date(value: Any) -> date:
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ReservationValidationError("date must be formatted as YYYY-MM-DD", "INVALID_DATE")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def normalize_reservation_request(payload: ReservationCreate) -> ReservationRequest:
    """Validate a create payload; raises ReservationValidationError with a field-specific code"""
    for field in REQUIRED_FIELDS:
        if _is_blank(getattr(payload, field)):
            raise ReservationValidationError(f"Missing field: {field}", "MISSING_FIELD")

    _check_lengths(payload)
    party_size = _parse_party_size(payload.party_size)
    service_date = _parse_date(payload.date)

    service_time = normalize_time(payload.time)
    if service_time is None:
        raise ReservationValidationError("time must be a valid HH:MM time", "INVALID_TIME")

    return ReservationRequest(
        customer_name=payload.customer_name.strip(),
        phone=payload.phone.strip(),
        service_date=service_date,
        service_time=service_time,
        party_size=party_size,
        channel=_clean(payload.channel),
        area=_clean(payload.area),
        allergies=payload.allergies or "",
        special_requests=payload.special_requests or "",
        correlation_id=_clean(payload.reservation_id),
    )
