"""Initial status decision for incoming reservations"""

from datetime import date, datetime
import enum

from pydantic import BaseModel

from reservo.booking.clock import is_strict_hhmm, normalize_time
from reservo.booking.policy import ReservationPolicy
from reservo.models.reservation import ReservationStatus


class DecisionReason(str, enum.Enum):
    GROUP_OVER_THRESHOLD = "group_over_threshold"
    SAME_DAY_AFTER_CUTOFF = "same_day_after_cutoff"
    SAME_DAY_BEFORE_CUTOFF = "same_day_before_cutoff"
    CUTOFF_INVALID_FAILSAFE = "cutoff_invalid_failsafe"
    FUTURE_AUTO_CONFIRM = "future_auto_confirm"


class Decision(BaseModel):
    status: ReservationStatus
    reason: DecisionReason


def decide_status(
    policy: ReservationPolicy,
    service_date: date,
    service_time: str,
    party_size: int,
    now: datetime,
) -> Decision:
    """
    Decide whether a reservation is auto-confirmed or held for the owner.

    `now` must already be expressed in the civil time zone. Rules, first match wins:

    1. Groups above the tenant ceiling always wait for the owner.
    2. Same-day requests are confirmed only before the cutoff time; an invalid
       cutoff holds the request instead of confirming it.
    3. Any other date is confirmed.
    """
    if party_size > policy.max_auto_confirm_people:
        return Decision(status=ReservationStatus.PENDING, reason=DecisionReason.GROUP_OVER_THRESHOLD)

    if service_date == now.date():
        cutoff = policy.cutoff_time
        if not is_strict_hhmm(cutoff):
            return Decision(status=ReservationStatus.PENDING, reason=DecisionReason.CUTOFF_INVALID_FAILSAFE)

        if now.strftime("%H:%M") >= cutoff:
            return Decision(status=ReservationStatus.PENDING, reason=DecisionReason.SAME_DAY_AFTER_CUTOFF)

        return Decision(status=ReservationStatus.CONFIRMED, reason=DecisionReason.SAME_DAY_BEFORE_CUTOFF)

    return Decision(status=ReservationStatus.CONFIRMED, reason=DecisionReason.FUTURE_AUTO_CONFIRM)


def is_time_passed_today(service_date: date, service_time: str, now: datetime) -> bool:
    """True when the requested slot is today and already behind the civil clock"""
    if service_date != now.date():
        return False

    hhmm = normalize_time(service_time)
    if hhmm is None:
        return False

    return hhmm < now.strftime("%H:%M")
