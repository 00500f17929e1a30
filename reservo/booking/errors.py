"""Reservation error taxonomy"""

from typing import Any, Dict, Optional


class ReservationError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 400
    error_code = "RESERVATION_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error_code": self.error_code}


class ReservationValidationError(ReservationError):
    """Malformed or missing input; the caller can correct it"""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class ReservationNotFound(ReservationError):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, reservation_id: int):
        super().__init__("Reservation not found")
        self.reservation_id = reservation_id


class StateConflict(ReservationError):
    """The stored status is not the one the transition expected"""

    status_code = 409
    error_code = "STATE_CONFLICT"

    def __init__(self, current_status, message: Optional[str] = None, reservation=None):
        status_value = getattr(current_status, "value", current_status)
        super().__init__(message or f"State changed, current status is {status_value}")
        self.current_status = current_status
        self.reservation = reservation

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["current_status"] = getattr(self.current_status, "value", self.current_status)
        return data


class AlreadyClosed(ReservationError):
    """The reservation already reached a terminal status"""

    status_code = 409
    error_code = "ALREADY_CLOSED"

    def __init__(self, reservation):
        status_value = reservation.status.value
        super().__init__(f"Already closed ({status_value})")
        self.reservation = reservation
        self.current_status = reservation.status


class TokenError(ReservationError):
    pass


class TokenNotFound(TokenError):
    status_code = 404
    error_code = "TOKEN_NOT_FOUND"

    def __init__(self):
        super().__init__("Token not found")


class TokenActionMismatch(TokenError):
    status_code = 409
    error_code = "TOKEN_ACTION_MISMATCH"

    def __init__(self):
        super().__init__("Token action mismatch")


class TokenAlreadyUsed(TokenError):
    status_code = 409
    error_code = "TOKEN_ALREADY_USED"

    def __init__(self):
        super().__init__("Token already used")


class TokenExpired(TokenError):
    status_code = 410
    error_code = "TOKEN_EXPIRED"

    def __init__(self):
        super().__init__("Token expired")


class TokensAlreadyIssued(ReservationError):
    status_code = 409
    error_code = "TOKENS_ALREADY_ISSUED"

    def __init__(self, reservation_id: int):
        super().__init__("Owner action tokens already issued for this reservation")
        self.reservation_id = reservation_id


class PolicyUnavailable(Exception):
    """Tenant policy could not be read; callers fall back to defaults"""


class DuplicateReservation(ReservationError):
    status_code = 409
    error_code = "DUPLICATE_RESERVATION"

    def __init__(self, correlation_id: str):
        super().__init__(f"Duplicate reservation: {correlation_id}")
        self.correlation_id = correlation_id
