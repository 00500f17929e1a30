"""Database models"""

from reservo.models.tenant import Tenant
from reservo.models.user import User, UserRole
from reservo.models.reservation import Reservation, ReservationStatus
from reservo.models.owner_token import OwnerActionToken, TokenAction
from reservo.models.customer import Customer

__all__ = [
    "Tenant",
    "User",
    "UserRole",
    "Reservation",
    "ReservationStatus",
    "OwnerActionToken",
    "TokenAction",
    "Customer",
]
