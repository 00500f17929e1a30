"""Pydantic schemas for request/response validation"""

from reservo.schemas.auth import Token, UserResponse
from reservo.schemas.tenant import TenantResponse, PolicyResponse, PolicyUpdate
from reservo.schemas.customer import CustomerResponse, CustomerListResponse
from reservo.schemas.reservation import (
    ReservationCreate,
    ReservationResponse,
    ReservationListResponse,
    ReservationCreatedResponse,
    TransitionResponse,
    UpcomingReservationsResponse,
)

__all__ = [
    "Token",
    "UserResponse",
    "TenantResponse",
    "PolicyResponse",
    "PolicyUpdate",
    "CustomerResponse",
    "CustomerListResponse",
    "ReservationCreate",
    "ReservationResponse",
    "ReservationListResponse",
    "ReservationCreatedResponse",
    "TransitionResponse",
    "UpcomingReservationsResponse",
]
