"""Reservation schemas"""

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from reservo.models.reservation import ReservationStatus


class ReservationCreate(BaseModel):
    """
    Create reservation request.

    Fields stay loose here; intake normalization reports the specific
    error code for a missing or malformed value.
    """
    customer_name: Optional[str] = None
    phone: Optional[str] = Field(None, validation_alias=AliasChoices("phone", "customer_phone"))
    date: Optional[str] = None
    time: Optional[str] = None
    party_size: Optional[Any] = Field(None, validation_alias=AliasChoices("party_size", "people"))
    channel: Optional[str] = None
    area: Optional[str] = None
    allergies: Optional[str] = None
    special_requests: Optional[str] = None
    reservation_id: Optional[str] = None

    class Config:
        populate_by_name = True


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: int
    tenant_id: int
    reservation_id: str = Field(validation_alias="correlation_id")
    customer_name: str
    phone: str
    service_date: date
    service_time: str
    party_size: int
    channel: Optional[str]
    area: Optional[str]
    allergies: Optional[str]
    special_requests: Optional[str]
    status: ReservationStatus
    decision_reason: Optional[str]
    closed_at: Optional[datetime]
    closed_reason: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class ReservationListResponse(BaseModel):
    """Paginated reservation list"""
    items: List[ReservationResponse]
    total: int
    page: int
    page_size: int


class ReservationCreatedResponse(BaseModel):
    """Outcome of a create request"""
    id: int
    reservation_id: str
    status: ReservationStatus
    reason: str
    confirm_url: Optional[str] = None
    decline_url: Optional[str] = None
    reservation: ReservationResponse


class TransitionResponse(BaseModel):
    """Result of an owner action"""
    status_before: ReservationStatus
    status_after: ReservationStatus
    reservation: ReservationResponse


class UpcomingReservationsResponse(BaseModel):
    """Reservations from today through today + days"""
    from_date: date
    to_date: date
    days: int
    count: int
    items: List[ReservationResponse]
