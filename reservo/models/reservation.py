"""Reservation model"""

import enum
import uuid

from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Text, Enum, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from reservo.booking.clock import utcnow
from reservo.database import Base


class ReservationStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    DECLINED = "Declined"
    COMPLETED = "Completed"
    NO_SHOW = "NoShow"
    CANCELLED = "Cancelled"


OPEN_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset(set(ReservationStatus) - OPEN_STATUSES)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"
    __table_args__ = (
        UniqueConstraint("tenant_id", "correlation_id", name="uq_reservations_tenant_correlation"),
        Index("ix_reservations_tenant_status_date", "tenant_id", "status", "service_date"),
        Index("ix_reservations_tenant_phone", "tenant_id", "phone"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)
    correlation_id = Column(String(64), nullable=False, default=lambda: str(uuid.uuid4()))

    # Customer information
    customer_name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False)

    # Reservation details
    service_date = Column(Date, nullable=False)
    service_time = Column(String(5), nullable=False)  # zero-padded "HH:MM"
    party_size = Column(Integer, nullable=False)
    channel = Column(String(50))
    area = Column(String(50))
    allergies = Column(Text, default="")
    special_requests = Column(Text, default="")

    # Lifecycle
    status = Column(
        Enum(ReservationStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=ReservationStatus.PENDING,
    )
    decision_reason = Column(String(50))
    closed_at = Column(DateTime)
    closed_reason = Column(String(50), default="")

    # Metadata
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="reservations")
    action_tokens = relationship("OwnerActionToken", back_populates="reservation")
