"""Owner click-link tokens"""

import enum

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship

from reservo.booking.clock import utcnow
from reservo.database import Base


class TokenAction(str, enum.Enum):
    CONFIRM = "confirm"
    DECLINE = "decline"


class OwnerActionToken(Base):
    """Single-use, action-scoped credential embedded in an owner link"""
    __tablename__ = "owner_action_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False, index=True)

    token = Column(String(64), unique=True, nullable=False)
    action = Column(
        Enum(TokenAction, native_enum=False, length=10, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    expires_at = Column(DateTime, nullable=False)
    used_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow)

    reservation = relationship("Reservation", back_populates="action_tokens")
