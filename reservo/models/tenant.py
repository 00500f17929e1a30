"""Tenant model"""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, CheckConstraint
from sqlalchemy.orm import relationship

from reservo.booking.clock import utcnow
from reservo.database import Base


class Tenant(Base):
    """Restaurant tenant and its reservation policy"""
    __tablename__ = "tenants"
    __table_args__ = (
        CheckConstraint(
            "max_auto_confirm_people BETWEEN 1 AND 50",
            name="ck_tenants_max_auto_confirm_people",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)

    # Reservation policy
    max_auto_confirm_people = Column(Integer, nullable=False, default=6)
    same_day_cutoff = Column(String(5), nullable=False, default="11:00")  # "HH:MM"

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    users = relationship("User", back_populates="tenant")
    reservations = relationship("Reservation", back_populates="tenant")
    customers = relationship("Customer", back_populates="tenant")
