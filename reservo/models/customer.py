"""Customer model"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from reservo.booking.clock import utcnow
from reservo.database import Base


class Customer(Base):
    """Per-tenant guest record with aggregate visit statistics"""
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("tenant_id", "phone", name="uq_customers_tenant_phone"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)

    phone = Column(String(32), nullable=False)
    full_name = Column(String(255))

    # Visit statistics, only advanced by completed reservations
    first_seen_at = Column(DateTime)
    last_seen_at = Column(DateTime)
    visits_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    tenant = relationship("Tenant", back_populates="customers")
