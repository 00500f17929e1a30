"""User model for dashboard authentication"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Enum, Integer
from sqlalchemy.orm import relationship
import enum

from reservo.booking.clock import utcnow
from reservo.database import Base


class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    SUPER_ADMIN = "super_admin"
    RESTAURANT_ADMIN = "restaurant_admin"
    STAFF_VIEWER = "staff_viewer"


class User(Base):
    """Dashboard users; restaurant admins are the reservation owners"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"))

    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255))

    role = Column(Enum(UserRole), default=UserRole.STAFF_VIEWER)
    is_active = Column(Boolean, default=True)

    last_login = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="users")

    def has_permission(self, required_role: UserRole) -> bool:
        """Check if user has at least the required role level"""
        role_hierarchy = {
            UserRole.STAFF_VIEWER: 1,
            UserRole.RESTAURANT_ADMIN: 2,
            UserRole.SUPER_ADMIN: 3,
        }
        return role_hierarchy.get(self.role, 0) >= role_hierarchy.get(required_role, 0)
