"""
Back-office account allowed to manage bookings and catalog content.
"""

from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint

from app.db.base import Base, TimestampMixin

ADMIN_ROLES = ("admin", "super-admin")


class Admin(Base, TimestampMixin):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="admin")
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'super-admin')", name="check_admin_role"),
    )

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, email={self.email}, role={self.role})>"
