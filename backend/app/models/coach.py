"""
Coach profile. The coach row is also the lock target when bookings for that
coach are created, so creates for one coach run one at a time.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Coach(Base, TimestampMixin):
    __tablename__ = "coaches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    specialization = Column(String(100), nullable=True)
    experience_years = Column(Integer, nullable=False, default=0)
    bio = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    bookings = relationship("Booking", back_populates="coach")

    __table_args__ = (
        CheckConstraint("experience_years >= 0", name="check_coach_experience_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Coach(id={self.id}, name={self.name})>"
