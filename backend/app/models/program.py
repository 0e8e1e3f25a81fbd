"""
Training program (e.g. junior batting camp) that a booking is made for.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Program(Base, TimestampMixin):
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    age_group = Column(String(50), nullable=True)
    duration_weeks = Column(Integer, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    bookings = relationship("Booking", back_populates="program")

    def __repr__(self) -> str:
        return f"<Program(id={self.id}, title={self.title})>"
