"""
Booking model representing a student's session with a coach.

Key design decisions:
- Status is a small state machine (see ALLOWED_TRANSITIONS); every status
  change goes through ensure_transition()
- Only pending/confirmed bookings occupy a coach's time
- Partial unique index on (coach_id, booking_date, start_time) over occupying
  rows is the database-level backstop against double booking
- Composite index on (coach_id, booking_date) serves the conflict check and
  slot availability queries
"""

import enum

from sqlalchemy import (
    Column, Integer, String, Text, Date, Time, ForeignKey, Index, CheckConstraint, text,
)
from sqlalchemy.orm import relationship

from app.core.exceptions import InvalidState
from app.db.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


OCCUPYING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: str, target: str) -> None:
    """Raise InvalidState unless `current -> target` is a legal status change."""
    current_status = BookingStatus(current)
    target_status = BookingStatus(target)
    if can_transition(current_status, target_status):
        return
    if current_status == BookingStatus.COMPLETED and target_status == BookingStatus.CANCELLED:
        raise InvalidState("Cannot cancel completed booking")
    raise InvalidState(
        f"Cannot change booking status from {current_status.value} to {target_status.value}"
    )


_OCCUPYING_CLAUSE = text("status IN ('pending', 'confirmed')")


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    program_id = Column(Integer, ForeignKey("programs.id"), nullable=False, index=True)
    coach_id = Column(Integer, ForeignKey("coaches.id"), nullable=False)
    booking_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    notes = Column(Text, nullable=True)

    # Relationships
    student = relationship("Student", back_populates="bookings", lazy="selectin")
    program = relationship("Program", back_populates="bookings", lazy="selectin")
    coach = relationship("Coach", back_populates="bookings", lazy="selectin")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_booking_time_order"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
        Index("ix_bookings_coach_date", "coach_id", "booking_date"),
        Index("ix_bookings_date_start", "booking_date", "start_time"),
        Index(
            "uq_bookings_coach_active_slot",
            "coach_id",
            "booking_date",
            "start_time",
            unique=True,
            postgresql_where=_OCCUPYING_CLAUSE,
            sqlite_where=_OCCUPYING_CLAUSE,
        ),
    )

    @property
    def student_name(self):
        return self.student.name if self.student else None

    @property
    def program_title(self):
        return self.program.title if self.program else None

    @property
    def coach_name(self):
        return self.coach.name if self.coach else None

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, coach={self.coach_id}, date={self.booking_date}, "
            f"{self.start_time}-{self.end_time}, status={self.status})>"
        )
