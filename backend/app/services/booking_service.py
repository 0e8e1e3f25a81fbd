"""
Booking service: conflict detection, slot availability and the booking
lifecycle.

CONCURRENCY STRATEGY: Per-coach row lock + partial unique index
================================================================

Problem:
  Two parents ask for the same coach at 10:00 on the same day.
  Both requests read "no overlapping booking", both insert.
  Result: the coach is double booked.

Solution:
  1. The create transaction locks the coach row first
     (SELECT ... FROM coaches WHERE id = :coach_id FOR UPDATE).
     Every create for that coach queues behind it, so the overlap check and
     the insert see a stable set of bookings. Creates for other coaches are
     not affected.
  2. A partial unique index on (coach_id, booking_date, start_time) over
     pending/confirmed rows is the final safety net. If an insert still
     collides (a backend without row locks, a write that skipped this
     service), the IntegrityError is reported as a Conflict, never as a 500.

  Locking the coach is coarser than locking (coach, date), but bookings for
  one coach are rare enough that the serialization is never noticeable, and
  it needs no extra lock table or advisory-lock key scheme.

Overlap rule:
  Intervals are half-open. [s1, e1) and [s2, e2) conflict iff s1 < e2 and
  e1 > s2, so back-to-back sessions are allowed. Only pending and confirmed
  bookings occupy a coach. Slot availability uses the same rule as the
  conflict check, so a slot offered as available can always be booked.
"""

from datetime import date, time
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import Conflict, InvalidState, NotFound, ValidationError
from app.core.logging import get_logger
from app.core.metrics import (
    booking_latency, record_booking_attempt, record_slot_query, record_transition,
)
from app.models.booking import Booking, BookingStatus, OCCUPYING_STATUSES, ensure_transition
from app.models.coach import Coach
from app.models.program import Program
from app.models.student import Student
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services.scheduling import Slot, SlotGrid, free_slots, intervals_overlap

logger = get_logger(__name__)

SLOT_TAKEN_MESSAGE = "Time slot is already booked"


async def _occupied_intervals(
    db: AsyncSession,
    coach_id: int,
    booking_date: date,
    exclude_booking_id: Optional[int] = None,
) -> list[tuple[time, time]]:
    """(start, end) of every booking holding the coach's time on that date."""
    query = select(Booking.start_time, Booking.end_time).where(
        Booking.coach_id == coach_id,
        Booking.booking_date == booking_date,
        Booking.status.in_(OCCUPYING_STATUSES),
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query.order_by(Booking.start_time))
    return [(row.start_time, row.end_time) for row in result]


async def check_conflict(
    db: AsyncSession,
    coach_id: int,
    booking_date: date,
    start_time: time,
    end_time: time,
    exclude_booking_id: Optional[int] = None,
) -> bool:
    """
    True if [start_time, end_time) overlaps an occupying booking of the coach
    on booking_date. Pass exclude_booking_id when re-checking an existing
    booking so it is not compared with itself. Read-only.
    """
    occupied = await _occupied_intervals(db, coach_id, booking_date, exclude_booking_id)
    return any(intervals_overlap(start_time, end_time, s, e) for s, e in occupied)


async def get_available_slots(
    db: AsyncSession,
    coach_id: Optional[int],
    booking_date: Optional[date],
    grid: Optional[SlotGrid] = None,
) -> list[Slot]:
    """
    Free slots of the coach's day, ascending. Computed from the database on
    every call.
    """
    if not coach_id or not booking_date:
        raise ValidationError("Coach ID and date are required")

    grid = grid or SlotGrid.from_settings()
    occupied = await _occupied_intervals(db, coach_id, booking_date)
    available = free_slots(grid.slots(), occupied)

    record_slot_query(len(available))
    logger.debug(
        "slots_computed",
        coach_id=coach_id,
        date=booking_date,
        occupied=len(occupied),
        available=len(available),
    )
    return available


async def _require(db: AsyncSession, model, object_id: int, label: str):
    instance = await db.get(model, object_id)
    if instance is None:
        raise NotFound(f"{label} not found")
    return instance


async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
    """
    Create a pending booking if the coach is free for the whole interval.
    Raises Conflict when the interval overlaps an occupying booking, and
    InvalidState when the coach or program has been deactivated.
    """
    with booking_latency.time():
        await _require(db, Student, data.student_id, "Student")
        program = await _require(db, Program, data.program_id, "Program")
        if not program.is_active:
            raise InvalidState("Program is no longer offered")

        # Serialize creates per coach; see module docstring
        result = await db.execute(
            select(Coach).where(Coach.id == data.coach_id).with_for_update()
        )
        coach = result.scalar_one_or_none()
        if coach is None:
            raise NotFound("Coach not found")
        if not coach.is_active:
            raise InvalidState("Coach is not taking bookings")

        if await check_conflict(
            db, data.coach_id, data.booking_date, data.start_time, data.end_time
        ):
            record_booking_attempt("conflict")
            logger.info(
                "booking_conflict",
                coach_id=data.coach_id,
                date=data.booking_date,
                start=data.start_time,
                end=data.end_time,
            )
            raise Conflict(SLOT_TAKEN_MESSAGE)

        booking = Booking(
            student_id=data.student_id,
            program_id=data.program_id,
            coach_id=data.coach_id,
            booking_date=data.booking_date,
            start_time=data.start_time,
            end_time=data.end_time,
            notes=data.notes,
            status=BookingStatus.PENDING.value,
        )
        db.add(booking)
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            record_booking_attempt("conflict")
            logger.warning(
                "booking_conflict_constraint",
                coach_id=data.coach_id,
                date=data.booking_date,
                start=data.start_time,
                error=str(e.orig),
            )
            raise Conflict(SLOT_TAKEN_MESSAGE) from e

        await db.refresh(booking)

    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        coach_id=booking.coach_id,
        student_id=booking.student_id,
        date=booking.booking_date,
        start=booking.start_time,
        end=booking.end_time,
    )
    return booking


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFound("Booking not found")
    return booking


async def list_bookings(
    db: AsyncSession,
    status: Optional[BookingStatus] = None,
    booking_date: Optional[date] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Booking], int]:
    """Paginated bookings, newest date first, earliest start first within a day."""
    query = select(Booking)

    if status is not None:
        query = query.where(Booking.status == BookingStatus(status).value)
    if booking_date is not None:
        query = query.where(Booking.booking_date == booking_date)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar()

    result = await db.execute(
        query
        .order_by(Booking.booking_date.desc(), Booking.start_time.asc(), Booking.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def update_booking(db: AsyncSession, booking_id: int, data: BookingUpdate) -> Booking:
    """Partial update of status and/or notes. Status changes must be legal transitions."""
    booking = await get_booking(db, booking_id)

    if data.status is not None:
        previous = booking.status
        ensure_transition(previous, data.status)
        booking.status = BookingStatus(data.status).value
        if previous != booking.status:
            record_transition(previous, booking.status)

    if data.notes is not None:
        booking.notes = data.notes

    await db.flush()
    await db.refresh(booking)

    logger.info("booking_updated", booking_id=booking.id, status=booking.status)
    return booking


async def cancel_booking(db: AsyncSession, booking_id: int) -> Booking:
    """Cancel a booking. Completed bookings cannot be cancelled."""
    booking = await get_booking(db, booking_id)

    previous = booking.status
    ensure_transition(previous, BookingStatus.CANCELLED.value)
    booking.status = BookingStatus.CANCELLED.value
    await db.flush()
    await db.refresh(booking)

    if previous != booking.status:
        record_transition(previous, booking.status)
    logger.info("booking_cancelled", booking_id=booking.id, previous_status=previous)
    return booking
