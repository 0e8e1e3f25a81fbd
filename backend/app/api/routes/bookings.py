"""
Booking endpoints: public booking and slot lookup, admin management.
"""

from datetime import date
from math import ceil
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import require_admin
from app.db.session import get_db
from app.models.booking import BookingStatus
from app.schemas.booking import (
    AvailableSlotsResponse,
    BookingCancelResponse,
    BookingCreate,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
    Pagination,
    SlotResponse,
)
from app.services.booking_service import (
    cancel_booking,
    create_booking,
    get_available_slots,
    get_booking,
    list_bookings,
    update_booking,
)

settings = get_settings()
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("", response_model=BookingListResponse, dependencies=[Depends(require_admin)])
async def list_bookings_endpoint(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    booking_date: Optional[date] = Query(None, alias="date"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    """List bookings, newest date first. Admin only."""
    bookings, total = await list_bookings(db, status_filter, booking_date, page, limit)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            totalPages=ceil(total / limit),
        ),
    )


@router.get("/available-slots", response_model=AvailableSlotsResponse)
async def available_slots_endpoint(
    coach_id: Optional[int] = Query(None),
    booking_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
):
    """
    Free slots of a coach's day. Never cached: the answer must reflect
    bookings made a moment ago.
    """
    slots = await get_available_slots(db, coach_id, booking_date)
    return AvailableSlotsResponse(
        availableSlots=[SlotResponse(start_time=s.start_time, end_time=s.end_time) for s in slots]
    )


@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Book a session with a coach. Public.

    Returns 409 if the requested interval overlaps a pending or confirmed
    booking of the same coach on that date.
    """
    booking = await create_booking(db, booking_data)
    return BookingEnvelope(
        message="Booking created successfully",
        booking=BookingResponse.model_validate(booking),
    )


@router.get("/{booking_id}", response_model=BookingEnvelope, dependencies=[Depends(require_admin)])
async def get_booking_endpoint(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    booking = await get_booking(db, booking_id)
    return BookingEnvelope(booking=BookingResponse.model_validate(booking))


@router.put("/{booking_id}", response_model=BookingEnvelope, dependencies=[Depends(require_admin)])
async def update_booking_endpoint(
    booking_id: int,
    booking_data: BookingUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Change status and/or notes. Admin only."""
    booking = await update_booking(db, booking_id, booking_data)
    return BookingEnvelope(
        message="Booking updated successfully",
        booking=BookingResponse.model_validate(booking),
    )


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking. The record is kept with status cancelled."""
    booking = await cancel_booking(db, booking_id)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
    )


@router.patch("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking_patch_endpoint(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Same as DELETE /bookings/{id}; kept for older website clients."""
    return await cancel_booking_endpoint(booking_id, db)
