"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import date, datetime, time
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.booking import BookingStatus


class BookingCreate(BaseModel):
    student_id: int = Field(..., gt=0)
    program_id: int = Field(..., gt=0)
    coach_id: int = Field(..., gt=0)
    booking_date: date
    start_time: time
    end_time: time
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("start_time", "end_time")
    @classmethod
    def check_local_time(cls, value: time) -> time:
        # Stored session times are academy wall-clock times without an offset
        if value.tzinfo is not None:
            raise ValueError("times must not carry a UTC offset")
        return value

    @model_validator(mode="after")
    def check_time_order(self) -> "BookingCreate":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class BookingUpdate(BaseModel):
    status: Optional[BookingStatus] = None
    notes: Optional[str] = Field(None, max_length=2000)


class BookingResponse(BaseModel):
    id: int
    student_id: int
    program_id: int
    coach_id: int
    booking_date: date
    start_time: time
    end_time: time
    status: BookingStatus
    notes: Optional[str]
    student_name: Optional[str] = None
    program_title: Optional[str] = None
    coach_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingEnvelope(BaseModel):
    booking: BookingResponse
    message: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]
    pagination: Pagination


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: int
    status: BookingStatus


class SlotResponse(BaseModel):
    start_time: time
    end_time: time


class AvailableSlotsResponse(BaseModel):
    availableSlots: list[SlotResponse]
