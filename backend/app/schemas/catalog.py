"""
Pydantic schemas for coaches, programs and students.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class CoachCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    specialization: Optional[str] = Field(None, max_length=100)
    experience_years: int = Field(0, ge=0, le=50)
    bio: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)


class CoachUpdate(BaseModel):
    """Partial update; omitted or null fields keep their current value."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    specialization: Optional[str] = Field(None, max_length=100)
    experience_years: Optional[int] = Field(None, ge=0, le=50)
    bio: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class CoachResponse(BaseModel):
    id: int
    name: str
    email: str
    specialization: Optional[str]
    experience_years: int
    bio: Optional[str]
    image_url: Optional[str]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProgramCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    age_group: Optional[str] = Field(None, max_length=50)
    duration_weeks: Optional[int] = Field(None, gt=0, le=104)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class ProgramUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    age_group: Optional[str] = Field(None, max_length=50)
    duration_weeks: Optional[int] = Field(None, gt=0, le=104)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


class ProgramResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    age_group: Optional[str]
    duration_weeks: Optional[int]
    price: Optional[Decimal]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class StudentCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20, pattern=r"^\+?[0-9 \-]{6,20}$")
    age: Optional[int] = Field(None, ge=4, le=99)


class StudentResponse(BaseModel):
    id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    age: Optional[int]
    created_at: datetime

    model_config = {"from_attributes": True}
