from app.schemas.admin import AdminLogin, AdminResponse, Token
from app.schemas.booking import (
    BookingCreate, BookingUpdate, BookingResponse, BookingEnvelope,
    BookingListResponse, BookingCancelResponse, AvailableSlotsResponse,
)
from app.schemas.catalog import (
    CoachCreate, CoachUpdate, CoachResponse, ProgramCreate, ProgramUpdate, ProgramResponse,
    StudentCreate, StudentResponse,
)

__all__ = [
    "AdminLogin", "AdminResponse", "Token",
    "BookingCreate", "BookingUpdate", "BookingResponse", "BookingEnvelope",
    "BookingListResponse", "BookingCancelResponse", "AvailableSlotsResponse",
    "CoachCreate", "CoachUpdate", "CoachResponse", "ProgramCreate", "ProgramUpdate", "ProgramResponse",
    "StudentCreate", "StudentResponse",
]
