from app.models.admin import Admin
from app.models.booking import Booking, BookingStatus
from app.models.coach import Coach
from app.models.program import Program
from app.models.student import Student

__all__ = ["Admin", "Booking", "BookingStatus", "Coach", "Program", "Student"]
