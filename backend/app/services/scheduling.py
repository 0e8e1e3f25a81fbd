"""
Pure scheduling rules shared by the conflict checker and slot availability.

Intervals are half-open, [start, end): a session ending at 11:00 and one
starting at 11:00 do not overlap.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable

from app.core.config import get_settings


@dataclass(frozen=True)
class Slot:
    start_time: time
    end_time: time


@dataclass(frozen=True)
class SlotGrid:
    """Bookable day for a coach: fixed-width slots from start_hour to end_hour."""

    start_hour: int = 9
    end_hour: int = 18
    slot_minutes: int = 60

    def __post_init__(self):
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError(f"Invalid slot day {self.start_hour}:00-{self.end_hour}:00")
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")

    @classmethod
    def from_settings(cls) -> "SlotGrid":
        settings = get_settings()
        return cls(
            start_hour=settings.SLOT_DAY_START_HOUR,
            end_hour=settings.SLOT_DAY_END_HOUR,
            slot_minutes=settings.SLOT_MINUTES,
        )

    def slots(self) -> list[Slot]:
        """Candidate slots in ascending order. A trailing partial slot is dropped."""
        # Any fixed date works; only the time-of-day parts are kept
        day = date(2000, 1, 1)
        cursor = datetime.combine(day, time(self.start_hour))
        day_end = datetime.combine(day, time.min) + timedelta(hours=self.end_hour)
        width = timedelta(minutes=self.slot_minutes)

        result = []
        while cursor + width <= day_end:
            slot_end = cursor + width
            # 24:00 is not a valid time of day
            end_of_slot = slot_end.time() if slot_end.date() == day else time.max
            result.append(Slot(start_time=cursor.time(), end_time=end_of_slot))
            cursor = slot_end
        return result


def intervals_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    return start_a < end_b and end_a > start_b


def free_slots(candidates: Iterable[Slot], occupied: Iterable[tuple[time, time]]) -> list[Slot]:
    """Candidates that overlap none of the occupied (start, end) intervals."""
    taken = list(occupied)
    return [
        slot
        for slot in candidates
        if not any(intervals_overlap(slot.start_time, slot.end_time, s, e) for s, e in taken)
    ]
