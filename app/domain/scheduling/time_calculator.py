"""Time parsing, interval overlap and clinic business-hours helpers"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterator

from ... import config

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def time_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" or "HH:MM:SS" to minutes since midnight (seconds ignored)"""
    parts = time_str.strip().split(":")
    return int(parts[0]) * 60 + int(parts[1])


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_overlaps(
    existing_time: str, new_time: str, existing_duration: int, new_duration: int
) -> bool:
    """
    Half-open interval overlap test.

    [existing, existing + existing_duration) and [new, new + new_duration)
    overlap iff each one starts before the other ends. Back-to-back
    intervals do not overlap.
    """
    existing = time_to_minutes(existing_time)
    new = time_to_minutes(new_time)

    existing_end = existing + existing_duration
    new_end = new + new_duration

    return new < existing_end and new_end > existing


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
    """Yield every calendar date from start_date to end_date inclusive"""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


@dataclass(frozen=True)
class ClinicHours:
    """Working hours and slot cadence for availability generation"""

    open_time: str = "09:00"
    close_time: str = "17:00"
    slot_granularity_minutes: int = 30
    working_days: frozenset = field(
        default_factory=lambda: frozenset(["monday", "tuesday", "wednesday", "thursday", "friday"])
    )

    def __post_init__(self):
        if self.slot_granularity_minutes <= 0:
            raise ValueError("Slot granularity must be a positive number of minutes")
        if time_to_minutes(self.open_time) >= time_to_minutes(self.close_time):
            raise ValueError("Clinic open time must be before close time")
        unknown = set(self.working_days) - set(WEEKDAY_NAMES)
        if unknown:
            raise ValueError(f"Unknown working days: {', '.join(sorted(unknown))}")

    @classmethod
    def from_config(cls) -> "ClinicHours":
        return cls(
            open_time=config.CLINIC_OPEN_TIME,
            close_time=config.CLINIC_CLOSE_TIME,
            slot_granularity_minutes=config.SLOT_GRANULARITY_MINUTES,
            working_days=frozenset(config.CLINIC_WORKING_DAYS),
        )

    def is_working_day(self, day: date) -> bool:
        return WEEKDAY_NAMES[day.weekday()] in self.working_days

    def slot_times(self) -> list[str]:
        """Candidate slot start times, from open time while before close time"""
        start = time_to_minutes(self.open_time)
        end = time_to_minutes(self.close_time)
        return [minutes_to_time(m) for m in range(start, end, self.slot_granularity_minutes)]
