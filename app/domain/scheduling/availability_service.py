"""
Availability Generator
Builds the day-by-day, dentist-by-dentist slot grid used for booking
"""

from datetime import date
from typing import Iterable, Optional

from .schemas import DayAvailability, TimeSlot
from .time_calculator import ClinicHours, iter_dates, time_overlaps, time_to_minutes

# Shown when the dentist directory is empty so callers still get a grid
PLACEHOLDER_DENTISTS = {
    "mock-dentist-1": "Dr. Sarah Johnson",
    "mock-dentist-2": "Dr. Michael Chen",
}


def is_placeholder_dentist(dentist_id: str) -> bool:
    return dentist_id.startswith("mock-")


def is_slot_available(
    dentist_id: str,
    slot_date: date,
    slot_time: str,
    duration_minutes: int,
    existing_appointments: Iterable,
) -> bool:
    """A slot is free unless it overlaps an active appointment of the same dentist that day"""
    return not any(
        apt.dentist_id == dentist_id
        and apt.scheduled_date == slot_date
        and time_overlaps(apt.scheduled_time, slot_time, apt.duration_minutes, duration_minutes)
        for apt in existing_appointments
    )


class AvailabilityGenerator:
    """Pure slot-grid generator; performs no I/O"""

    def __init__(self, hours: Optional[ClinicHours] = None):
        self.hours = hours or ClinicHours()

    def generate(
        self,
        start_date: date,
        end_date: date,
        dentists: dict[str, str],
        existing_appointments: list,
        duration_minutes: int,
    ) -> list[DayAvailability]:
        """
        Generate slots for every working day in [start_date, end_date].

        Args:
            start_date: First day (inclusive)
            end_date: Last day (inclusive)
            dentists: Ordered mapping of dentist id to display name
            existing_appointments: Active appointments (scheduled / in_progress)
            duration_minutes: Length of the appointment being booked

        Returns:
            List of DayAvailability ordered by date; non-working days are omitted
        """
        availability = []
        slot_times = self.hours.slot_times()

        for day in iter_dates(start_date, end_date):
            if not self.hours.is_working_day(day):
                continue

            day_appointments = [apt for apt in existing_appointments if apt.scheduled_date == day]
            time_slots = []
            for slot_time in slot_times:
                for dentist_id, dentist_name in dentists.items():
                    time_slots.append(
                        TimeSlot(
                            date=day,
                            time=slot_time,
                            dentist_id=dentist_id,
                            dentist_name=dentist_name or "Unknown",
                            available=is_slot_available(
                                dentist_id, day, slot_time, duration_minutes, day_appointments
                            ),
                        )
                    )

            availability.append(DayAvailability(date=day, time_slots=time_slots))

        return availability

    def suggest_alternatives(
        self,
        dentist_id: str,
        dentist_name: str,
        slot_date: date,
        requested_time: str,
        duration_minutes: int,
        existing_appointments: list,
        limit: int = 3,
    ) -> list[TimeSlot]:
        """Free slots for the same dentist and day, nearest to the requested time first"""
        if not self.hours.is_working_day(slot_date):
            return []

        day = self.generate(
            slot_date, slot_date, {dentist_id: dentist_name}, existing_appointments, duration_minutes
        )
        free = [slot for slot in day[0].time_slots if slot.available]

        requested = time_to_minutes(requested_time)
        free.sort(key=lambda slot: (abs(time_to_minutes(slot.time) - requested), slot.time))
        return free[:limit]
