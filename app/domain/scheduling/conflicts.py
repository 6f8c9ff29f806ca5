"""Conflict Detector - finds active appointments overlapping a proposed booking"""

from datetime import date
from typing import Iterable

from .time_calculator import time_overlaps

# Statuses that occupy a dentist's time
ACTIVE_STATUSES = ["scheduled", "in_progress"]


def find_conflicting_appointments(
    dentist_id: str,
    scheduled_date: date,
    scheduled_time: str,
    duration_minutes: int,
    existing_appointments: Iterable,
) -> list:
    """
    Return every active appointment of the dentist that overlaps the proposed slot.

    Appointments of other dentists, other dates, or in terminal statuses never conflict.
    """
    return [
        apt
        for apt in existing_appointments
        if apt.dentist_id == dentist_id
        and apt.scheduled_date == scheduled_date
        and apt.status in ACTIVE_STATUSES
        and time_overlaps(apt.scheduled_time, scheduled_time, apt.duration_minutes, duration_minutes)
    ]
