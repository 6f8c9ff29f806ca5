"""
Scheduling Domain

Appointment requests, availability, conflict detection and the appointment
status workflow.

- schemas.py              # Request / appointment / slot schemas and result envelope
- repository.py           # Request, appointment and directory queries
- time_calculator.py      # Time parsing, overlap test, clinic hours
- conflicts.py            # Double-booking detection
- availability_service.py # Slot grid generation
- workflow.py             # Status transition table
- effects.py              # Best-effort side effects
- service.py              # SchedulingService orchestration
- router.py               # /appointments endpoints
"""

from .router import router

__all__ = ["router"]
