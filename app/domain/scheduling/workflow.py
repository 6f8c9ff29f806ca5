"""
Appointment status workflow
Handles scheduled → in_progress → completed transitions and their side-effect rules
"""

from .schemas import AppointmentStatus

# Valid manual transitions for appointments
VALID_TRANSITIONS = {
    AppointmentStatus.SCHEDULED.value: [
        AppointmentStatus.IN_PROGRESS.value,
        AppointmentStatus.CANCELLED.value,
        AppointmentStatus.NO_SHOW.value,
    ],
    AppointmentStatus.IN_PROGRESS.value: [
        AppointmentStatus.COMPLETED.value,
        AppointmentStatus.CANCELLED.value,
    ],
    AppointmentStatus.COMPLETED.value: [],  # Terminal state
    AppointmentStatus.CANCELLED.value: [],  # Terminal state
    AppointmentStatus.NO_SHOW.value: [],  # Terminal state
}

# Appointment statuses that are pushed down to linked treatments
TREATMENT_SYNC_STATUSES = {
    AppointmentStatus.IN_PROGRESS.value,
    AppointmentStatus.COMPLETED.value,
    AppointmentStatus.CANCELLED.value,
}


def validate_status_transition(current_status: str, new_status: str) -> bool:
    """
    Validate if an appointment status transition is allowed

    Appointment statuses: scheduled → in_progress → completed, with
    cancelled / no_show as early exits. Staying in the same status is
    not a transition and is rejected.

    Args:
        current_status: Current appointment status
        new_status: Desired new status

    Returns:
        bool: True if transition is valid, False otherwise
    """
    return new_status in VALID_TRANSITIONS.get(current_status, [])


def get_allowed_transitions(current_status: str) -> list[str]:
    return list(VALID_TRANSITIONS.get(current_status, []))


def is_terminal(status: str) -> bool:
    return status in VALID_TRANSITIONS and not VALID_TRANSITIONS[status]


def needs_treatment_link(new_status: str) -> bool:
    """Starting an appointment guarantees a treatment record exists for it"""
    return new_status == AppointmentStatus.IN_PROGRESS.value


def should_sync_treatments(new_status: str) -> bool:
    return new_status in TREATMENT_SYNC_STATUSES
