"""Scheduling errors raised inside the service and converted to result envelopes"""

from .schemas import ErrorKind


class SchedulingError(Exception):
    kind = ErrorKind.PERSISTENCE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SchedulingValidationError(SchedulingError):
    kind = ErrorKind.VALIDATION


class NotFoundError(SchedulingError):
    kind = ErrorKind.NOT_FOUND


class InvalidStateError(SchedulingError):
    kind = ErrorKind.STATE


class InvalidTransitionError(InvalidStateError):
    def __init__(self, current_status: str, new_status: str):
        super().__init__(f"Invalid status transition from {current_status} to {new_status}")
        self.current_status = current_status
        self.new_status = new_status


class SchedulingConflictError(SchedulingError):
    kind = ErrorKind.CONFLICT

    def __init__(self, conflicts: list, message: str = "Scheduling conflict detected"):
        super().__init__(message)
        self.conflicts = conflicts


class PersistenceError(SchedulingError):
    kind = ErrorKind.PERSISTENCE
