"""Scheduling domain schemas - Pydantic models for validation and result envelopes"""

from datetime import date, datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_required_time_string, validate_time_string

T = TypeVar("T")


class Urgency(str, Enum):
    ROUTINE = "routine"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class RequestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class CancellationType(str, Enum):
    PATIENT = "patient"
    STAFF = "staff"
    SYSTEM = "system"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STATE = "state"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"


# ============================================================================
# INPUT SCHEMAS
# ============================================================================


class AppointmentRequestCreate(BaseModel):
    """Schema for a patient submitting an appointment request"""

    chiefComplaint: str = ""
    painLevel: int = 0
    urgency: Urgency = Urgency.ROUTINE
    preferredDate: Optional[date] = None
    preferredTime: Optional[str] = None
    additionalNotes: Optional[str] = None

    @field_validator("preferredTime")
    @classmethod
    def validate_preferred_time(cls, v):
        return validate_time_string(v)


class AppointmentRequestSubmit(AppointmentRequestCreate):
    """Schema for the public request intake endpoint"""

    patientId: str = Field(min_length=1)


class AppointmentScheduleData(BaseModel):
    """Schema for binding a request to a dentist and a time slot"""

    dentistId: str = Field(min_length=1)
    assistantId: Optional[str] = None
    scheduledDate: date
    scheduledTime: str
    durationMinutes: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("scheduledTime")
    @classmethod
    def validate_scheduled_time(cls, v):
        return validate_required_time_string(v)

    @field_validator("durationMinutes")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Duration must be greater than 0")
        return v


class ConfirmAppointmentRequest(AppointmentScheduleData):
    """Schema for staff confirming a pending request"""

    confirmedBy: str


class DeclineAppointmentRequest(BaseModel):
    declinedBy: str
    reason: Optional[str] = None


class DirectAppointmentCreate(BaseModel):
    """Schema for staff booking an appointment without a prior request"""

    patientId: str = Field(min_length=1)
    dentistId: str = Field(min_length=1)
    assistantId: Optional[str] = None
    scheduledDate: date
    scheduledTime: str
    appointmentType: str
    durationMinutes: int = 60
    notes: Optional[str] = None

    @field_validator("scheduledTime")
    @classmethod
    def validate_scheduled_time(cls, v):
        return validate_required_time_string(v)

    @field_validator("durationMinutes")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("Duration must be greater than 0")
        return v


class AppointmentStatusUpdate(BaseModel):
    # Kept as a plain string so unknown statuses surface as transition errors
    status: str
    updatedBy: str
    notes: Optional[str] = None


class AppointmentCancel(BaseModel):
    cancelledBy: str
    reason: str
    cancellationType: CancellationType = CancellationType.PATIENT


class UrgentNotificationCreate(BaseModel):
    """Schema for staff sending an ad-hoc urgent alert to one user"""

    userId: str = Field(min_length=1)
    title: str
    message: str
    relatedId: Optional[str] = None


# ============================================================================
# OUTPUT SCHEMAS
# ============================================================================


class AppointmentRequestOut(BaseModel):
    id: str
    patient_id: str
    appointment_type: str
    reason_for_visit: Optional[str] = None
    pain_level: int
    urgency: str
    preferred_date: date
    preferred_time: Optional[str] = None
    additional_notes: Optional[str] = None
    status: str
    assigned_to: Optional[str] = None
    notification_sent: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AppointmentOut(BaseModel):
    id: str
    patient_id: str
    dentist_id: str
    assistant_id: Optional[str] = None
    appointment_request_id: Optional[str] = None
    scheduled_date: date
    scheduled_time: str
    duration_minutes: int
    appointment_type: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DentistOut(BaseModel):
    id: str
    full_name: str
    specialization: Optional[str] = None

    class Config:
        from_attributes = True


class PatientOut(BaseModel):
    id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AppointmentRequestDetail(AppointmentRequestOut):
    """A request together with the patient who submitted it"""

    patient: Optional[PatientOut] = None


class TimeSlot(BaseModel):
    date: date
    time: str
    dentist_id: str
    dentist_name: str
    available: bool


class DayAvailability(BaseModel):
    date: date
    time_slots: list[TimeSlot]


class AppointmentConflict(BaseModel):
    conflict_type: str = "time_overlap"
    conflicting_appointment: AppointmentOut
    suggested_alternatives: list[TimeSlot] = []


class EffectOutcome(BaseModel):
    """Outcome of one best-effort side effect"""

    name: str
    ok: bool
    error: Optional[str] = None


class SchedulingResult(BaseModel, Generic[T]):
    """Uniform envelope returned by every public scheduling operation"""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    conflicts: Optional[list[AppointmentConflict]] = None
    effects: list[EffectOutcome] = []
