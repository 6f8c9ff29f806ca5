"""Scheduling router - FastAPI endpoints for appointment requests, availability and status"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ... import config
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from ..notifications.schemas import NotificationResponse
from .schemas import (
    AppointmentCancel,
    AppointmentOut,
    AppointmentRequestCreate,
    AppointmentRequestDetail,
    AppointmentRequestOut,
    AppointmentRequestSubmit,
    AppointmentScheduleData,
    AppointmentStatusUpdate,
    ConfirmAppointmentRequest,
    DayAvailability,
    DeclineAppointmentRequest,
    DentistOut,
    DirectAppointmentCreate,
    ErrorKind,
    PatientOut,
    SchedulingResult,
    UrgentNotificationCreate,
)
from .service import SchedulingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

# Public intake is limited per IP
rate_limit_request_intake = create_rate_limiter(
    limit=config.REQUEST_INTAKE_RATE_LIMIT,
    window_seconds=config.REQUEST_INTAKE_RATE_WINDOW,
    key_prefix="appointment_request_ip",
    use_ip=True,
)

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STATE: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.PERSISTENCE: 500,
}


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


def to_response(result: SchedulingResult, success_status: int = 200) -> JSONResponse:
    """Render a result envelope with an HTTP status matching its error kind"""
    status_code = success_status if result.success else ERROR_STATUS_CODES.get(result.error_kind, 500)
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


# ============================================================================
# APPOINTMENT REQUESTS
# ============================================================================


@router.post("/requests", response_model=SchedulingResult[AppointmentRequestOut])
async def create_appointment_request(
    data: AppointmentRequestSubmit,
    service: SchedulingService = Depends(get_scheduling_service),
    _ip: None = Depends(rate_limit_request_intake),
):
    """
    Patient submits an appointment request.
    Rate limited per IP; routine requests are also limited to one pending per day per patient.
    """
    request_data = AppointmentRequestCreate(**data.model_dump(exclude={"patientId"}))
    result = service.create_appointment_request(data.patientId, request_data)
    return to_response(result, success_status=201)


@router.get("/requests/pending", response_model=SchedulingResult[list[AppointmentRequestOut]])
async def get_pending_appointment_requests(
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Pending requests, oldest first, for the assistant triage queue"""
    return to_response(service.get_pending_appointment_requests())


@router.get("/requests/{request_id}", response_model=SchedulingResult[AppointmentRequestDetail])
async def get_appointment_request(
    request_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_response(service.get_appointment_request(request_id))


@router.post("/requests/{request_id}/confirm", response_model=SchedulingResult[AppointmentOut])
async def confirm_appointment_request(
    request_id: str,
    data: ConfirmAppointmentRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Schedule a pending request; returns conflicts instead of data on double booking"""
    schedule = AppointmentScheduleData(**data.model_dump(exclude={"confirmedBy"}))
    result = service.confirm_appointment_request(request_id, schedule, data.confirmedBy)
    return to_response(result, success_status=201)


@router.post("/requests/{request_id}/decline", response_model=SchedulingResult[AppointmentRequestOut])
async def decline_appointment_request(
    request_id: str,
    data: DeclineAppointmentRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    result = service.decline_appointment_request(request_id, data.declinedBy, data.reason)
    return to_response(result)


# ============================================================================
# AVAILABILITY & DIRECTORY
# ============================================================================


@router.get("/availability", response_model=SchedulingResult[list[DayAvailability]])
async def get_availability(
    start_date: date = Query(...),
    end_date: date = Query(...),
    duration_minutes: int = Query(config.DEFAULT_APPOINTMENT_DURATION),
    dentist_id: Optional[str] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Bookable slots per working day and dentist"""
    result = service.get_available_time_slots(start_date, end_date, duration_minutes, dentist_id)
    return to_response(result)


@router.get("/dentists", response_model=SchedulingResult[list[DentistOut]])
async def list_dentists(service: SchedulingService = Depends(get_scheduling_service)):
    return to_response(service.list_dentists())


@router.get("/patients", response_model=SchedulingResult[list[PatientOut]])
async def list_patients(service: SchedulingService = Depends(get_scheduling_service)):
    return to_response(service.list_patients())


@router.post("/urgent-notifications", response_model=SchedulingResult[NotificationResponse])
async def send_urgent_notification(
    data: UrgentNotificationCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Staff alert outside the normal request flow"""
    result = service.send_urgent_notification(data.userId, data.title, data.message, data.relatedId)
    return to_response(result, success_status=201)


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.post("/direct", response_model=SchedulingResult[AppointmentOut])
async def schedule_appointment_direct(
    data: DirectAppointmentCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Assistant books an appointment without a prior patient request"""
    return to_response(service.schedule_appointment_direct(data), success_status=201)


@router.get("/by-date/{scheduled_date}", response_model=SchedulingResult[list[AppointmentOut]])
async def get_appointments_by_date(
    scheduled_date: date,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_response(service.get_appointments_by_date(scheduled_date))


@router.get("/dentist/{dentist_id}", response_model=SchedulingResult[list[AppointmentOut]])
async def get_dentist_appointments(
    dentist_id: str,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_response(service.get_dentist_appointments(dentist_id, start_date, end_date))


@router.get("/week", response_model=SchedulingResult[list[AppointmentOut]])
async def get_appointments_for_week(
    start_date: date = Query(...),
    end_date: date = Query(...),
    dentist_id: Optional[str] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Calendar view of a date range; cancelled appointments are left out"""
    return to_response(service.get_appointments_for_week(start_date, end_date, dentist_id))


@router.get("/patient/{patient_id}", response_model=SchedulingResult[list[AppointmentOut]])
async def get_patient_appointments(
    patient_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_response(service.get_patient_appointments(patient_id))


@router.get("/{appointment_id}", response_model=SchedulingResult[AppointmentOut])
async def get_appointment(
    appointment_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_response(service.get_appointment(appointment_id))


@router.patch("/{appointment_id}/status", response_model=SchedulingResult[AppointmentOut])
async def update_appointment_status(
    appointment_id: str,
    data: AppointmentStatusUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Move an appointment along scheduled → in_progress → completed (or cancelled / no_show)"""
    result = service.update_appointment_status(
        appointment_id, data.status, data.updatedBy, data.notes
    )
    return to_response(result)


@router.post("/{appointment_id}/cancel", response_model=SchedulingResult[AppointmentOut])
async def cancel_appointment(
    appointment_id: str,
    data: AppointmentCancel,
    service: SchedulingService = Depends(get_scheduling_service),
):
    result = service.cancel_appointment(
        appointment_id, data.cancelledBy, data.reason, data.cancellationType
    )
    return to_response(result)
