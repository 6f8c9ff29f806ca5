"""Scheduling service - Business logic for appointment requests, availability and status workflow"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ... import config
from ...models import Appointment, AppointmentRequest, utcnow
from ...services.notification_service import NotificationDispatcher
from ..notifications.schemas import NotificationResponse
from ..treatments.service import TreatmentService
from .availability_service import (
    PLACEHOLDER_DENTISTS,
    AvailabilityGenerator,
    is_placeholder_dentist,
)
from .conflicts import find_conflicting_appointments
from .effects import Effect, EffectRunner
from .exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    SchedulingConflictError,
    SchedulingError,
    SchedulingValidationError,
)
from .repository import SchedulingRepository
from .schemas import (
    AppointmentConflict,
    AppointmentOut,
    AppointmentRequestCreate,
    AppointmentRequestDetail,
    AppointmentRequestOut,
    AppointmentScheduleData,
    AppointmentStatus,
    CancellationType,
    DayAvailability,
    DentistOut,
    DirectAppointmentCreate,
    EffectOutcome,
    ErrorKind,
    PatientOut,
    RequestStatus,
    SchedulingResult,
    Urgency,
)
from .time_calculator import ClinicHours
from .workflow import needs_treatment_link, should_sync_treatments, validate_status_transition

logger = logging.getLogger(__name__)


def validate_appointment_request(data: AppointmentRequestCreate, today: date) -> Optional[str]:
    """
    Validate a new appointment request before anything is stored.

    Returns:
        The error message, or None when the request is acceptable
    """
    if not (data.chiefComplaint or "").strip():
        return "Chief complaint is required"

    if data.painLevel < 0 or data.painLevel > 10:
        return "Pain level must be between 0 and 10"

    if not data.preferredDate:
        return "Preferred date is required"

    if data.preferredDate < today:
        return "Preferred date cannot be in the past"

    if data.preferredDate > today + relativedelta(months=config.MAX_BOOKING_MONTHS_AHEAD):
        return "Preferred date is too far in the future"

    return None


def require_slot(dentist_id: Optional[str], scheduled_time: Optional[str]) -> None:
    """A booking needs a dentist and a start time before it can be checked or stored"""
    if not (dentist_id or "").strip() or not (scheduled_time or "").strip():
        raise SchedulingValidationError("Missing required appointment data")


class SchedulingService:
    """
    Service layer for appointment scheduling.

    Every public operation returns a SchedulingResult and never raises.
    Collaborators are injected so tests can substitute them.
    """

    def __init__(
        self,
        db: Session,
        repo: Optional[SchedulingRepository] = None,
        notifier: Optional[NotificationDispatcher] = None,
        treatments: Optional[TreatmentService] = None,
        hours: Optional[ClinicHours] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.repo = repo or SchedulingRepository()
        self.notifier = notifier or NotificationDispatcher(db)
        self.treatments = treatments or TreatmentService(db)
        self.availability = AvailabilityGenerator(hours or ClinicHours.from_config())
        self.clock = clock
        self.effects = EffectRunner(on_failure=db.rollback)

    # ========================================================================
    # REQUEST INTAKE
    # ========================================================================

    def create_appointment_request(
        self, patient_id: str, data: AppointmentRequestCreate
    ) -> SchedulingResult[AppointmentRequestOut]:
        """Validate, throttle and store a patient's appointment request, then alert staff"""
        try:
            logger.info(f"📥 Creating {data.urgency.value} appointment request for patient {patient_id}")

            error = validate_appointment_request(data, self.clock().date())
            if error:
                raise SchedulingValidationError(error)

            self._check_request_throttle(patient_id, data.urgency)

            try:
                request = self.repo.create_request(
                    self.db,
                    patient_id=patient_id,
                    appointment_type=data.chiefComplaint.strip(),
                    reason_for_visit=data.chiefComplaint.strip(),
                    pain_level=data.painLevel,
                    urgency=data.urgency.value,
                    preferred_date=data.preferredDate,
                    preferred_time=data.preferredTime,
                    additional_notes=data.additionalNotes or "",
                    status=RequestStatus.PENDING.value,
                    notification_sent=False,
                    created_at=self.clock(),
                )
            except SQLAlchemyError as e:
                raise PersistenceError("Failed to create appointment request") from e

            outcomes = self.effects.run(
                [
                    Effect(
                        "notify_staff",
                        lambda: self._notify_staff_and_flag(request, data.urgency.value),
                    )
                ]
            )

            logger.info(f"✅ Appointment request {request.id} created")
            return SchedulingResult(
                success=True, data=AppointmentRequestOut.model_validate(request), effects=outcomes
            )

        except SchedulingError as e:
            return self._failure(e, "create_appointment_request")
        except Exception as e:
            return self._unexpected(e, "create_appointment_request", "An unexpected error occurred")

    def _check_request_throttle(self, patient_id: str, urgency: Urgency) -> None:
        """One pending routine request per patient per throttle window"""
        if urgency != Urgency.ROUTINE:
            return

        since = self.clock() - timedelta(hours=config.REQUEST_THROTTLE_HOURS)
        try:
            existing = self.repo.get_recent_pending_requests(self.db, patient_id, since)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to validate request") from e

        if existing:
            logger.warning(f"⚠️ Patient {patient_id} already has a pending request")
            raise SchedulingValidationError(
                "You already have a pending appointment request. "
                "Please wait for confirmation or contact us for urgent needs."
            )

    def _notify_staff_and_flag(self, request: AppointmentRequest, urgency: str) -> None:
        assistant_ids = self.repo.list_assistant_ids(self.db)
        self.notifier.notify_staff_of_new_request(request, urgency, assistant_ids)
        self.repo.update_request(self.db, request, notification_sent=True)

    def decline_appointment_request(
        self, request_id: str, declined_by: str, reason: Optional[str] = None
    ) -> SchedulingResult[AppointmentRequestOut]:
        try:
            request = self._get_pending_request(request_id)

            try:
                request = self.repo.update_request(
                    self.db, request, status=RequestStatus.DECLINED.value, assigned_to=declined_by
                )
            except SQLAlchemyError as e:
                raise PersistenceError("Failed to decline appointment request") from e

            outcomes = self.effects.run(
                [Effect("notify_patient", lambda: self.notifier.notify_request_declined(request, reason))]
            )

            logger.info(f"✅ Appointment request {request_id} declined by {declined_by}")
            return SchedulingResult(
                success=True, data=AppointmentRequestOut.model_validate(request), effects=outcomes
            )

        except SchedulingError as e:
            return self._failure(e, "decline_appointment_request")
        except Exception as e:
            return self._unexpected(e, "decline_appointment_request", "Failed to decline appointment request")

    # ========================================================================
    # AVAILABILITY
    # ========================================================================

    def get_available_time_slots(
        self,
        start_date: date,
        end_date: date,
        duration_minutes: int = 60,
        dentist_id: Optional[str] = None,
    ) -> SchedulingResult[list[DayAvailability]]:
        """Slot grid per working day and dentist, flagged against active appointments"""
        try:
            if duration_minutes is None or duration_minutes <= 0:
                raise SchedulingValidationError("Duration must be greater than 0")
            if start_date > end_date:
                raise SchedulingValidationError("Start date must be on or before end date")

            dentists = self._resolve_dentists(dentist_id)

            existing = []
            real_ids = [d_id for d_id in dentists if not is_placeholder_dentist(d_id)]
            if real_ids:
                try:
                    existing = self.repo.get_active_appointments(
                        self.db, real_ids, start_date, end_date
                    )
                except SQLAlchemyError as e:
                    # Keep going with an empty calendar rather than failing the grid
                    logger.error(f"❌ Error fetching existing appointments: {e}")
                    self.db.rollback()

            availability = self.availability.generate(
                start_date, end_date, dentists, existing, duration_minutes
            )
            return SchedulingResult(success=True, data=availability)

        except SchedulingError as e:
            return self._failure(e, "get_available_time_slots")
        except Exception as e:
            return self._unexpected(e, "get_available_time_slots", "Failed to fetch availability")

    def _resolve_dentists(self, dentist_id: Optional[str]) -> dict[str, str]:
        """Ordered id → name mapping of the dentists to generate slots for"""
        try:
            if dentist_id:
                if is_placeholder_dentist(dentist_id):
                    return {dentist_id: PLACEHOLDER_DENTISTS.get(dentist_id, "Unknown")}
                dentist = self.repo.get_dentist(self.db, dentist_id)
                return {dentist_id: dentist.full_name if dentist else "Unknown"}

            dentists = self.repo.list_dentists(self.db)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to fetch dentists") from e

        if not dentists:
            logger.warning("⚠️ Dentist directory is empty, using placeholder dentists")
            return dict(PLACEHOLDER_DENTISTS)

        return {d.id: d.full_name for d in dentists}

    # ========================================================================
    # CONFIRMATION / BOOKING
    # ========================================================================

    def check_scheduling_conflicts(
        self, schedule: AppointmentScheduleData
    ) -> list[AppointmentConflict]:
        """Active appointments of the dentist overlapping the proposed slot, with alternatives"""
        duration = schedule.durationMinutes or config.DEFAULT_APPOINTMENT_DURATION
        existing = self.repo.get_active_appointments_for_dentist_on(
            self.db, schedule.dentistId, schedule.scheduledDate
        )
        conflicting = find_conflicting_appointments(
            schedule.dentistId,
            schedule.scheduledDate,
            schedule.scheduledTime,
            duration,
            existing,
        )
        if not conflicting:
            return []

        dentist = self.repo.get_dentist(self.db, schedule.dentistId)
        alternatives = self.availability.suggest_alternatives(
            schedule.dentistId,
            dentist.full_name if dentist else "Unknown",
            schedule.scheduledDate,
            schedule.scheduledTime,
            duration,
            existing,
        )

        return [
            AppointmentConflict(
                conflict_type="time_overlap",
                conflicting_appointment=AppointmentOut.model_validate(apt),
                suggested_alternatives=alternatives,
            )
            for apt in conflicting
        ]

    def confirm_appointment_request(
        self, request_id: str, schedule: AppointmentScheduleData, confirmed_by: str
    ) -> SchedulingResult[AppointmentOut]:
        """
        Turn a pending request into a scheduled appointment.

        The conflict check and the insert are not atomic; two staff members
        confirming overlapping slots at the same moment can both succeed.
        """
        try:
            require_slot(schedule.dentistId, schedule.scheduledTime)
            request = self._get_pending_request(request_id)

            try:
                conflicts = self.check_scheduling_conflicts(schedule)
            except SQLAlchemyError as e:
                raise PersistenceError("Failed to check scheduling conflicts") from e

            if conflicts:
                logger.warning(
                    f"⚠️ {len(conflicts)} conflict(s) for dentist {schedule.dentistId} "
                    f"on {schedule.scheduledDate} at {schedule.scheduledTime}"
                )
                raise SchedulingConflictError(conflicts)

            try:
                appointment = self.repo.create_appointment(
                    self.db,
                    patient_id=request.patient_id,
                    dentist_id=schedule.dentistId,
                    assistant_id=schedule.assistantId,
                    appointment_request_id=request.id,
                    scheduled_date=schedule.scheduledDate,
                    scheduled_time=schedule.scheduledTime,
                    duration_minutes=schedule.durationMinutes or config.DEFAULT_APPOINTMENT_DURATION,
                    appointment_type=request.appointment_type,
                    status=AppointmentStatus.SCHEDULED.value,
                    notes=schedule.notes,
                )
            except SQLAlchemyError as e:
                raise PersistenceError("Failed to create appointment") from e

            try:
                self.repo.update_request(
                    self.db,
                    request,
                    status=RequestStatus.CONFIRMED.value,
                    assigned_to=confirmed_by,
                )
            except SQLAlchemyError as e:
                # The appointment exists, which is what the caller needs; the request stays pending
                logger.error(f"❌ Error updating request {request_id} status: {e}")
                self.db.rollback()

            outcomes = self.effects.run(
                [Effect("notify_confirmed", lambda: self.notifier.notify_appointment_confirmed(appointment))]
            )

            logger.info(
                f"📅 Appointment {appointment.id} scheduled for {appointment.scheduled_date} "
                f"at {appointment.scheduled_time} (request {request_id}, by {confirmed_by})"
            )
            return SchedulingResult(
                success=True, data=AppointmentOut.model_validate(appointment), effects=outcomes
            )

        except SchedulingError as e:
            return self._failure(e, "confirm_appointment_request")
        except Exception as e:
            return self._unexpected(e, "confirm_appointment_request", "Failed to confirm appointment")

    def schedule_appointment_direct(
        self, data: DirectAppointmentCreate
    ) -> SchedulingResult[AppointmentOut]:
        """Book an appointment straight into the calendar, without a patient request"""
        try:
            require_slot(data.dentistId, data.scheduledTime)
            if not (data.patientId or "").strip() or not (data.appointmentType or "").strip():
                raise SchedulingValidationError("Missing required appointment data")

            schedule = AppointmentScheduleData(
                dentistId=data.dentistId,
                assistantId=data.assistantId,
                scheduledDate=data.scheduledDate,
                scheduledTime=data.scheduledTime,
                durationMinutes=data.durationMinutes,
                notes=data.notes,
            )
            try:
                conflicts = self.check_scheduling_conflicts(schedule)
            except SQLAlchemyError as e:
                raise PersistenceError("Failed to check appointment availability") from e

            if conflicts:
                raise SchedulingConflictError(conflicts, "This time slot is already booked")

            try:
                appointment = self.repo.create_appointment(
                    self.db,
                    patient_id=data.patientId,
                    dentist_id=data.dentistId,
                    assistant_id=data.assistantId,
                    scheduled_date=data.scheduledDate,
                    scheduled_time=data.scheduledTime,
                    duration_minutes=data.durationMinutes,
                    appointment_type=data.appointmentType.strip(),
                    status=AppointmentStatus.SCHEDULED.value,
                    notes=data.notes,
                )
            except SQLAlchemyError as e:
                raise PersistenceError("Failed to schedule appointment") from e

            outcomes = self.effects.run(
                [
                    Effect(
                        "notify_dentist",
                        lambda: self.notifier.notify_dentist_of_new_appointment(appointment),
                    )
                ]
            )

            logger.info(f"📅 Direct appointment {appointment.id} booked for patient {data.patientId}")
            return SchedulingResult(
                success=True, data=AppointmentOut.model_validate(appointment), effects=outcomes
            )

        except SchedulingError as e:
            return self._failure(e, "schedule_appointment_direct")
        except Exception as e:
            return self._unexpected(e, "schedule_appointment_direct", "Failed to schedule appointment")

    # ========================================================================
    # STATUS WORKFLOW
    # ========================================================================

    def update_appointment_status(
        self,
        appointment_id: str,
        new_status: str,
        updated_by: str,
        notes: Optional[str] = None,
    ) -> SchedulingResult[AppointmentOut]:
        """Move an appointment along the status workflow and cascade to treatments"""
        try:
            appointment, outcomes = self._transition(
                appointment_id, new_status, updated_by, notes, notify_patient=True
            )
            return SchedulingResult(
                success=True, data=AppointmentOut.model_validate(appointment), effects=outcomes
            )

        except SchedulingError as e:
            return self._failure(e, "update_appointment_status")
        except Exception as e:
            return self._unexpected(e, "update_appointment_status", "Failed to update appointment status")

    def cancel_appointment(
        self,
        appointment_id: str,
        cancelled_by: str,
        reason: str,
        cancellation_type: CancellationType = CancellationType.PATIENT,
    ) -> SchedulingResult[AppointmentOut]:
        """
        Cancel an appointment with a reason.
        Patient cancellations notify the dentist; anyone else's notify the patient.
        """
        try:
            cancellation_type = CancellationType(cancellation_type)
        except ValueError:
            return self._failure(
                SchedulingValidationError(f"Invalid cancellation type: {cancellation_type}"),
                "cancel_appointment",
            )

        try:
            appointment, outcomes = self._transition(
                appointment_id,
                AppointmentStatus.CANCELLED.value,
                cancelled_by,
                f"Cancelled by {cancellation_type.value}: {reason}",
                notify_patient=False,
            )

            outcomes += self.effects.run(
                [
                    Effect(
                        "notify_cancelled",
                        lambda: self.notifier.notify_appointment_cancelled(
                            appointment, cancelled_by, reason
                        ),
                    )
                ]
            )

            logger.info(
                f"✅ Appointment {appointment_id} cancelled by {cancellation_type.value} {cancelled_by}"
            )
            return SchedulingResult(
                success=True, data=AppointmentOut.model_validate(appointment), effects=outcomes
            )

        except SchedulingError as e:
            return self._failure(e, "cancel_appointment")
        except Exception as e:
            return self._unexpected(e, "cancel_appointment", "Failed to cancel appointment")

    def _transition(
        self,
        appointment_id: str,
        new_status: str,
        updated_by: str,
        notes: Optional[str],
        notify_patient: bool,
    ) -> tuple[Appointment, list[EffectOutcome]]:
        try:
            appointment = self.repo.get_appointment(self.db, appointment_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load appointment") from e

        if not appointment:
            raise NotFoundError("Appointment not found")

        current_status = appointment.status
        if not validate_status_transition(current_status, new_status):
            logger.warning(
                f"⚠️ Rejected transition {current_status} → {new_status} for appointment {appointment_id}"
            )
            raise InvalidTransitionError(current_status, new_status)

        outcomes = []
        if needs_treatment_link(new_status):
            outcomes += self.effects.run(
                [Effect("link_treatment", lambda: self._ensure_treatment(appointment))]
            )

        updates = {"status": new_status, "updated_at": utcnow()}
        if notes:
            updates["notes"] = notes

        try:
            appointment = self.repo.update_appointment(self.db, appointment, **updates)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to update appointment status") from e

        logger.info(
            f"✅ Appointment {appointment_id} transitioned: {current_status} → {new_status} "
            f"(by {updated_by})"
        )

        effects = []
        if notify_patient:
            effects.append(
                Effect("notify_status_change", lambda: self.notifier.notify_status_change(appointment))
            )
        if should_sync_treatments(new_status):
            effects.append(
                Effect(
                    "sync_treatments",
                    lambda: self.treatments.update_treatments_for_appointment_status(
                        appointment_id, new_status
                    ),
                )
            )
        outcomes += self.effects.run(effects)

        return appointment, outcomes

    def _ensure_treatment(self, appointment: Appointment) -> None:
        if self.treatments.has_linked_treatment(appointment.id):
            return

        self.treatments.link_appointment_to_treatment(
            appointment.id,
            treatment_type=appointment.appointment_type or "Treatment",
            total_visits=1,
        )

    # ========================================================================
    # READ QUERIES
    # ========================================================================

    def get_pending_appointment_requests(self) -> SchedulingResult[list[AppointmentRequestOut]]:
        return self._read(
            lambda: [
                AppointmentRequestOut.model_validate(r)
                for r in self.repo.get_pending_requests(self.db)
            ],
            "Failed to fetch appointment requests",
        )

    def get_appointment_request(self, request_id: str) -> SchedulingResult[AppointmentRequestDetail]:
        """One request in any status, with the submitting patient attached when known"""
        try:
            request = self.repo.get_request(self.db, request_id)
            if not request:
                raise NotFoundError("Appointment request not found")

            patient = self.repo.get_patient(self.db, request.patient_id)
            detail = AppointmentRequestDetail(
                **AppointmentRequestOut.model_validate(request).model_dump(),
                patient=PatientOut.model_validate(patient) if patient else None,
            )
            return SchedulingResult(success=True, data=detail)
        except SchedulingError as e:
            return self._failure(e, "get_appointment_request")
        except Exception as e:
            return self._unexpected(
                e, "get_appointment_request", "Failed to fetch appointment request details"
            )

    def get_appointment(self, appointment_id: str) -> SchedulingResult[AppointmentOut]:
        try:
            appointment = self.repo.get_appointment(self.db, appointment_id)
            if not appointment:
                raise NotFoundError("Appointment not found")
            return SchedulingResult(success=True, data=AppointmentOut.model_validate(appointment))
        except SchedulingError as e:
            return self._failure(e, "get_appointment")
        except Exception as e:
            return self._unexpected(e, "get_appointment", "Failed to fetch appointment")

    def get_appointments_by_date(self, scheduled_date: date) -> SchedulingResult[list[AppointmentOut]]:
        return self._read(
            lambda: [
                AppointmentOut.model_validate(a)
                for a in self.repo.get_appointments_by_date(self.db, scheduled_date)
            ],
            "Failed to fetch appointments",
        )

    def get_dentist_appointments(
        self,
        dentist_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> SchedulingResult[list[AppointmentOut]]:
        return self._read(
            lambda: [
                AppointmentOut.model_validate(a)
                for a in self.repo.get_dentist_appointments(self.db, dentist_id, start_date, end_date)
            ],
            "Failed to fetch dentist appointments",
        )

    def get_appointments_for_week(
        self, start_date: date, end_date: date, dentist_id: Optional[str] = None
    ) -> SchedulingResult[list[AppointmentOut]]:
        """Calendar range without cancelled appointments, ordered by date then time"""
        if start_date > end_date:
            return self._failure(
                SchedulingValidationError("Start date must be on or before end date"),
                "get_appointments_for_week",
            )

        return self._read(
            lambda: [
                AppointmentOut.model_validate(a)
                for a in self.repo.get_appointments_in_range(self.db, start_date, end_date, dentist_id)
            ],
            "Failed to load appointments",
        )

    def get_patient_appointments(self, patient_id: str) -> SchedulingResult[list[AppointmentOut]]:
        return self._read(
            lambda: [
                AppointmentOut.model_validate(a)
                for a in self.repo.get_patient_appointments(self.db, patient_id)
            ],
            "Failed to fetch patient appointments",
        )

    def list_dentists(self) -> SchedulingResult[list[DentistOut]]:
        return self._read(
            lambda: [DentistOut.model_validate(d) for d in self.repo.list_dentists(self.db)],
            "Failed to fetch available dentists",
        )

    def list_patients(self) -> SchedulingResult[list[PatientOut]]:
        return self._read(
            lambda: [PatientOut.model_validate(p) for p in self.repo.list_patients(self.db)],
            "Failed to fetch active patients",
        )

    # ========================================================================
    # STAFF ALERTS
    # ========================================================================

    def send_urgent_notification(
        self, user_id: str, title: str, message: str, related_id: Optional[str] = None
    ) -> SchedulingResult[NotificationResponse]:
        """Ad-hoc urgent alert from staff to one patient, dentist or assistant"""
        try:
            if not (user_id or "").strip() or not (title or "").strip() or not (message or "").strip():
                raise SchedulingValidationError("Recipient, title and message are required")

            try:
                notification = self.notifier.send_urgent_notification(
                    user_id, title.strip(), message.strip(), related_id
                )
            except SQLAlchemyError as e:
                raise PersistenceError("Failed to send urgent notification") from e

            return SchedulingResult(success=True, data=NotificationResponse.model_validate(notification))
        except SchedulingError as e:
            return self._failure(e, "send_urgent_notification")
        except Exception as e:
            return self._unexpected(e, "send_urgent_notification", "Failed to send urgent notification")

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _get_pending_request(self, request_id: str) -> AppointmentRequest:
        try:
            request = self.repo.get_request(self.db, request_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load appointment request") from e

        if not request:
            raise NotFoundError("Appointment request not found")

        if request.status != RequestStatus.PENDING.value:
            raise InvalidStateError("Appointment request is no longer pending")

        return request

    def _read(self, query: Callable, error_message: str) -> SchedulingResult:
        try:
            return SchedulingResult(success=True, data=query())
        except Exception as e:
            return self._unexpected(e, "read query", error_message)

    def _failure(self, error: SchedulingError, operation: str) -> SchedulingResult:
        if error.kind == ErrorKind.PERSISTENCE:
            logger.error(f"❌ {operation} failed: {error.message} ({error.__cause__})")
            self.db.rollback()
        else:
            logger.info(f"ℹ️ {operation} rejected: {error.message}")

        return SchedulingResult(
            success=False,
            error=error.message,
            error_kind=error.kind,
            conflicts=getattr(error, "conflicts", None),
        )

    def _unexpected(self, error: Exception, operation: str, message: str) -> SchedulingResult:
        logger.error(f"❌ Exception in {operation}: {error}")
        logger.exception(error)
        self.db.rollback()
        return SchedulingResult(success=False, error=message, error_kind=ErrorKind.PERSISTENCE)
