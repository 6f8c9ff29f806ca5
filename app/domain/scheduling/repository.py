"""Scheduling repository - Database operations for requests, appointments and the directory"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentRequest, Assistant, Dentist, Patient
from .conflicts import ACTIVE_STATUSES


class SchedulingRepository:
    """Repository for scheduling database operations"""

    # Directory lookups (read-only)
    @staticmethod
    def list_dentists(db: Session) -> list[Dentist]:
        return db.query(Dentist).order_by(Dentist.full_name).all()

    @staticmethod
    def get_dentist(db: Session, dentist_id: str) -> Optional[Dentist]:
        return db.query(Dentist).filter(Dentist.id == dentist_id).first()

    @staticmethod
    def get_patient(db: Session, patient_id: str) -> Optional[Patient]:
        return db.query(Patient).filter(Patient.id == patient_id).first()

    @staticmethod
    def list_patients(db: Session) -> list[Patient]:
        """Newest patients first"""
        return db.query(Patient).order_by(Patient.created_at.desc()).all()

    @staticmethod
    def list_assistant_ids(db: Session) -> list[str]:
        return [row.id for row in db.query(Assistant.id).order_by(Assistant.created_at).all()]

    # Appointment request methods
    @staticmethod
    def get_request(db: Session, request_id: str) -> Optional[AppointmentRequest]:
        return db.query(AppointmentRequest).filter(AppointmentRequest.id == request_id).first()

    @staticmethod
    def get_recent_pending_requests(
        db: Session, patient_id: str, since: datetime
    ) -> list[AppointmentRequest]:
        """Pending requests of a patient created at or after `since`"""
        return (
            db.query(AppointmentRequest)
            .filter(
                AppointmentRequest.patient_id == patient_id,
                AppointmentRequest.status == "pending",
                AppointmentRequest.created_at >= since,
            )
            .all()
        )

    @staticmethod
    def get_pending_requests(db: Session) -> list[AppointmentRequest]:
        return (
            db.query(AppointmentRequest)
            .filter(AppointmentRequest.status == "pending")
            .order_by(AppointmentRequest.created_at.asc())
            .all()
        )

    @staticmethod
    def create_request(db: Session, **request_data) -> AppointmentRequest:
        request = AppointmentRequest(**request_data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def update_request(db: Session, request: AppointmentRequest, **updates) -> AppointmentRequest:
        for key, value in updates.items():
            if hasattr(request, key):
                setattr(request, key, value)

        db.commit()
        db.refresh(request)
        return request

    # Appointment methods
    @staticmethod
    def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_active_appointments(
        db: Session, dentist_ids: list[str], start_date: date, end_date: date
    ) -> list[Appointment]:
        """Scheduled / in-progress appointments of the dentists within the date range"""
        if not dentist_ids:
            return []
        return (
            db.query(Appointment)
            .filter(
                Appointment.dentist_id.in_(dentist_ids),
                Appointment.scheduled_date >= start_date,
                Appointment.scheduled_date <= end_date,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
            .all()
        )

    @staticmethod
    def get_active_appointments_for_dentist_on(
        db: Session, dentist_id: str, scheduled_date: date
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.dentist_id == dentist_id,
                Appointment.scheduled_date == scheduled_date,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
            .order_by(Appointment.scheduled_time)
            .all()
        )

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def get_appointments_by_date(db: Session, scheduled_date: date) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.scheduled_date == scheduled_date)
            .order_by(Appointment.scheduled_time)
            .all()
        )

    @staticmethod
    def get_appointments_in_range(
        db: Session, start_date: date, end_date: date, dentist_id: Optional[str] = None
    ) -> list[Appointment]:
        """Calendar view: every non-cancelled appointment in the range, by date then time"""
        query = db.query(Appointment).filter(
            Appointment.scheduled_date >= start_date,
            Appointment.scheduled_date <= end_date,
            Appointment.status != "cancelled",
        )

        if dentist_id:
            query = query.filter(Appointment.dentist_id == dentist_id)

        return query.order_by(Appointment.scheduled_date, Appointment.scheduled_time).all()

    @staticmethod
    def get_dentist_appointments(
        db: Session,
        dentist_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.dentist_id == dentist_id)

        if start_date:
            query = query.filter(Appointment.scheduled_date >= start_date)

        if end_date:
            query = query.filter(Appointment.scheduled_date <= end_date)

        return query.order_by(Appointment.scheduled_date, Appointment.scheduled_time).all()

    @staticmethod
    def get_patient_appointments(db: Session, patient_id: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.patient_id == patient_id)
            .order_by(Appointment.scheduled_date.desc(), Appointment.scheduled_time.desc())
            .all()
        )
