import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_id():
    """Generate an opaque string identifier"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, the format stored in every DateTime column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Dentist(Base):
    __tablename__ = "dentists"

    id = Column(String(36), primary_key=True, default=generate_id)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    specialization = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    appointments = relationship("Appointment", back_populates="dentist")


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=generate_id)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    appointment_requests = relationship("AppointmentRequest", back_populates="patient")
    appointments = relationship("Appointment", back_populates="patient")


class Assistant(Base):
    __tablename__ = "assistants"

    id = Column(String(36), primary_key=True, default=generate_id)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    created_at = Column(DateTime, default=utcnow)


class AppointmentRequest(Base):
    """Patient-submitted desire for a visit, not yet bound to a dentist or time"""

    __tablename__ = "appointment_requests"

    id = Column(String(36), primary_key=True, default=generate_id)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)

    # Chief complaint is stored in both columns
    appointment_type = Column(String(255), nullable=False)
    reason_for_visit = Column(Text, nullable=True)
    pain_level = Column(Integer, default=0, nullable=False)
    urgency = Column(String(20), default="routine", nullable=False)  # routine, urgent, emergency

    preferred_date = Column(Date, nullable=False)
    preferred_time = Column(String(10), nullable=True)  # HH:MM format
    additional_notes = Column(Text, nullable=True)

    # Status workflow: pending → confirmed | declined
    status = Column(String(20), default="pending", nullable=False, index=True)
    assigned_to = Column(String(36), nullable=True)  # Staff member who handled the request
    notification_sent = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    patient = relationship("Patient", back_populates="appointment_requests")
    appointment = relationship("Appointment", back_populates="appointment_request", uselist=False)


class Appointment(Base):
    """A confirmed visit bound to one dentist, one time slot and one patient"""

    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    dentist_id = Column(String(36), ForeignKey("dentists.id"), nullable=False, index=True)
    assistant_id = Column(String(36), ForeignKey("assistants.id"), nullable=True)
    appointment_request_id = Column(
        String(36), ForeignKey("appointment_requests.id"), nullable=True
    )

    # Scheduling
    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(String(10), nullable=False)  # HH:MM[:SS] format
    duration_minutes = Column(Integer, default=60, nullable=False)
    appointment_type = Column(String(255), nullable=True)

    # Status workflow: scheduled → in_progress → completed
    # scheduled: booked and upcoming
    # in_progress: patient is in the chair
    # completed / cancelled / no_show: terminal, kept for history
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    patient = relationship("Patient", back_populates="appointments")
    dentist = relationship("Dentist", back_populates="appointments")
    appointment_request = relationship("AppointmentRequest", back_populates="appointment")
    treatments = relationship("Treatment", back_populates="appointment")


class Treatment(Base):
    """Clinical record of work planned or performed, optionally tied to an appointment"""

    __tablename__ = "treatments"

    id = Column(String(36), primary_key=True, default=generate_id)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    dentist_id = Column(String(36), ForeignKey("dentists.id"), nullable=True)
    appointment_id = Column(String(36), ForeignKey("appointments.id"), nullable=True, index=True)

    treatment_type = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, in_progress, completed, cancelled

    # Multi-visit tracking
    total_visits = Column(Integer, default=1, nullable=False)
    completed_visits = Column(Integer, default=0, nullable=False)

    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    appointment = relationship("Appointment", back_populates="treatments")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    recipient_id = Column(String(36), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(String(36), nullable=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
