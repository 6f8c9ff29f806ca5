"""Treatment repository - Database operations for treatments"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Treatment


class TreatmentRepository:
    """Repository for treatment database operations"""

    @staticmethod
    def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_treatments_for_appointment(db: Session, appointment_id: str) -> list[Treatment]:
        return (
            db.query(Treatment)
            .filter(Treatment.appointment_id == appointment_id)
            .order_by(Treatment.created_at)
            .all()
        )

    @staticmethod
    def has_treatment_for_appointment(db: Session, appointment_id: str) -> bool:
        return (
            db.query(Treatment.id).filter(Treatment.appointment_id == appointment_id).first()
            is not None
        )

    @staticmethod
    def create_treatment(db: Session, **treatment_data) -> Treatment:
        treatment = Treatment(**treatment_data)
        db.add(treatment)
        db.commit()
        db.refresh(treatment)
        return treatment
