"""
Treatment Service
Links treatments to appointments and keeps their status in step with the appointment
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Treatment, utcnow
from .repository import TreatmentRepository

logger = logging.getLogger(__name__)


class TreatmentService:
    """Service layer for treatment records tied to appointments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TreatmentRepository()

    def has_linked_treatment(self, appointment_id: str) -> bool:
        return self.repo.has_treatment_for_appointment(self.db, appointment_id)

    def get_treatments_for_appointment(self, appointment_id: str) -> list[Treatment]:
        return self.repo.get_treatments_for_appointment(self.db, appointment_id)

    def link_appointment_to_treatment(
        self,
        appointment_id: str,
        treatment_type: Optional[str] = None,
        total_visits: int = 1,
        notes: Optional[str] = None,
    ) -> Treatment:
        """
        Create a treatment for an appointment.
        Patient and dentist come from the appointment; the initial status mirrors it.
        """
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise ValueError("Appointment not found for linking")

        initial_status = "pending"
        if appointment.status == "in_progress":
            initial_status = "in_progress"
        elif appointment.status == "completed":
            initial_status = "completed"

        now = utcnow()
        treatment = self.repo.create_treatment(
            self.db,
            patient_id=appointment.patient_id,
            dentist_id=appointment.dentist_id,
            appointment_id=appointment_id,
            treatment_type=treatment_type or appointment.appointment_type or "Treatment",
            notes=notes,
            status=initial_status,
            total_visits=total_visits if total_visits and total_visits > 0 else 1,
            completed_visits=0,
            started_at=now if initial_status == "in_progress" else None,
            completed_at=now if initial_status == "completed" else None,
        )

        logger.info(f"✅ Treatment {treatment.id} linked to appointment {appointment_id}")
        return treatment

    def update_treatments_for_appointment_status(self, appointment_id: str, new_status: str) -> int:
        """
        Push an appointment status down to its treatments.

        in_progress: every non-completed treatment starts
        completed: one more visit done; the treatment completes when all visits are done
        cancelled: treatments are cancelled

        Returns:
            int: Number of treatments updated
        """
        treatments = self.repo.get_treatments_for_appointment(self.db, appointment_id)
        if not treatments:
            return 0

        now = utcnow()
        updated_count = 0
        for treatment in treatments:
            changed = False

            if new_status == "in_progress":
                if treatment.status != "completed":
                    treatment.status = "in_progress"
                    if not treatment.started_at:
                        treatment.started_at = now
                    changed = True

            elif new_status == "completed":
                total = treatment.total_visits or 1
                done = (treatment.completed_visits or 0) + 1
                if done >= total:
                    treatment.status = "completed"
                    treatment.completed_visits = total
                    treatment.completed_at = now
                else:
                    treatment.status = "in_progress"
                    treatment.completed_visits = done
                    if not treatment.started_at:
                        treatment.started_at = now
                changed = True

            elif new_status == "cancelled":
                treatment.status = "cancelled"
                changed = True

            if changed:
                treatment.updated_at = now
                updated_count += 1

        self.db.commit()
        logger.info(
            f"📊 Synced {updated_count} treatment(s) for appointment {appointment_id} → {new_status}"
        )
        return updated_count
