import pytest

from app.domain.treatments.service import TreatmentService
from app.models import Treatment


@pytest.fixture
def treatments(db):
    return TreatmentService(db)


def test_link_copies_patient_and_dentist(treatments, make_appointment):
    appointment = make_appointment(patient_id="patient-2", dentist_id="dentist-2")

    treatment = treatments.link_appointment_to_treatment(appointment.id)

    assert treatment.patient_id == "patient-2"
    assert treatment.dentist_id == "dentist-2"
    assert treatment.treatment_type == "Root canal"
    assert treatment.status == "pending"
    assert treatment.started_at is None
    assert treatments.has_linked_treatment(appointment.id) is True


def test_link_mirrors_in_progress_appointment(treatments, make_appointment):
    appointment = make_appointment(status="in_progress")

    treatment = treatments.link_appointment_to_treatment(appointment.id, "Crown", total_visits=0)

    assert treatment.status == "in_progress"
    assert treatment.started_at is not None
    assert treatment.total_visits == 1


def test_link_unknown_appointment(treatments):
    with pytest.raises(ValueError, match="Appointment not found for linking"):
        treatments.link_appointment_to_treatment("missing")


def test_sync_without_treatments(treatments, make_appointment):
    appointment = make_appointment()
    assert treatments.update_treatments_for_appointment_status(appointment.id, "completed") == 0


def test_multi_visit_treatment_counts_visits(treatments, make_appointment, db):
    appointment = make_appointment()
    treatment = treatments.link_appointment_to_treatment(appointment.id, "Implant", total_visits=3)

    assert treatments.update_treatments_for_appointment_status(appointment.id, "completed") == 1
    db.refresh(treatment)
    assert treatment.status == "in_progress"
    assert treatment.completed_visits == 1
    assert treatment.started_at is not None

    treatments.update_treatments_for_appointment_status(appointment.id, "completed")
    treatments.update_treatments_for_appointment_status(appointment.id, "completed")
    db.refresh(treatment)
    assert treatment.status == "completed"
    assert treatment.completed_visits == 3
    assert treatment.completed_at is not None


def test_in_progress_does_not_reopen_completed(treatments, make_appointment, db):
    appointment = make_appointment()
    treatments.link_appointment_to_treatment(appointment.id)
    treatments.update_treatments_for_appointment_status(appointment.id, "completed")

    assert treatments.update_treatments_for_appointment_status(appointment.id, "in_progress") == 0
    assert db.query(Treatment).one().status == "completed"


def test_cancel_cancels_every_treatment(treatments, make_appointment, db):
    appointment = make_appointment()
    treatments.link_appointment_to_treatment(appointment.id, "Cleaning")
    treatments.link_appointment_to_treatment(appointment.id, "X-ray")

    assert treatments.update_treatments_for_appointment_status(appointment.id, "cancelled") == 2
    assert {t.status for t in treatments.get_treatments_for_appointment(appointment.id)} == {
        "cancelled"
    }
