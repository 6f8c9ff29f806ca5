"""Tests for slot-grid generation and the availability query"""

from datetime import date
from unittest.mock import MagicMock

from sqlalchemy.exc import SQLAlchemyError

from app.domain.scheduling.availability_service import (
    PLACEHOLDER_DENTISTS,
    AvailabilityGenerator,
    is_slot_available,
)
from app.domain.scheduling.repository import SchedulingRepository
from app.domain.scheduling.schemas import ErrorKind
from app.domain.scheduling.service import SchedulingService
from app.models import Dentist

from .conftest import MONDAY


def slot(day, time, dentist_id="dentist-1"):
    return next(s for s in day.time_slots if s.time == time and s.dentist_id == dentist_id)


class TestAvailabilityGenerator:
    def test_skips_weekends(self):
        generator = AvailabilityGenerator()
        # Monday 2024-06-10 through Sunday 2024-06-16
        days = generator.generate(date(2024, 6, 10), date(2024, 6, 16), {"d": "Dr. D"}, [], 60)

        assert [d.date for d in days] == [date(2024, 6, d) for d in range(10, 15)]
        for day in days:
            assert day.date.weekday() < 5

    def test_weekend_only_range_is_empty(self):
        days = AvailabilityGenerator().generate(
            date(2024, 6, 15), date(2024, 6, 16), {"d": "Dr. D"}, [], 60
        )
        assert days == []

    def test_slots_ordered_by_time_then_dentist(self):
        dentists = {"dentist-1": "Dr. A", "dentist-2": "Dr. B"}
        day = AvailabilityGenerator().generate(MONDAY, MONDAY, dentists, [], 30)[0]

        assert len(day.time_slots) == 32
        assert [(s.time, s.dentist_id) for s in day.time_slots[:4]] == [
            ("09:00", "dentist-1"),
            ("09:00", "dentist-2"),
            ("09:30", "dentist-1"),
            ("09:30", "dentist-2"),
        ]
        assert all(s.available for s in day.time_slots)

    def test_missing_name_becomes_unknown(self):
        day = AvailabilityGenerator().generate(MONDAY, MONDAY, {"d": ""}, [], 30)[0]
        assert day.time_slots[0].dentist_name == "Unknown"

    def test_last_slot_may_run_past_close(self):
        day = AvailabilityGenerator().generate(MONDAY, MONDAY, {"dentist-1": "Dr. A"}, [], 60)[0]

        assert day.time_slots[-1].time == "16:30"
        assert slot(day, "16:30").available is True

    def test_only_matching_dentist_is_blocked(self):
        existing = [
            MagicMock(
                dentist_id="dentist-1", scheduled_date=MONDAY, scheduled_time="10:00", duration_minutes=60
            )
        ]
        dentists = {"dentist-1": "Dr. A", "dentist-2": "Dr. B"}
        day = AvailabilityGenerator().generate(MONDAY, MONDAY, dentists, existing, 30)[0]

        assert slot(day, "10:00", "dentist-1").available is False
        assert slot(day, "10:00", "dentist-2").available is True

    def test_suggest_alternatives_nearest_first(self):
        existing = [
            MagicMock(
                dentist_id="dentist-1", scheduled_date=MONDAY, scheduled_time="10:00", duration_minutes=60
            )
        ]
        alternatives = AvailabilityGenerator().suggest_alternatives(
            "dentist-1", "Dr. A", MONDAY, "10:00", 60, existing
        )

        assert [s.time for s in alternatives] == ["09:00", "11:00", "11:30"]
        assert all(s.available for s in alternatives)

    def test_suggest_alternatives_on_weekend_is_empty(self):
        assert AvailabilityGenerator().suggest_alternatives(
            "dentist-1", "Dr. A", date(2024, 6, 15), "10:00", 60, []
        ) == []


def test_is_slot_available_ignores_other_dates():
    existing = [
        MagicMock(
            dentist_id="dentist-1",
            scheduled_date=date(2024, 6, 11),
            scheduled_time="10:00",
            duration_minutes=60,
        )
    ]
    assert is_slot_available("dentist-1", MONDAY, "10:00", 60, existing) is True


class TestGetAvailableTimeSlots:
    def test_existing_appointment_blocks_overlapping_slots(self, service, make_appointment):
        make_appointment(scheduled_time="10:00", duration_minutes=60)

        result = service.get_available_time_slots(MONDAY, MONDAY, 30, "dentist-1")

        assert result.success is True
        day = result.data[0]
        assert slot(day, "09:30").available is True
        assert slot(day, "10:00").available is False
        assert slot(day, "10:30").available is False
        assert slot(day, "11:00").available is True

    def test_longer_duration_blocks_the_slot_before(self, service, make_appointment):
        make_appointment(scheduled_time="10:00", duration_minutes=60)

        result = service.get_available_time_slots(MONDAY, MONDAY, 60, "dentist-1")

        day = result.data[0]
        assert slot(day, "09:00").available is True
        assert slot(day, "09:30").available is False

    def test_cancelled_and_completed_appointments_do_not_block(self, service, make_appointment):
        make_appointment(scheduled_time="10:00", status="cancelled")
        make_appointment(scheduled_time="13:00", status="completed")
        make_appointment(scheduled_time="15:00", status="in_progress")

        day = service.get_available_time_slots(MONDAY, MONDAY, 30, "dentist-1").data[0]

        assert slot(day, "10:00").available is True
        assert slot(day, "13:00").available is True
        assert slot(day, "15:00").available is False

    def test_all_dentists_when_no_filter(self, service):
        day = service.get_available_time_slots(MONDAY, MONDAY, 60).data[0]

        assert {s.dentist_id for s in day.time_slots} == {"dentist-1", "dentist-2"}
        assert slot(day, "09:00", "dentist-2").dentist_name == "Dr. Bruno Silva"

    def test_repeated_queries_are_identical(self, service, make_appointment):
        make_appointment(scheduled_time="11:00", duration_minutes=90)

        first = service.get_available_time_slots(MONDAY, date(2024, 6, 14), 45)
        second = service.get_available_time_slots(MONDAY, date(2024, 6, 14), 45)

        assert first.model_dump() == second.model_dump()

    def test_placeholder_dentists_when_directory_empty(self, db, clock, hours):
        service = SchedulingService(db, hours=hours, clock=clock)

        result = service.get_available_time_slots(MONDAY, MONDAY, 60)

        assert result.success is True
        names = {s.dentist_id: s.dentist_name for s in result.data[0].time_slots}
        assert names == PLACEHOLDER_DENTISTS
        assert all(s.available for s in result.data[0].time_slots)

    def test_unknown_dentist_filter_is_named_unknown(self, service):
        day = service.get_available_time_slots(MONDAY, MONDAY, 60, "dentist-404").data[0]
        assert {s.dentist_name for s in day.time_slots} == {"Unknown"}

    def test_invalid_duration_is_rejected(self, service):
        result = service.get_available_time_slots(MONDAY, MONDAY, 0)

        assert result.success is False
        assert result.error_kind == ErrorKind.VALIDATION

    def test_inverted_range_is_rejected(self, service):
        result = service.get_available_time_slots(date(2024, 6, 12), MONDAY, 60)

        assert result.success is False
        assert result.error_kind == ErrorKind.VALIDATION

    def test_appointment_read_failure_degrades_to_empty_calendar(self, db, directory, clock, hours):
        class FailingRepository(SchedulingRepository):
            @staticmethod
            def get_active_appointments(db, dentist_ids, start_date, end_date):
                raise SQLAlchemyError("connection lost")

        service = SchedulingService(db, repo=FailingRepository(), hours=hours, clock=clock)

        result = service.get_available_time_slots(MONDAY, MONDAY, 60, "dentist-1")

        assert result.success is True
        assert all(s.available for s in result.data[0].time_slots)

    def test_new_dentist_appears_in_grid(self, db, service):
        db.add(Dentist(id="dentist-3", full_name="Dr. Chloe Tan"))
        db.commit()

        day = service.get_available_time_slots(MONDAY, MONDAY, 60).data[0]

        assert "dentist-3" in {s.dentist_id for s in day.time_slots}
