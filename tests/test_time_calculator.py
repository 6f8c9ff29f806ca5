from datetime import date

import pytest

from app.domain.scheduling.time_calculator import (
    ClinicHours,
    iter_dates,
    minutes_to_time,
    time_overlaps,
    time_to_minutes,
)


class TestTimeParsing:
    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("17:00") == 1020

    def test_time_to_minutes_ignores_seconds(self):
        assert time_to_minutes("10:15:45") == 615

    def test_minutes_to_time_pads(self):
        assert minutes_to_time(545) == "09:05"
        assert minutes_to_time(1020) == "17:00"


class TestTimeOverlaps:
    def test_identical_slots_overlap(self):
        assert time_overlaps("10:00", "10:00", 60, 60) is True

    def test_back_to_back_does_not_overlap(self):
        """[10:00, 11:00) followed by [11:00, 11:30) share only the boundary"""
        assert time_overlaps("10:00", "11:00", 60, 30) is False
        assert time_overlaps("11:00", "10:00", 30, 60) is False

    def test_partial_overlap(self):
        assert time_overlaps("10:00", "10:30", 60, 60) is True
        assert time_overlaps("10:30", "10:00", 60, 60) is True

    def test_containment_overlaps(self):
        assert time_overlaps("09:00", "10:00", 180, 15) is True

    @pytest.mark.parametrize(
        "a,d1,b,d2",
        [
            ("09:00", 30, "09:15", 30),
            ("09:00", 30, "09:30", 30),
            ("13:00", 90, "12:00", 45),
            ("08:00", 15, "16:00", 120),
            ("10:10", 5, "10:14", 1),
        ],
    )
    def test_overlap_is_symmetric(self, a, d1, b, d2):
        assert time_overlaps(a, b, d1, d2) == time_overlaps(b, a, d2, d1)


class TestClinicHours:
    def test_default_slot_grid(self):
        slots = ClinicHours().slot_times()
        assert slots[0] == "09:00"
        assert slots[-1] == "16:30"
        assert len(slots) == 16

    def test_custom_granularity(self):
        hours = ClinicHours(open_time="08:00", close_time="10:00", slot_granularity_minutes=45)
        assert hours.slot_times() == ["08:00", "08:45", "09:30"]

    def test_weekends_are_not_working_days(self):
        hours = ClinicHours()
        assert hours.is_working_day(date(2024, 6, 10)) is True  # Monday
        assert hours.is_working_day(date(2024, 6, 15)) is False  # Saturday
        assert hours.is_working_day(date(2024, 6, 16)) is False  # Sunday

    def test_saturday_clinic(self):
        hours = ClinicHours(working_days=frozenset(["saturday"]))
        assert hours.is_working_day(date(2024, 6, 15)) is True
        assert hours.is_working_day(date(2024, 6, 10)) is False

    def test_rejects_inverted_hours(self):
        with pytest.raises(ValueError):
            ClinicHours(open_time="17:00", close_time="09:00")

    def test_rejects_zero_granularity(self):
        with pytest.raises(ValueError):
            ClinicHours(slot_granularity_minutes=0)

    def test_rejects_unknown_day(self):
        with pytest.raises(ValueError):
            ClinicHours(working_days=frozenset(["funday"]))


def test_iter_dates_is_inclusive():
    days = list(iter_dates(date(2024, 6, 10), date(2024, 6, 12)))
    assert days == [date(2024, 6, 10), date(2024, 6, 11), date(2024, 6, 12)]


def test_iter_dates_empty_when_inverted():
    assert list(iter_dates(date(2024, 6, 12), date(2024, 6, 10))) == []
