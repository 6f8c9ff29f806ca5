from datetime import date
from unittest.mock import MagicMock

from app.domain.scheduling.conflicts import find_conflicting_appointments
from app.domain.scheduling.effects import Effect, EffectRunner


def test_failing_effect_does_not_stop_later_effects():
    calls = []
    rollback = MagicMock()
    runner = EffectRunner(on_failure=rollback)

    def boom():
        raise RuntimeError("smtp down")

    outcomes = runner.run(
        [
            Effect("first", lambda: calls.append("first")),
            Effect("second", boom),
            Effect("third", lambda: calls.append("third")),
        ]
    )

    assert calls == ["first", "third"]
    assert [(o.name, o.ok) for o in outcomes] == [("first", True), ("second", False), ("third", True)]
    assert outcomes[1].error == "smtp down"
    rollback.assert_called_once()


def test_failing_cleanup_is_contained():
    runner = EffectRunner(on_failure=MagicMock(side_effect=RuntimeError("session closed")))

    outcomes = runner.run([Effect("notify", MagicMock(side_effect=ValueError("bad")))])

    assert outcomes[0].ok is False


def test_no_effects():
    assert EffectRunner().run([]) == []


def appointment(**overrides):
    data = {
        "dentist_id": "dentist-1",
        "scheduled_date": date(2024, 6, 10),
        "scheduled_time": "10:00",
        "duration_minutes": 60,
        "status": "scheduled",
    }
    data.update(overrides)
    return MagicMock(**data)


def test_conflicts_only_for_active_overlapping_appointments():
    day = date(2024, 6, 10)
    existing = [
        appointment(),
        appointment(status="in_progress", scheduled_time="10:30"),
        appointment(status="cancelled"),
        appointment(status="no_show"),
        appointment(dentist_id="dentist-2"),
        appointment(scheduled_date=date(2024, 6, 11)),
        appointment(scheduled_time="11:00"),
    ]

    conflicts = find_conflicting_appointments("dentist-1", day, "10:15", 30, existing)

    assert conflicts == existing[:2]
