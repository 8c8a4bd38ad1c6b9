from __future__ import annotations

import pytest

from src.absence_manager.absence_manager.core.exceptions import NotFoundError, ScheduleConflictError, ValidationError
from src.absence_manager.absence_manager.groups.model import Group

from tests.fakes import build_test_container, make_teacher


def _container():
    return build_test_container(
        teachers=[
            make_teacher(teacher_id="tA"),
            make_teacher(teacher_id="tB", email="b@example.com", matricule="M-002"),
        ],
        groups=[Group(group_id="g1", name="DEV101"), Group(group_id="g2", name="DEV102")],
    )


def _session(**overrides) -> dict:
    values = {
        "day": "Lundi",
        "time_slot": "08:30-11:00",
        "subject": "Python",
        "group_id": "g1",
        "room": "S1",
        "type": "Cours",
    }
    values.update(overrides)
    return values


def test_create_computes_total_hours():
    c = _container()
    schedule = c.schedule_service.create(
        teacher_id="tA",
        sessions=[_session(), _session(day="Mardi")],
        academic_year="2024-2025",
    )

    assert schedule.total_hours == 5.0
    assert schedule.to_dict()["sessions"][0]["type"] == "Cours"
    assert c.schedules_repo.get_by_id(schedule.schedule_id) == schedule


def test_create_is_all_or_nothing_on_conflict():
    c = _container()
    c.schedule_service.create(teacher_id="tA", sessions=[_session()])

    with pytest.raises(ScheduleConflictError) as exc:
        c.schedule_service.create(
            teacher_id="tB",
            sessions=[_session(day="Mardi", room="S2", group_id="g2"), _session(group_id="g2")],
        )

    assert exc.value.status_code == 409
    assert [conflict["type"] for conflict in exc.value.conflicts] == ["room"]
    assert len(c.schedules_repo.items) == 1


def test_invalid_sessions_are_rejected_before_writing():
    c = _container()
    with pytest.raises(ValidationError) as exc:
        c.schedule_service.create(
            teacher_id="tA",
            sessions=[_session(), _session(day="Dimanche", time_slot="07:00-08:00", type="Atelier")],
        )

    fields = {e["field"] for e in exc.value.errors}
    assert fields == {"sessions[1].day", "sessions[1].time_slot", "sessions[1].type"}
    assert exc.value.status_code == 422
    assert c.schedules_repo.items == {}


def test_create_requires_existing_teacher_and_groups():
    c = _container()
    with pytest.raises(NotFoundError, match="Formateur non trouvé"):
        c.schedule_service.create(teacher_id="ghost", sessions=[_session()])
    with pytest.raises(NotFoundError):
        c.schedule_service.create(teacher_id="tA", sessions=[_session(group_id="g404")])


def test_update_does_not_conflict_with_itself():
    c = _container()
    schedule = c.schedule_service.create(teacher_id="tA", sessions=[_session()])

    updated = c.schedule_service.update(schedule.schedule_id, sessions=[_session(), _session(day="Jeudi")])

    assert len(updated.sessions) == 2


def test_get_for_teacher_and_stats():
    c = _container()
    c.schedule_service.create(teacher_id="tA", sessions=[_session()], academic_year="2024-2025")
    c.schedule_service.create(
        teacher_id="tB",
        sessions=[_session(day="Mardi"), _session(day="Mercredi")],
        academic_year="2024-2025",
    )

    assert c.schedule_service.get_for_teacher("tB").teacher_id == "tB"
    with pytest.raises(NotFoundError):
        c.schedule_service.get_for_teacher("nobody")
    assert c.schedule_service.stats(academic_year="2024-2025") == {
        "total_schedules": 2,
        "total_sessions": 3,
        "total_hours": 7.5,
        "average_sessions_per_schedule": 1.5,
    }


def test_check_conflicts_validates_slot():
    c = _container()
    with pytest.raises(ValidationError):
        c.schedule_service.check_conflicts(teacher_id="tA", day="Lundi", time_slot="bad", room="S1", group_id="g1")
