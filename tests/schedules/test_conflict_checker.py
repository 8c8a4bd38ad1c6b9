from __future__ import annotations

from src.absence_manager.absence_manager.core.enums import SessionType
from src.absence_manager.absence_manager.groups.model import Group
from src.absence_manager.absence_manager.schedules.conflicts import ProposedSession, ScheduleConflictChecker
from src.absence_manager.absence_manager.schedules.model import Schedule, Session

from tests.fakes import InMemoryGroups, InMemorySchedules, InMemoryTeachers, make_teacher

TEACHER = make_teacher(teacher_id="tA", first_name="Karim", last_name="Alaoui")
OTHER = make_teacher(teacher_id="tB", email="b@example.com", matricule="M-002")
GROUPS = [Group(group_id="g1", name="DEV101"), Group(group_id="g2", name="DEV102")]


def _schedule(schedule_id: str, teacher_id: str, *, room: str = "S1", group_id: str = "g1", is_active: bool = True):
    return Schedule(
        schedule_id=schedule_id,
        teacher_id=teacher_id,
        academic_year="2024-2025",
        sessions=(
            Session(
                day="Lundi",
                time_slot="08:30-11:00",
                subject="Python",
                group_id=group_id,
                room=room,
                session_type=SessionType.COURS,
            ),
        ),
        is_active=is_active,
    )


def _checker(*schedules: Schedule) -> ScheduleConflictChecker:
    return ScheduleConflictChecker(InMemorySchedules(schedules), InMemoryTeachers([TEACHER, OTHER]), InMemoryGroups(GROUPS))


def _proposal(**overrides) -> ProposedSession:
    values = {"teacher_id": "tA", "day": "Lundi", "time_slot": "08:30-11:00", "room": "S9", "group_id": "g2"}
    values.update(overrides)
    return ProposedSession(**values)


def test_teacher_conflict_names_the_teacher():
    report = _checker(_schedule("s1", "tA")).check(_proposal())

    assert report.has_conflicts
    assert [c["type"] for c in report.conflicts] == ["teacher"]
    assert report.conflicts[0]["message"] == "Karim Alaoui a déjà un cours à ce créneau"


def test_room_conflict_with_another_teacher():
    report = _checker(_schedule("s1", "tB", room="S9")).check(_proposal())

    assert [c["type"] for c in report.conflicts] == ["room"]
    assert report.conflicts[0]["message"] == "La salle S9 est déjà réservée à ce créneau"


def test_one_session_can_produce_every_kind():
    report = _checker(_schedule("s1", "tA", room="S9", group_id="g2")).check(_proposal())

    assert [c["type"] for c in report.conflicts] == ["teacher", "room", "group"]
    assert report.conflicts[2]["message"] == "Le groupe DEV102 a déjà un cours à ce créneau"


def test_other_slot_inactive_and_excluded_schedules_do_not_conflict():
    checker = _checker(_schedule("s1", "tA", is_active=False), _schedule("s2", "tA"))

    assert not checker.check(_proposal(time_slot="11:00-13:30")).has_conflicts
    assert not checker.check(_proposal(), exclude_schedule_id="s2").has_conflicts
