from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import ConflictType
from ..groups.repository import GroupRepository
from ..teachers.repository import TeacherRepository
from .repository import ScheduleRepository


@dataclass(frozen=True)
class ProposedSession:
    teacher_id: str
    day: str
    time_slot: str
    room: str
    group_id: str


@dataclass(frozen=True)
class ConflictReport:
    conflicts: list[dict] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def to_dict(self) -> dict:
        return {"has_conflicts": self.has_conflicts, "conflicts": list(self.conflicts)}


class ScheduleConflictChecker:
    """Reports teacher, room and group double-bookings against active schedules.

    Every matching session is tested for all three kinds independently, so one
    session can yield several conflicts. Nothing takes precedence.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        teachers: TeacherRepository,
        groups: GroupRepository,
    ):
        self._schedules = schedules
        self._teachers = teachers
        self._groups = groups

    def check(self, proposal: ProposedSession, *, exclude_schedule_id: Optional[str] = None) -> ConflictReport:
        conflicts: list[dict] = []
        candidates = self._schedules.find_active_with_slot(
            day=proposal.day,
            time_slot=proposal.time_slot,
            exclude_schedule_id=exclude_schedule_id,
        )

        for schedule in candidates:
            if not schedule.is_active or schedule.schedule_id == exclude_schedule_id:
                continue
            for session in schedule.sessions:
                if session.day != proposal.day or session.time_slot != proposal.time_slot:
                    continue

                context = {
                    "schedule_id": schedule.schedule_id,
                    "teacher_id": schedule.teacher_id,
                    "day": session.day,
                    "time_slot": session.time_slot,
                    "subject": session.subject,
                    "room": session.room,
                    "group_id": session.group_id,
                }

                if schedule.teacher_id == proposal.teacher_id:
                    conflicts.append(
                        {
                            "type": ConflictType.TEACHER.value,
                            "message": f"{self._teacher_name(schedule.teacher_id)} a déjà un cours à ce créneau",
                            "session": context,
                        }
                    )
                if session.room == proposal.room:
                    conflicts.append(
                        {
                            "type": ConflictType.ROOM.value,
                            "message": f"La salle {proposal.room} est déjà réservée à ce créneau",
                            "session": context,
                        }
                    )
                if session.group_id == proposal.group_id:
                    conflicts.append(
                        {
                            "type": ConflictType.GROUP.value,
                            "message": f"Le groupe {self._group_name(session.group_id)} a déjà un cours à ce créneau",
                            "session": context,
                        }
                    )

        return ConflictReport(conflicts=conflicts)

    def _teacher_name(self, teacher_id: str) -> str:
        teacher = self._teachers.get_by_id(teacher_id)
        return teacher.full_name if teacher else "Le formateur"

    def _group_name(self, group_id: str) -> str:
        group = self._groups.get_by_id(group_id)
        return group.name if group else group_id
