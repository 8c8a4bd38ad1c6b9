from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from ..common.datetime_utils import academic_year_for, now_local
from ..common.identifiers import new_id
from ..core.constants import SESSION_DAYS, TIME_SLOTS
from ..core.enums import SessionType
from ..core.exceptions import NotFoundError, ScheduleConflictError, ValidationError
from ..groups.repository import GroupRepository
from ..teachers.repository import TeacherRepository
from .conflicts import ConflictReport, ProposedSession, ScheduleConflictChecker
from .model import Schedule, Session
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

_SESSION_TYPES = tuple(t.value for t in SessionType)


def _session_errors(index: int, raw: Any) -> list[dict]:
    prefix = f"sessions[{index}]"
    if not isinstance(raw, dict):
        return [{"field": prefix, "message": "Session must be an object"}]

    errors: list[dict] = []
    if raw.get("day") not in SESSION_DAYS:
        errors.append({"field": f"{prefix}.day", "message": f"day must be one of: {', '.join(SESSION_DAYS)}"})
    if raw.get("time_slot") not in TIME_SLOTS:
        errors.append(
            {"field": f"{prefix}.time_slot", "message": f"time_slot must be one of: {', '.join(TIME_SLOTS)}"}
        )
    if raw.get("type") not in _SESSION_TYPES:
        errors.append({"field": f"{prefix}.type", "message": f"type must be one of: {', '.join(_SESSION_TYPES)}"})
    for name in ("subject", "group_id", "room"):
        if not str(raw.get(name) or "").strip():
            errors.append({"field": f"{prefix}.{name}", "message": f"{name} is required"})
    return errors


def parse_sessions(raw_sessions: Any) -> tuple[Session, ...]:
    """Validate the whole list first; nothing is returned unless every session is valid."""
    if not isinstance(raw_sessions, list) or not raw_sessions:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": "sessions", "message": "At least one session is required"}],
        )

    errors: list[dict] = []
    for i, raw in enumerate(raw_sessions):
        errors.extend(_session_errors(i, raw))
    if errors:
        raise ValidationError("Validation failed", errors=errors)

    return tuple(
        Session(
            day=raw["day"],
            time_slot=raw["time_slot"],
            subject=str(raw["subject"]).strip(),
            group_id=str(raw["group_id"]).strip(),
            room=str(raw["room"]).strip(),
            session_type=SessionType(raw["type"]),
            notes=(str(raw["notes"]).strip() or None) if raw.get("notes") else None,
        )
        for raw in raw_sessions
    )


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        teachers: TeacherRepository,
        groups: GroupRepository,
        *,
        checker: Optional[ScheduleConflictChecker] = None,
    ):
        self._schedules = schedules
        self._teachers = teachers
        self._groups = groups
        self._checker = checker or ScheduleConflictChecker(schedules, teachers, groups)

    def _require_groups(self, sessions: Sequence[Session]) -> None:
        wanted = {s.group_id for s in sessions}
        found = {g.group_id for g in self._groups.list_by_ids(sorted(wanted))}
        if wanted - found:
            raise NotFoundError("Un ou plusieurs groupes non trouvés")

    def _reject_conflicts(
        self,
        *,
        teacher_id: str,
        sessions: Sequence[Session],
        exclude_schedule_id: Optional[str] = None,
    ) -> None:
        all_conflicts: list[dict] = []
        for s in sessions:
            report = self._checker.check(
                ProposedSession(
                    teacher_id=teacher_id,
                    day=s.day,
                    time_slot=s.time_slot,
                    room=s.room,
                    group_id=s.group_id,
                ),
                exclude_schedule_id=exclude_schedule_id,
            )
            all_conflicts.extend(report.conflicts)

        if all_conflicts:
            logger.warning("Schedule rejected for teacher %s: %d conflict(s)", teacher_id, len(all_conflicts))
            raise ScheduleConflictError("Conflits détectés dans l'emploi du temps", conflicts=all_conflicts)

    def get(self, schedule_id: str) -> Schedule:
        schedule = self._schedules.get_by_id(schedule_id)
        if not schedule:
            raise NotFoundError("Emploi du temps non trouvé")
        return schedule

    def list_all(
        self,
        *,
        teacher_id: Optional[str] = None,
        academic_year: Optional[str] = None,
        week_number: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[Schedule]:
        return self._schedules.find(
            teacher_id=teacher_id,
            academic_year=academic_year,
            week_number=week_number,
            is_active=is_active,
        )

    def get_for_teacher(
        self,
        teacher_id: str,
        *,
        academic_year: Optional[str] = None,
        week_number: Optional[int] = None,
    ) -> Schedule:
        found = self._schedules.find(
            teacher_id=teacher_id,
            academic_year=academic_year,
            week_number=week_number,
            is_active=True,
        )
        if not found:
            raise NotFoundError("Aucun emploi du temps trouvé pour ce formateur")
        return found[0]

    def create(
        self,
        *,
        teacher_id: Optional[str],
        sessions: Any,
        week_number: Optional[int] = None,
        academic_year: Optional[str] = None,
        is_active: bool = True,
    ) -> Schedule:
        if not teacher_id:
            raise ValidationError(
                "Validation failed",
                errors=[{"field": "teacher_id", "message": "teacher_id is required"}],
            )
        parsed = parse_sessions(sessions)

        if not self._teachers.get_by_id(teacher_id):
            raise NotFoundError("Formateur non trouvé")
        self._require_groups(parsed)
        self._reject_conflicts(teacher_id=teacher_id, sessions=parsed)

        schedule = Schedule(
            schedule_id=new_id(),
            teacher_id=teacher_id,
            academic_year=academic_year or academic_year_for(now_local().date()),
            sessions=parsed,
            week_number=int(week_number or 1),
            is_active=bool(is_active),
        )
        self._schedules.create(schedule)
        logger.info("Schedule %s created for teacher %s (%d sessions)", schedule.schedule_id, teacher_id, len(parsed))
        return schedule

    def update(
        self,
        schedule_id: str,
        *,
        sessions: Any = None,
        week_number: Optional[int] = None,
        academic_year: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Schedule:
        schedule = self.get(schedule_id)
        changes: dict[str, Any] = {}

        if sessions is not None:
            parsed = parse_sessions(sessions)
            self._require_groups(parsed)
            self._reject_conflicts(
                teacher_id=schedule.teacher_id,
                sessions=parsed,
                exclude_schedule_id=schedule.schedule_id,
            )
            changes["sessions"] = parsed
        if week_number is not None:
            changes["week_number"] = int(week_number)
        if academic_year:
            changes["academic_year"] = academic_year
        if is_active is not None:
            changes["is_active"] = bool(is_active)

        updated = replace(schedule, **changes)
        if not self._schedules.update(updated):
            raise NotFoundError("Emploi du temps non trouvé")
        return updated

    def delete(self, schedule_id: str) -> None:
        if not self._schedules.delete_by_id(schedule_id):
            raise NotFoundError("Emploi du temps non trouvé")

    def check_conflicts(
        self,
        *,
        teacher_id: Optional[str],
        day: Optional[str],
        time_slot: Optional[str],
        room: Optional[str],
        group_id: Optional[str],
        exclude_schedule_id: Optional[str] = None,
    ) -> ConflictReport:
        errors: list[dict] = []
        if not teacher_id:
            errors.append({"field": "teacher_id", "message": "teacher_id is required"})
        if day not in SESSION_DAYS:
            errors.append({"field": "day", "message": f"day must be one of: {', '.join(SESSION_DAYS)}"})
        if time_slot not in TIME_SLOTS:
            errors.append({"field": "time_slot", "message": f"time_slot must be one of: {', '.join(TIME_SLOTS)}"})
        if errors:
            raise ValidationError("Validation failed", errors=errors)

        return self._checker.check(
            ProposedSession(
                teacher_id=teacher_id,
                day=day,
                time_slot=time_slot,
                room=(room or "").strip(),
                group_id=group_id or "",
            ),
            exclude_schedule_id=exclude_schedule_id,
        )

    def stats(self, *, academic_year: Optional[str] = None) -> dict:
        schedules = self._schedules.find(academic_year=academic_year, is_active=True)
        total_schedules = len(schedules)
        total_sessions = sum(len(s.sessions) for s in schedules)
        total_hours = sum(s.total_hours for s in schedules)
        average = round(total_sessions / total_schedules, 1) if total_schedules else 0
        return {
            "total_schedules": total_schedules,
            "total_sessions": total_sessions,
            "total_hours": total_hours,
            "average_sessions_per_schedule": average,
        }
