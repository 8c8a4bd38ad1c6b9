from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import SLOT_HOURS
from ..core.enums import SessionType


@dataclass(frozen=True)
class Session:
    day: str
    time_slot: str
    subject: str
    group_id: str
    room: str
    session_type: SessionType
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "time_slot": self.time_slot,
            "subject": self.subject,
            "group_id": self.group_id,
            "room": self.room,
            "type": self.session_type.value,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class Schedule:
    """One teacher's weekly plan; sessions have no identity outside it."""

    schedule_id: str
    teacher_id: str
    academic_year: str
    sessions: tuple[Session, ...] = ()
    week_number: int = 1
    is_active: bool = True

    @property
    def total_hours(self) -> float:
        return len(self.sessions) * SLOT_HOURS

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "teacher_id": self.teacher_id,
            "academic_year": self.academic_year,
            "week_number": self.week_number,
            "is_active": self.is_active,
            "sessions": [s.to_dict() for s in self.sessions],
            "total_hours": self.total_hours,
        }
