from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceStatus


@dataclass(frozen=True)
class AbsenceRecord:
    """One attendance-taking event for a group session."""

    record_id: str
    record_date: date
    group_id: str
    start_time: str
    end_time: str
    teacher_id: Optional[str] = None
    is_validated: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "date": self.record_date.strftime("%Y-%m-%d"),
            "group_id": self.group_id,
            "teacher_id": self.teacher_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "is_validated": self.is_validated,
        }


@dataclass(frozen=True)
class TraineeAbsence:
    """Outcome of one trainee for one AbsenceRecord."""

    absence_id: str
    trainee_id: str
    record_id: str
    status: AbsenceStatus
    absence_hours: float = 0.0
    is_validated: bool = False
    is_justified: bool = False
    has_billet_entree: bool = False
    validated_by: Optional[str] = None
    validated_at: Optional[datetime] = None
    justification_comment: Optional[str] = None
    validation_comment: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.absence_id,
            "trainee_id": self.trainee_id,
            "record_id": self.record_id,
            "status": self.status.value,
            "absence_hours": self.absence_hours,
            "is_validated": self.is_validated,
            "is_justified": self.is_justified,
            "has_billet_entree": self.has_billet_entree,
            "validated_by": self.validated_by,
            "validated_at": self.validated_at.strftime("%Y-%m-%d %H:%M:%S") if self.validated_at else None,
            "justification_comment": self.justification_comment,
            "validation_comment": self.validation_comment,
        }
