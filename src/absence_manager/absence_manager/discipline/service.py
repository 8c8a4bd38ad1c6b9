from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..absences.model import TraineeAbsence
from ..absences.repository import TraineeAbsenceRepository
from ..common.numbers import round_half_up
from ..core.enums import AbsenceStatus
from .calculator.base import DisciplinaryStatus, DisciplineCalculator
from .calculator.standard_calculator import StandardDisciplineCalculator


@dataclass(frozen=True)
class DisciplineSummary:
    total_absence_hours: float
    late_count: int
    absent_count: int
    justified_count: int
    note: float
    status: DisciplinaryStatus

    def to_dict(self) -> dict:
        return {
            "total_absence_hours": self.total_absence_hours,
            "late_count": self.late_count,
            "absent_count": self.absent_count,
            "justified_count": self.justified_count,
            "disciplinary_note": self.note,
            "disciplinary_status": self.status.to_dict(),
        }


class DisciplineService:
    """Aggregates a trainee's entries into hours, counts and the 0-20 note.

    Computed on demand from stored entries; nothing here is cached or written.
    """

    def __init__(
        self,
        entries: TraineeAbsenceRepository,
        *,
        calculator: Optional[DisciplineCalculator] = None,
    ):
        self._entries = entries
        self._calculator = calculator or StandardDisciplineCalculator()

    def summarize(self, entries: Sequence[TraineeAbsence]) -> DisciplineSummary:
        total = 0.0
        late_count = 0
        absent_count = 0
        justified_count = 0
        for e in entries:
            if e.status == AbsenceStatus.ABSENT:
                absent_count += 1
                if not e.is_justified:
                    total += e.absence_hours
            elif e.status == AbsenceStatus.LATE:
                # Lates count toward the note even when justified.
                late_count += 1
            if e.is_justified:
                justified_count += 1

        total = round_half_up(total, 1)
        return DisciplineSummary(
            total_absence_hours=total,
            late_count=late_count,
            absent_count=absent_count,
            justified_count=justified_count,
            note=self._calculator.note(total_absence_hours=total, late_count=late_count),
            status=self._calculator.status(total_absence_hours=total),
        )

    def for_trainee(self, trainee_id: str) -> DisciplineSummary:
        return self.summarize(self._entries.list_for_trainee(trainee_id))

    def for_trainees(self, trainee_ids: Sequence[str]) -> dict[str, DisciplineSummary]:
        grouped: dict[str, list[TraineeAbsence]] = {tid: [] for tid in trainee_ids}
        for e in self._entries.list_for_trainees(list(trainee_ids)):
            grouped.setdefault(e.trainee_id, []).append(e)
        return {tid: self.summarize(rows) for tid, rows in grouped.items()}
