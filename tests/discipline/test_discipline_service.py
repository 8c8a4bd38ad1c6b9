from __future__ import annotations

from src.absence_manager.absence_manager.absences.model import TraineeAbsence
from src.absence_manager.absence_manager.core.enums import AbsenceStatus
from src.absence_manager.absence_manager.discipline.service import DisciplineService

from tests.fakes import InMemoryEntries


def _entry(i: int, status: AbsenceStatus, hours: float, *, justified: bool = False) -> TraineeAbsence:
    return TraineeAbsence(
        absence_id=f"e{i}",
        trainee_id="t1",
        record_id=f"r{i}",
        status=status,
        absence_hours=hours,
        is_justified=justified,
    )


def test_summary_ignores_justified_hours_but_counts_lates():
    entries = InMemoryEntries(
        [
            _entry(1, AbsenceStatus.ABSENT, 2.5),
            _entry(2, AbsenceStatus.ABSENT, 2.5),
            _entry(3, AbsenceStatus.ABSENT, 0.0, justified=True),
            _entry(4, AbsenceStatus.LATE, 1.0),
            _entry(5, AbsenceStatus.LATE, 1.0, justified=True),
        ]
    )
    summary = DisciplineService(entries).for_trainee("t1")

    assert summary.total_absence_hours == 5.0
    assert summary.absent_count == 3
    assert summary.late_count == 2
    assert summary.justified_count == 2
    assert summary.note == 19.0
    assert summary.status.label == "1er AVERT (SC)"


def test_trainee_without_entries_is_normal():
    summaries = DisciplineService(InMemoryEntries()).for_trainees(["t9"])
    assert summaries["t9"].note == 20.0
    assert summaries["t9"].to_dict()["disciplinary_status"]["label"] == "NORMAL"
