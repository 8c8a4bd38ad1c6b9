from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AbsenceRecord, TraineeAbsence


class AbsenceRecordRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AbsenceRecord]:
        raise NotImplementedError

    def list_by_ids(self, record_ids: Sequence[str]) -> Sequence[AbsenceRecord]:
        raise NotImplementedError

    def find(
        self,
        *,
        group_id: Optional[str] = None,
        on_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AbsenceRecord]:
        """Records matching every given filter, newest date first.

        A date range needs both bounds; `on_date` is ignored when a range is given.
        """

        raise NotImplementedError

    def create(self, record: AbsenceRecord) -> str:
        raise NotImplementedError

    def update(self, record: AbsenceRecord) -> bool:
        raise NotImplementedError

    def delete_by_id(self, record_id: str) -> bool:
        raise NotImplementedError

    def set_validated_for_group_date(self, *, group_id: str, on_date: date) -> int:
        raise NotImplementedError


class TraineeAbsenceRepository(Protocol):
    def get_by_id(self, absence_id: str) -> Optional[TraineeAbsence]:
        raise NotImplementedError

    def list_for_record(self, record_id: str) -> Sequence[TraineeAbsence]:
        raise NotImplementedError

    def list_for_records(self, record_ids: Sequence[str]) -> Sequence[TraineeAbsence]:
        raise NotImplementedError

    def list_for_trainee(self, trainee_id: str) -> Sequence[TraineeAbsence]:
        """Entries of one trainee, newest first."""

        raise NotImplementedError

    def list_for_trainees(self, trainee_ids: Sequence[str]) -> Sequence[TraineeAbsence]:
        raise NotImplementedError

    def create(self, absence: TraineeAbsence) -> str:
        raise NotImplementedError

    def update(self, absence: TraineeAbsence) -> bool:
        raise NotImplementedError

    def delete_for_record(self, record_id: str) -> int:
        raise NotImplementedError

    def delete_for_trainee(self, trainee_id: str) -> int:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
