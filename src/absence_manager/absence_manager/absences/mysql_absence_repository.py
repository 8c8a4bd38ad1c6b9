from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AbsenceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, where_sql
from .model import AbsenceRecord, TraineeAbsence
from .repository import AbsenceRecordRepository, TraineeAbsenceRepository

_RECORD_COLUMNS = "record_id, record_date, group_id, teacher_id, start_time, end_time, is_validated"
_ENTRY_COLUMNS = (
    "absence_id, trainee_id, record_id, status, absence_hours, is_validated, is_justified, "
    "has_billet_entree, validated_by, validated_at, justification_comment, validation_comment, created_at"
)


def _to_record(row: dict) -> AbsenceRecord:
    return AbsenceRecord(
        record_id=row["record_id"],
        record_date=row["record_date"],
        group_id=row["group_id"],
        teacher_id=row.get("teacher_id"),
        start_time=row["start_time"],
        end_time=row["end_time"],
        is_validated=bool(row.get("is_validated", False)),
    )


def _to_entry(row: dict) -> TraineeAbsence:
    return TraineeAbsence(
        absence_id=row["absence_id"],
        trainee_id=row["trainee_id"],
        record_id=row["record_id"],
        status=AbsenceStatus(row["status"]),
        absence_hours=float(row.get("absence_hours") or 0),
        is_validated=bool(row.get("is_validated", False)),
        is_justified=bool(row.get("is_justified", False)),
        has_billet_entree=bool(row.get("has_billet_entree", False)),
        validated_by=row.get("validated_by"),
        validated_at=row.get("validated_at"),
        justification_comment=row.get("justification_comment"),
        validation_comment=row.get("validation_comment"),
        created_at=row.get("created_at"),
    )


class MySQLAbsenceRecordRepository(AbsenceRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AbsenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM absence_records WHERE record_id=%s", (record_id,))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def list_by_ids(self, record_ids: Sequence[str]) -> Sequence[AbsenceRecord]:
        if not record_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM absence_records WHERE record_id IN ({in_clause(record_ids)})",
                tuple(record_ids),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find(
        self,
        *,
        group_id: Optional[str] = None,
        on_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AbsenceRecord]:
        clauses: list[str] = []
        params: list = []
        if group_id:
            clauses.append("group_id=%s")
            params.append(group_id)
        if start_date and end_date:
            clauses.append("record_date BETWEEN %s AND %s")
            params.extend([start_date, end_date])
        elif on_date:
            clauses.append("record_date=%s")
            params.append(on_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM absence_records {where_sql(clauses)} "
                "ORDER BY record_date DESC, start_time",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: AbsenceRecord) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absence_records(record_id, record_date, group_id, teacher_id, start_time, end_time, is_validated)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.record_id,
                    record.record_date,
                    record.group_id,
                    record.teacher_id,
                    record.start_time,
                    record.end_time,
                    int(record.is_validated),
                ),
            )
            return record.record_id

    def update(self, record: AbsenceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absence_records
                SET record_date=%s, group_id=%s, teacher_id=%s, start_time=%s, end_time=%s, is_validated=%s
                WHERE record_id=%s
                """,
                (
                    record.record_date,
                    record.group_id,
                    record.teacher_id,
                    record.start_time,
                    record.end_time,
                    int(record.is_validated),
                    record.record_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM absence_records WHERE record_id=%s", (record_id,))
            return cur.rowcount > 0

    def set_validated_for_group_date(self, *, group_id: str, on_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE absence_records SET is_validated=1 WHERE group_id=%s AND record_date=%s",
                (group_id, on_date),
            )
            return int(cur.rowcount)


class MySQLTraineeAbsenceRepository(TraineeAbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, absence_id: str) -> Optional[TraineeAbsence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM trainee_absences WHERE absence_id=%s", (absence_id,))
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def _list_where(self, column: str, values: Sequence[str], order_by: str) -> list[TraineeAbsence]:
        if not values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM trainee_absences WHERE {column} IN ({in_clause(values)}) ORDER BY {order_by}",
                tuple(values),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_record(self, record_id: str) -> Sequence[TraineeAbsence]:
        return self._list_where("record_id", [record_id], "created_at")

    def list_for_records(self, record_ids: Sequence[str]) -> Sequence[TraineeAbsence]:
        return self._list_where("record_id", list(record_ids), "created_at")

    def list_for_trainee(self, trainee_id: str) -> Sequence[TraineeAbsence]:
        return self._list_where("trainee_id", [trainee_id], "created_at DESC")

    def list_for_trainees(self, trainee_ids: Sequence[str]) -> Sequence[TraineeAbsence]:
        return self._list_where("trainee_id", list(trainee_ids), "created_at DESC")

    def create(self, absence: TraineeAbsence) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO trainee_absences(
                    absence_id, trainee_id, record_id, status, absence_hours,
                    is_validated, is_justified, has_billet_entree
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    absence.absence_id,
                    absence.trainee_id,
                    absence.record_id,
                    absence.status.value,
                    absence.absence_hours,
                    int(absence.is_validated),
                    int(absence.is_justified),
                    int(absence.has_billet_entree),
                ),
            )
            return absence.absence_id

    def update(self, absence: TraineeAbsence) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE trainee_absences
                SET status=%s, absence_hours=%s, is_validated=%s, is_justified=%s, has_billet_entree=%s,
                    validated_by=%s, validated_at=%s, justification_comment=%s, validation_comment=%s
                WHERE absence_id=%s
                """,
                (
                    absence.status.value,
                    absence.absence_hours,
                    int(absence.is_validated),
                    int(absence.is_justified),
                    int(absence.has_billet_entree),
                    absence.validated_by,
                    absence.validated_at,
                    absence.justification_comment,
                    absence.validation_comment,
                    absence.absence_id,
                ),
            )
            return cur.rowcount > 0

    def delete_for_record(self, record_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM trainee_absences WHERE record_id=%s", (record_id,))
            return int(cur.rowcount)

    def delete_for_trainee(self, trainee_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM trainee_absences WHERE trainee_id=%s", (trainee_id,))
            return int(cur.rowcount)

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM trainee_absences")
            return int(cur.rowcount)
