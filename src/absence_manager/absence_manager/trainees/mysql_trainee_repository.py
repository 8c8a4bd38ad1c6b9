from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Trainee
from .repository import TraineeRepository

_COLUMNS = "trainee_id, cef, name, first_name, group_name, group_id, phone"


def _to_trainee(row: dict) -> Trainee:
    return Trainee(
        trainee_id=row["trainee_id"],
        cef=row["cef"],
        name=row["name"],
        first_name=row["first_name"],
        group_name=row["group_name"],
        group_id=row.get("group_id"),
        phone=row.get("phone"),
    )


class MySQLTraineeRepository(TraineeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, trainee_id: str) -> Optional[Trainee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM trainees WHERE trainee_id=%s", (trainee_id,))
            row = fetchone(cur)
            return _to_trainee(row) if row else None

    def get_by_cef(self, cef: str) -> Optional[Trainee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM trainees WHERE cef=%s", (cef,))
            row = fetchone(cur)
            return _to_trainee(row) if row else None

    def list_all(self, *, group_name: Optional[str] = None) -> Sequence[Trainee]:
        with db_cursor(self._conn_factory) as (_, cur):
            if group_name:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM trainees WHERE group_name=%s ORDER BY name, first_name",
                    (group_name,),
                )
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM trainees ORDER BY name, first_name")
            return [_to_trainee(r) for r in fetchall(cur)]

    def list_by_ids(self, trainee_ids: Sequence[str]) -> Sequence[Trainee]:
        if not trainee_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM trainees WHERE trainee_id IN ({in_clause(trainee_ids)})",
                tuple(trainee_ids),
            )
            return [_to_trainee(r) for r in fetchall(cur)]

    def create(self, trainee: Trainee) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO trainees(trainee_id, cef, name, first_name, group_name, group_id, phone)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    trainee.trainee_id,
                    trainee.cef,
                    trainee.name,
                    trainee.first_name,
                    trainee.group_name,
                    trainee.group_id,
                    trainee.phone,
                ),
            )
            return trainee.trainee_id

    def update(self, trainee: Trainee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE trainees
                SET cef=%s, name=%s, first_name=%s, group_name=%s, group_id=%s, phone=%s
                WHERE trainee_id=%s
                """,
                (
                    trainee.cef,
                    trainee.name,
                    trainee.first_name,
                    trainee.group_name,
                    trainee.group_id,
                    trainee.phone,
                    trainee.trainee_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, trainee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM trainees WHERE trainee_id=%s", (trainee_id,))
            return cur.rowcount > 0

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM trainees")
            return int(cur.rowcount)
