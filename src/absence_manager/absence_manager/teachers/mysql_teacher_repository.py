from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = (
    "teacher_id, first_name, last_name, email, matricule, password_hash, "
    "must_change_password, is_active, schedule_path"
)


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _hydrate(self, cur, rows: list[dict]) -> list[Teacher]:
        if not rows:
            return []
        ids = [r["teacher_id"] for r in rows]
        cur.execute(
            f"SELECT teacher_id, group_id FROM teacher_groups WHERE teacher_id IN ({in_clause(ids)})",
            tuple(ids),
        )
        groups: dict[str, list[str]] = {}
        for g in fetchall(cur):
            groups.setdefault(g["teacher_id"], []).append(g["group_id"])

        return [
            Teacher(
                teacher_id=r["teacher_id"],
                first_name=r["first_name"],
                last_name=r["last_name"],
                email=r["email"],
                matricule=r["matricule"],
                password_hash=r["password_hash"],
                must_change_password=bool(r["must_change_password"]),
                is_active=bool(r["is_active"]),
                group_ids=tuple(groups.get(r["teacher_id"], [])),
                schedule_path=r.get("schedule_path"),
            )
            for r in rows
        ]

    def _get_one(self, column: str, value: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE {column}=%s", (value,))
            row = fetchone(cur)
            if not row:
                return None
            return self._hydrate(cur, [row])[0]

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return self._get_one("teacher_id", teacher_id)

    def get_by_email(self, email: str) -> Optional[Teacher]:
        return self._get_one("email", email)

    def get_by_matricule(self, matricule: str) -> Optional[Teacher]:
        return self._get_one("matricule", matricule)

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY last_name, first_name")
            return self._hydrate(cur, fetchall(cur))

    def _write_groups(self, cur, teacher: Teacher) -> None:
        cur.execute("DELETE FROM teacher_groups WHERE teacher_id=%s", (teacher.teacher_id,))
        for group_id in teacher.group_ids:
            cur.execute(
                "INSERT INTO teacher_groups(teacher_id, group_id) VALUES(%s,%s)",
                (teacher.teacher_id, group_id),
            )

    def create(self, teacher: Teacher) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers(teacher_id, first_name, last_name, email, matricule, password_hash,
                                     must_change_password, is_active, schedule_path)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    teacher.teacher_id,
                    teacher.first_name,
                    teacher.last_name,
                    teacher.email,
                    teacher.matricule,
                    teacher.password_hash,
                    int(teacher.must_change_password),
                    int(teacher.is_active),
                    teacher.schedule_path,
                ),
            )
            self._write_groups(cur, teacher)
            return teacher.teacher_id

    def update(self, teacher: Teacher) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE teachers
                SET first_name=%s, last_name=%s, email=%s, matricule=%s, password_hash=%s,
                    must_change_password=%s, is_active=%s, schedule_path=%s
                WHERE teacher_id=%s
                """,
                (
                    teacher.first_name,
                    teacher.last_name,
                    teacher.email,
                    teacher.matricule,
                    teacher.password_hash,
                    int(teacher.must_change_password),
                    int(teacher.is_active),
                    teacher.schedule_path,
                    teacher.teacher_id,
                ),
            )
            if cur.rowcount == 0:
                return False
            self._write_groups(cur, teacher)
            return True

    def delete_by_id(self, teacher_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teachers WHERE teacher_id=%s", (teacher_id,))
            return cur.rowcount > 0
