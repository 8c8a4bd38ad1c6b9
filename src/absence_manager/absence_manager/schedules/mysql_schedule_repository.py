from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SessionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, where_sql
from .model import Schedule, Session
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, teacher_id, week_number, academic_year, is_active"


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _hydrate(self, cur, rows: list[dict]) -> list[Schedule]:
        if not rows:
            return []
        ids = [r["schedule_id"] for r in rows]
        cur.execute(
            f"""
            SELECT schedule_id, position, day, time_slot, subject, group_id, room, session_type, notes
            FROM schedule_sessions
            WHERE schedule_id IN ({in_clause(ids)})
            ORDER BY schedule_id, position
            """,
            tuple(ids),
        )
        sessions: dict[str, list[Session]] = {}
        for s in fetchall(cur):
            sessions.setdefault(s["schedule_id"], []).append(
                Session(
                    day=s["day"],
                    time_slot=s["time_slot"],
                    subject=s["subject"],
                    group_id=s["group_id"],
                    room=s["room"],
                    session_type=SessionType(s["session_type"]),
                    notes=s.get("notes"),
                )
            )

        return [
            Schedule(
                schedule_id=r["schedule_id"],
                teacher_id=r["teacher_id"],
                academic_year=r["academic_year"],
                week_number=int(r["week_number"]),
                is_active=bool(r["is_active"]),
                sessions=tuple(sessions.get(r["schedule_id"], [])),
            )
            for r in rows
        ]

    def _write_sessions(self, cur, schedule: Schedule) -> None:
        cur.execute("DELETE FROM schedule_sessions WHERE schedule_id=%s", (schedule.schedule_id,))
        for position, s in enumerate(schedule.sessions):
            cur.execute(
                """
                INSERT INTO schedule_sessions(schedule_id, position, day, time_slot, subject, group_id, room, session_type, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    schedule.schedule_id,
                    position,
                    s.day,
                    s.time_slot,
                    s.subject,
                    s.group_id,
                    s.room,
                    s.session_type.value,
                    s.notes,
                ),
            )

    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedules WHERE schedule_id=%s", (schedule_id,))
            row = fetchone(cur)
            if not row:
                return None
            return self._hydrate(cur, [row])[0]

    def find(
        self,
        *,
        teacher_id: Optional[str] = None,
        academic_year: Optional[str] = None,
        week_number: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[Schedule]:
        clauses: list[str] = []
        params: list[object] = []
        if teacher_id:
            clauses.append("teacher_id=%s")
            params.append(teacher_id)
        if academic_year:
            clauses.append("academic_year=%s")
            params.append(academic_year)
        if week_number is not None:
            clauses.append("week_number=%s")
            params.append(int(week_number))
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(int(is_active))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedules {where_sql(clauses)} ORDER BY created_at DESC",
                tuple(params),
            )
            return self._hydrate(cur, fetchall(cur))

    def find_active_with_slot(
        self,
        *,
        day: str,
        time_slot: str,
        exclude_schedule_id: Optional[str] = None,
    ) -> Sequence[Schedule]:
        clauses = [
            "sc.is_active=1",
            "EXISTS (SELECT 1 FROM schedule_sessions ss WHERE ss.schedule_id=sc.schedule_id AND ss.day=%s AND ss.time_slot=%s)",
        ]
        params: list[object] = [day, time_slot]
        if exclude_schedule_id:
            clauses.append("sc.schedule_id<>%s")
            params.append(exclude_schedule_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT sc.schedule_id, sc.teacher_id, sc.week_number, sc.academic_year, sc.is_active
                FROM schedules sc
                {where_sql(clauses)}
                """,
                tuple(params),
            )
            return self._hydrate(cur, fetchall(cur))

    def create(self, schedule: Schedule) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(schedule_id, teacher_id, week_number, academic_year, is_active)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    schedule.schedule_id,
                    schedule.teacher_id,
                    int(schedule.week_number),
                    schedule.academic_year,
                    int(schedule.is_active),
                ),
            )
            self._write_sessions(cur, schedule)
            return schedule.schedule_id

    def update(self, schedule: Schedule) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedules
                SET teacher_id=%s, week_number=%s, academic_year=%s, is_active=%s
                WHERE schedule_id=%s
                """,
                (
                    schedule.teacher_id,
                    int(schedule.week_number),
                    schedule.academic_year,
                    int(schedule.is_active),
                    schedule.schedule_id,
                ),
            )
            if cur.rowcount == 0:
                return False
            self._write_sessions(cur, schedule)
            return True

    def delete_by_id(self, schedule_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE schedule_id=%s", (schedule_id,))
            return cur.rowcount > 0
