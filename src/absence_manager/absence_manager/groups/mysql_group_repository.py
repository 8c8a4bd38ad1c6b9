from __future__ import annotations

from typing import Optional, Sequence

from ..common.identifiers import new_id
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Group
from .repository import GroupRepository

_COLUMNS = "group_id, name, filiere, annee, created_by"


def _to_group(row: dict) -> Group:
    return Group(
        group_id=row["group_id"],
        name=row["name"],
        filiere=row.get("filiere"),
        annee=row.get("annee"),
        created_by=row.get("created_by"),
    )


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, group_id: str) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM `groups` WHERE group_id=%s", (group_id,))
            row = fetchone(cur)
            return _to_group(row) if row else None

    def get_by_name(self, name: str) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM `groups` WHERE name=%s", (name,))
            row = fetchone(cur)
            return _to_group(row) if row else None

    def list_all(self) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM `groups` ORDER BY name")
            return [_to_group(r) for r in fetchall(cur)]

    def list_by_ids(self, group_ids: Sequence[str]) -> Sequence[Group]:
        if not group_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM `groups` WHERE group_id IN ({in_clause(group_ids)}) ORDER BY name",
                tuple(group_ids),
            )
            return [_to_group(r) for r in fetchall(cur)]

    def list_by_names(self, names: Sequence[str]) -> Sequence[Group]:
        if not names:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM `groups` WHERE name IN ({in_clause(names)}) ORDER BY name",
                tuple(names),
            )
            return [_to_group(r) for r in fetchall(cur)]

    def get_or_create_by_name(self, name: str) -> Group:
        with db_cursor(self._conn_factory) as (_, cur):
            # INSERT IGNORE relies on the unique index on name.
            cur.execute(
                "INSERT IGNORE INTO `groups`(group_id, name) VALUES(%s,%s)",
                (new_id(), name),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM `groups` WHERE name=%s", (name,))
            return _to_group(fetchone(cur))

    def create(self, group: Group) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO `groups`(group_id, name, filiere, annee, created_by) VALUES(%s,%s,%s,%s,%s)",
                (group.group_id, group.name, group.filiere, group.annee, group.created_by),
            )
            return group.group_id

    def update(self, group: Group) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE `groups` SET name=%s, filiere=%s, annee=%s WHERE group_id=%s",
                (group.name, group.filiere, group.annee, group.group_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, group_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM `groups` WHERE group_id=%s", (group_id,))
            return cur.rowcount > 0
