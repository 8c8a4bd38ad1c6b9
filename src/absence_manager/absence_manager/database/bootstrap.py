"""Schema and demo-account setup used at startup and by the scripts/ helpers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

import mysql.connector
from werkzeug.security import generate_password_hash

from ..common.identifiers import new_id

logger = logging.getLogger(__name__)

DEMO_SG_EMAIL = "sg@example.com"
DEMO_SG_PASSWORD = "sg123456"


@contextmanager
def _server(db_config: dict, *, use_database: bool = True):
    kwargs = {
        "host": str(db_config.get("host", "localhost")),
        "port": int(db_config.get("port", 3306)),
        "user": str(db_config.get("user", "root")),
        "password": str(db_config.get("password", "")),
    }
    if use_database:
        kwargs["database"] = str(db_config["database"])
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def split_statements(sql: str) -> Iterator[str]:
    """Yield statements of a schema file.

    Statements end with ';' at the end of a line. `--` comment lines, `CREATE DATABASE`
    and `USE` are dropped so the file works whatever database name is configured.
    """
    pending: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        pending.append(line)
        if stripped.endswith(";"):
            statement = "\n".join(pending).strip().rstrip(";").strip()
            pending = []
            words = statement.upper().split()
            if words[:2] == ["CREATE", "DATABASE"] or words[:1] == ["USE"]:
                continue
            yield statement
    if pending:
        yield "\n".join(pending).strip()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    database = db_config["database"]
    with _server(db_config, use_database=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )

    count = 0
    with _server(db_config) as conn:
        cur = conn.cursor()
        for statement in split_statements(Path(schema_path).read_text(encoding="utf-8")):
            cur.execute(statement)
            count += 1
    logger.info("Applied %d statements from %s to %s", count, schema_path, database)


def _upsert_staff(cur, *, name: str, email: str, password: str, role: str) -> None:
    cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
    password_hash = generate_password_hash(password)
    if cur.fetchone():
        cur.execute(
            "UPDATE users SET name=%s, password_hash=%s, role=%s, is_active=1 WHERE email=%s",
            (name, password_hash, role, email),
        )
        return
    cur.execute(
        "INSERT INTO users (user_id, name, email, password_hash, role, is_active, must_change_password) "
        "VALUES (%s, %s, %s, %s, %s, 1, 0)",
        (new_id(), name, email, password_hash, role),
    )


def ensure_demo_users(db_config: dict, *, admin_email: str, admin_password: str) -> None:
    """Upsert one admin and one sg account so a fresh database can be logged into."""
    with _server(db_config) as conn:
        cur = conn.cursor(dictionary=True)
        _upsert_staff(cur, name="Administrateur", email=admin_email, password=admin_password, role="admin")
        _upsert_staff(cur, name="Surveillant Général", email=DEMO_SG_EMAIL, password=DEMO_SG_PASSWORD, role="sg")
    logger.info("Demo accounts ready (admin=%s, sg=%s)", admin_email, DEMO_SG_EMAIL)


def list_tables(db_config: dict) -> list[str]:
    with _server(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
