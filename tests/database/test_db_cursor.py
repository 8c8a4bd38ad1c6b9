from __future__ import annotations

import pytest

from src.absence_manager.absence_manager.database.mysql_base import db_cursor


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cursors: list[FakeCursor] = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        cur = FakeCursor()
        self.cursors.append(cur)
        return cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self):
        self.opened: list[FakeConnection] = []

    def connect(self):
        conn = FakeConnection()
        self.opened.append(conn)
        return conn


def test_each_call_opens_and_closes_its_own_connection():
    factory = FakeFactory()

    with db_cursor(factory) as (first, _):
        pass
    with db_cursor(factory) as (second, _):
        pass

    assert first is not second
    assert [c.committed and c.closed for c in factory.opened] == [True, True]
    assert all(cur.closed for c in factory.opened for cur in c.cursors)


def test_failure_rolls_back_and_still_closes():
    factory = FakeFactory()

    with pytest.raises(RuntimeError):
        with db_cursor(factory):
            raise RuntimeError("boom")

    conn = factory.opened[0]
    assert (conn.committed, conn.rolled_back, conn.closed) == (False, True, True)
