"""
Pytest configuration and fixtures for the FinModel test suite.

The PostgreSQL code path runs against ``FakePgConnection``: a DBAPI-shaped
wrapper over an in-memory SQLite database that accepts psycopg2's
``%(name)s`` parameter style and ``RETURNING`` clauses, so no server is needed.
"""

import asyncio
import re
import sqlite3

import psycopg2
import pytest
from fastapi.testclient import TestClient

from finmodel.api import deps
from finmodel.db.adapter import PostgresAdapter, SQLiteAdapter
from finmodel.db.schema import SQLITE_SCHEMA, init_schema
from finmodel.events import EventBroadcaster
from finmodel.main import create_app

_PYFORMAT_RE = re.compile(r"%\((\w+)\)s")


class FakePgCursor:
    def __init__(self, conn: "FakePgConnection"):
        self._conn = conn
        self._cursor = conn.sqlite.cursor()
        self._rows = []
        self.description = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def execute(self, sql, params=None):
        if self._conn.closed:
            raise psycopg2.OperationalError("server closed the connection unexpectedly")
        # The pool's checkout ping is not part of the statement log
        if sql.strip().upper() != "SELECT 1":
            self._conn.executed.append((sql, params))
        if params is None:
            self._cursor.execute(sql)
        else:
            self._cursor.execute(_PYFORMAT_RE.sub(r":\1", sql).replace("%%", "%"), params)
        self.description = self._cursor.description
        # Drain now so RETURNING statements are complete before commit
        self._rows = [dict(row) for row in self._cursor.fetchall()] if self.description else []

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        self._cursor.close()


class FakePgConnection:
    def __init__(self, sqlite_conn: sqlite3.Connection, executed: list):
        self.sqlite = sqlite_conn
        self.executed = executed
        self.autocommit = False
        self.closed = 0

    def cursor(self, cursor_factory=None):
        return FakePgCursor(self)

    def commit(self):
        self.sqlite.commit()

    def rollback(self):
        if not self.closed:
            self.sqlite.rollback()

    def close(self):
        self.closed = 1


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def sqlite_db(tmp_path):
    db = SQLiteAdapter(str(tmp_path / "finmodel-test.db"))
    run(init_schema(db))
    yield db
    db.close()


@pytest.fixture
def pg_executed():
    return []


@pytest.fixture
def fake_pg_db(pg_executed):
    shared = sqlite3.connect(":memory:", check_same_thread=False)
    shared.row_factory = sqlite3.Row
    for statement in SQLITE_SCHEMA:
        shared.execute(statement)
    shared.commit()
    db = PostgresAdapter(
        "postgresql://finmodel@localhost/finmodel",
        creator=lambda: FakePgConnection(shared, pg_executed),
    )
    yield db
    db.close()
    shared.close()


@pytest.fixture
def events():
    return EventBroadcaster()


@pytest.fixture
def app(sqlite_db, events):
    app = create_app(use_lifespan=False)
    app.dependency_overrides[deps.get_database] = lambda: sqlite_db
    app.dependency_overrides[deps.get_broadcaster] = lambda: events
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class RecordingConnection:
    """Stand-in event stream connection that keeps every frame written."""

    def __init__(self, fail: bool = False):
        self.frames = []
        self.fail = fail

    def write(self, frame):
        if self.fail:
            raise BrokenPipeError("client went away")
        self.frames.append(frame)
