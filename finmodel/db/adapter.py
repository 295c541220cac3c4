"""
Storage adapter: one asynchronous query interface over SQLite or PostgreSQL.

Statements are written once, with ``$1, $2, ...`` positional placeholders and,
for inserts that need the generated key, a trailing ``RETURNING id`` clause.
Each adapter rewrites them into its driver's native form:

- SQLite: ``$n`` becomes ``?n``; ``RETURNING id`` is dropped from ``run`` and
  the new key is read from ``cursor.lastrowid``.
- PostgreSQL (psycopg2): ``$n`` becomes ``%(pn)s``; ``RETURNING id`` is kept
  and the new key is read from the returned row.

Usage:
    db = get_db()
    row = await db.get("SELECT * FROM decisions WHERE id = $1", [decision_id])
    result = await db.run(
        "INSERT INTO decisions (decision_text) VALUES ($1) RETURNING id", ["Hire"]
    )
    result["lastInsertRowid"]

Driver errors are never caught here; they reach the caller unmodified.
"""

import asyncio
import logging
import re
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypedDict

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy.dialects.postgresql.psycopg2 import PGDialect_psycopg2
from sqlalchemy.pool import QueuePool, StaticPool

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")
_RETURNING_ID_RE = re.compile(r"\s+RETURNING\s+id\s*;?\s*$", re.IGNORECASE)
_SSL_HOSTS_RE = re.compile(r"railway|rlwy\.net")


class RunResult(TypedDict):
    lastInsertRowid: int


def to_sqlite_placeholders(sql: str) -> str:
    """Rewrite ``$n`` to SQLite's numbered ``?n`` so reuse and reordering survive."""
    return _PLACEHOLDER_RE.sub(r"?\1", sql)


def strip_returning_id(sql: str) -> str:
    return _RETURNING_ID_RE.sub("", sql)


def to_pyformat(sql: str, params: Sequence[Any]) -> Tuple[str, Optional[Dict[str, Any]]]:
    """Rewrite ``$n`` to psycopg2 ``%(pn)s`` and build the matching mapping.

    Without parameters psycopg2 does not interpolate, so the text is returned
    untouched and literal ``%`` must not be doubled.
    """
    if not params:
        return sql, None
    escaped = sql.replace("%", "%%")
    rewritten = _PLACEHOLDER_RE.sub(lambda m: f"%(p{m.group(1)})s", escaped)
    return rewritten, {f"p{i}": value for i, value in enumerate(params, start=1)}


class DbAdapter(ABC):
    """Uniform async query interface; see the module docstring for the contract."""

    dialect: str = ""

    @abstractmethod
    async def get(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        """Return the first row of the result, or None."""

    @abstractmethod
    async def all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Return every row of the result."""

    @abstractmethod
    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        """Execute a mutating statement and report the generated id."""

    @abstractmethod
    async def exec(self, sql: str) -> None:
        """Execute schema/DDL text without parameters or result."""

    @abstractmethod
    def close(self) -> None:
        """Release every pooled driver connection."""


class SQLiteAdapter(DbAdapter):
    """Embedded file engine.

    One shared connection behind a lock: SQLite allows a single writer, and
    calls arrive from the worker threads used by ``asyncio.to_thread``.
    """

    dialect = "sqlite"

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()
        self._pool = StaticPool(self._connect)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, work: Callable[[Any], Any]) -> Any:
        with self._lock:
            conn = self._pool.connect()
            try:
                cursor = conn.cursor()
                try:
                    result = work(cursor)
                finally:
                    cursor.close()
                conn.commit()
                return result
            except Exception:
                conn.rollback()
                raise
            finally:
                conn.close()

    async def get(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        statement = to_sqlite_placeholders(sql)

        def work(cursor):
            cursor.execute(statement, tuple(params))
            row = cursor.fetchone()
            return dict(row) if row is not None else None

        return await asyncio.to_thread(self._execute, work)

    async def all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        statement = to_sqlite_placeholders(sql)

        def work(cursor):
            cursor.execute(statement, tuple(params))
            return [dict(row) for row in cursor.fetchall()]

        return await asyncio.to_thread(self._execute, work)

    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        statement = strip_returning_id(to_sqlite_placeholders(sql))

        def work(cursor):
            cursor.execute(statement, tuple(params))
            return RunResult(lastInsertRowid=int(cursor.lastrowid or 0))

        return await asyncio.to_thread(self._execute, work)

    async def exec(self, sql: str) -> None:
        statement = to_sqlite_placeholders(sql)
        await asyncio.to_thread(self._execute, lambda cursor: cursor.executescript(statement))

    def close(self) -> None:
        self._pool.dispose()


class PostgresAdapter(DbAdapter):
    """Networked engine over psycopg2 with a SQLAlchemy ``QueuePool``.

    ``creator`` replaces ``psycopg2.connect`` when given; it must return a
    DBAPI connection whose ``cursor(cursor_factory=...)`` yields mapping rows
    and that exposes ``autocommit`` and ``closed`` for the checkout ping.
    """

    dialect = "postgresql"

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_recycle: int = 3600,
        creator: Optional[Callable[[], Any]] = None,
    ):
        self.url = url
        self._pool = QueuePool(
            creator or self._connect,
            pool_size=pool_size,
            max_overflow=max_overflow,
            recycle=pool_recycle,
            # Checkouts run "SELECT 1" first; a dropped connection is replaced
            pre_ping=True,
            dialect=PGDialect_psycopg2(dbapi=psycopg2),
        )

    def _connect(self):
        kwargs = {}
        # Railway's public proxy only accepts TLS connections
        if _SSL_HOSTS_RE.search(self.url) and "sslmode=" not in self.url:
            kwargs["sslmode"] = "require"
        return psycopg2.connect(self.url, **kwargs)

    def _execute(self, sql: str, params: Sequence[Any], work: Callable[[Any], Any]) -> Any:
        statement, bound = to_pyformat(sql, params)
        conn = self._pool.connect()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                if bound is None:
                    cursor.execute(statement)
                else:
                    cursor.execute(statement, bound)
                result = work(cursor)
            conn.commit()
            return result
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    async def get(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        def work(cursor):
            if cursor.description is None:
                return None
            row = cursor.fetchone()
            return dict(row) if row is not None else None

        return await asyncio.to_thread(self._execute, sql, params, work)

    async def all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        def work(cursor):
            if cursor.description is None:
                return []
            return [dict(row) for row in cursor.fetchall()]

        return await asyncio.to_thread(self._execute, sql, params, work)

    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        def work(cursor):
            row = cursor.fetchone() if cursor.description is not None else None
            new_id = row.get("id") if row is not None else None
            # BIGSERIAL / NUMERIC keys arrive as Decimal or str on some setups
            return RunResult(lastInsertRowid=int(new_id) if new_id is not None else 0)

        return await asyncio.to_thread(self._execute, sql, params, work)

    async def exec(self, sql: str) -> None:
        await asyncio.to_thread(self._execute, sql, (), lambda cursor: None)

    def close(self) -> None:
        self._pool.dispose()


def create_adapter(config) -> DbAdapter:
    """Build the adapter selected by ``config`` (a Settings instance)."""
    if config.use_postgres:
        logger.info("Using PostgreSQL")
        return PostgresAdapter(
            config.database_url,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_recycle=config.DB_POOL_RECYCLE,
        )
    logger.info(f"Using SQLite (local): {config.DATABASE_PATH}")
    return SQLiteAdapter(config.DATABASE_PATH)


# Global adapter instance, created on first use
_db: Optional[DbAdapter] = None


def get_db() -> DbAdapter:
    """Get or create the process-wide adapter."""
    global _db
    if _db is None:
        from finmodel.core.config import settings

        _db = create_adapter(settings)
    return _db


def close_db() -> None:
    """Release the adapter's connections at shutdown."""
    if _db is not None:
        _db.close()
