"""SQLite connection adapter.

Wraps a raw :class:`sqlite3.Connection` to satisfy the
:class:`~safety_spine.core.protocols.Connection` protocol.

The scheduler runs report pipelines on APScheduler worker threads while the
API thread keeps serving CRUD calls, so one adapter is shared across
threads. Each statement runs under a lock and its rows are materialised
before the lock is released; callers never share a live cursor.

Usage::

    from safety_spine.core.sqlite_conn import SqliteConnection

    conn = SqliteConnection(":memory:")
    conn.execute("CREATE TABLE t (id INTEGER)")
    conn.execute("INSERT INTO t VALUES (?)", (1,))
    row = conn.execute("SELECT * FROM t").fetchone()
    conn.commit()
    conn.close()
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Any


class StatementResult:
    """Materialised result of one statement."""

    __slots__ = ("_rows", "_pos", "rowcount", "lastrowid")

    def __init__(self, rows: list, rowcount: int, lastrowid: int | None) -> None:
        self._rows = rows
        self._pos = 0
        self.rowcount = rowcount
        self.lastrowid = lastrowid

    def fetchone(self) -> Any:
        if self._pos >= len(self._rows):
            return None
        row = self._rows[self._pos]
        self._pos += 1
        return row

    def fetchall(self) -> list:
        rows = self._rows[self._pos:]
        self._pos = len(self._rows)
        return rows


class SqliteConnection:
    """Adapter: ``sqlite3.Connection`` → ``Connection`` protocol."""

    def __init__(self, path: str = ":memory:", *, row_factory: Any = sqlite3.Row) -> None:
        if path != ":memory:":
            Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            path = str(Path(path).expanduser())
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = row_factory
        self._lock = threading.RLock()
        self._last = StatementResult([], -1, None)

    # -- Connection protocol -----------------------------------------------

    def execute(self, sql: str, params: tuple | list = ()) -> StatementResult:
        with self._lock:
            cursor = self._conn.execute(sql, tuple(params))
            result = StatementResult(cursor.fetchall(), cursor.rowcount, cursor.lastrowid)
            cursor.close()
            self._last = result
            return result

    def executemany(self, sql: str, params: list[tuple]) -> StatementResult:
        with self._lock:
            cursor = self._conn.executemany(sql, params)
            result = StatementResult([], cursor.rowcount, cursor.lastrowid)
            cursor.close()
            self._last = result
            return result

    def fetchone(self) -> Any:
        return self._last.fetchone()

    def fetchall(self) -> list:
        return self._last.fetchall()

    def commit(self) -> None:
        with self._lock:
            self._conn.commit()

    def rollback(self) -> None:
        with self._lock:
            self._conn.rollback()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @property
    def raw(self) -> sqlite3.Connection:
        """Access the underlying ``sqlite3.Connection`` (e.g. for pragmas)."""
        return self._conn

    def __repr__(self) -> str:
        return f"SqliteConnection({self._conn!r})"
