"""Tests for safety_spine.core.sqlite_conn and schema creation."""

from __future__ import annotations

import threading

from safety_spine.core.schema import init_schema
from safety_spine.core.sqlite_conn import SqliteConnection


class TestSqliteConnection:
    def test_execute_fetch(self):
        conn = SqliteConnection(":memory:")
        conn.execute("CREATE TABLE t (id INTEGER)")
        conn.executemany("INSERT INTO t VALUES (?)", [(1,), (2,)])
        conn.commit()

        result = conn.execute("SELECT id FROM t ORDER BY id")
        assert result.fetchone()[0] == 1
        assert [r[0] for r in result.fetchall()] == [2]
        assert result.fetchone() is None
        conn.close()

    def test_file_database_creates_parent(self, tmp_path):
        path = tmp_path / "nested" / "forms.db"
        conn = SqliteConnection(str(path))
        init_schema(conn)
        conn.close()
        assert path.exists()

    def test_init_schema_idempotent(self, conn):
        init_schema(conn)
        names = {
            r[0]
            for r in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        }
        assert {"form_submissions", "report_schedules", "report_schedule_runs"} <= names

    def test_shared_across_threads(self, conn):
        conn.execute("CREATE TABLE c (n INTEGER)")
        errors: list[Exception] = []

        def worker(n: int) -> None:
            try:
                for _ in range(20):
                    conn.execute("INSERT INTO c VALUES (?)", (n,))
                    conn.commit()
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert conn.execute("SELECT COUNT(*) FROM c").fetchone()[0] == 80
