"""
Structural protocols shared across safety-spine.

Repositories and the submission store depend on the ``Connection`` shape,
not on ``sqlite3`` directly, so tests can hand them an in-memory adapter and
a deployment can hand them any DB-API style connection.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """
    Minimal synchronous database connection.

    ``execute`` returns an object exposing ``fetchone()``, ``fetchall()`` and
    ``rowcount``; ``fetchone`` / ``fetchall`` on the connection read the
    result of the most recent statement.
    """

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute SQL statement."""
        ...

    def executemany(self, sql: str, params: list[tuple]) -> Any:
        """Execute SQL statement with multiple parameter sets."""
        ...

    def fetchone(self) -> Any:
        """Fetch one row from last query."""
        ...

    def fetchall(self) -> list:
        """Fetch all rows from last query."""
        ...

    def commit(self) -> None:
        """Commit current transaction."""
        ...

    def rollback(self) -> None:
        """Roll back current transaction."""
        ...
