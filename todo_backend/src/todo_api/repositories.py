from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from .db import COLS, Connection, ConnectionPool, execute, fetch_rows
from .models import TodoEntity

_RETURNING = f"RETURNING {COLS.id}, {COLS.title}, {COLS.completed}"

# The path id is bound as text and cast by the store, so the handler never
# coerces it.
SQL_LIST = f"SELECT {COLS.id}, {COLS.title}, {COLS.completed} FROM {COLS.table} ORDER BY {COLS.id}"
SQL_CREATE = f"INSERT INTO {COLS.table} ({COLS.title}, {COLS.completed}) VALUES ($1, $2) {_RETURNING}"
SQL_REPLACE = (
    f"UPDATE {COLS.table} SET {COLS.title} = $1, {COLS.completed} = $2 "
    f"WHERE {COLS.id} = $3::text::integer {_RETURNING}"
)
SQL_DELETE = f"DELETE FROM {COLS.table} WHERE {COLS.id} = $1::text::integer"


# PUBLIC_INTERFACE
class TodoRepository:
    """
    Postgres-backed todo storage.

    Every method acquires one pooled connection, runs exactly one statement
    and gives the connection back, whether or not the statement succeeded.
    Store and pool errors propagate unchanged.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    @asynccontextmanager
    async def _conn(self) -> AsyncIterator[Connection]:
        conn = await self._pool.acquire()
        try:
            yield conn
        finally:
            await self._pool.release(conn)

    async def list(self) -> List[TodoEntity]:
        """Return every todo ordered by ascending id."""
        async with self._conn() as conn:
            result = await fetch_rows(conn, SQL_LIST)
        return result.rows  # type: ignore[return-value]

    async def create(self, title: Optional[str]) -> TodoEntity:
        """Insert a new, not yet completed todo and return the stored row."""
        async with self._conn() as conn:
            result = await fetch_rows(conn, SQL_CREATE, title, False)
        return result.first  # type: ignore[return-value]

    async def replace(self, todo_id: str, title: Any, completed: Any) -> Optional[TodoEntity]:
        """Overwrite title and completed. Return the updated row, or None if no row has this id."""
        async with self._conn() as conn:
            result = await fetch_rows(conn, SQL_REPLACE, title, completed, todo_id)
        return result.first  # type: ignore[return-value]

    async def delete(self, todo_id: str) -> bool:
        """Delete a todo. Return True if a row was removed, False if not found."""
        async with self._conn() as conn:
            result = await execute(conn, SQL_DELETE, todo_id)
        return result.row_count > 0
