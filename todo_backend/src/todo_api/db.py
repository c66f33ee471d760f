"""
Postgres access helpers: pool lifecycle and single-statement execution.

The pool is created once per process (see ``main.lifespan``) and handed to
the repository; nothing in this module keeps it in a global.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Protocol

import asyncpg

from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    completed: str = "completed"


COLS = _Cols()


# PUBLIC_INTERFACE
class Connection(Protocol):
    """The subset of ``asyncpg.Connection`` the repository relies on."""

    async def fetch(self, query: str, *args: Any) -> List[Mapping[str, Any]]: ...

    async def execute(self, query: str, *args: Any) -> str: ...


# PUBLIC_INTERFACE
class ConnectionPool(Protocol):
    """
    Acquire/release contract of ``asyncpg.Pool``.

    ``acquire`` may suspend until a connection is free and raises on failure;
    ``release`` is called exactly once per acquired connection.
    """

    def acquire(self) -> Any: ...

    async def release(self, connection: Any) -> None: ...


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of one statement: the returned rows and the affected-row count.

    An empty ``rows`` / zero ``row_count`` is a normal result, not an error.
    """

    rows: List[dict] = field(default_factory=list)
    row_count: int = 0

    @property
    def first(self) -> Optional[dict]:
        return self.rows[0] if self.rows else None


def parse_row_count(status: Optional[str]) -> int:
    """
    Extract the affected-row count from a command status tag.

    asyncpg returns tags such as ``"DELETE 1"``, ``"UPDATE 0"`` or
    ``"INSERT 0 1"``; the count is always the last token.
    """
    if not status:
        return 0
    last = status.strip().rsplit(" ", 1)[-1]
    try:
        return int(last)
    except ValueError:
        return 0


async def fetch_rows(conn: Connection, query: str, *args: Any) -> QueryResult:
    """Run a row-returning statement (SELECT or ``... RETURNING``)."""
    records = await conn.fetch(query, *args)
    rows = [dict(r) for r in records]
    return QueryResult(rows=rows, row_count=len(rows))


async def execute(conn: Connection, query: str, *args: Any) -> QueryResult:
    """Run a statement that reports only its affected-row count."""
    status = await conn.execute(query, *args)
    return QueryResult(rows=[], row_count=parse_row_count(status))


# PUBLIC_INTERFACE
async def create_pool(settings: Settings) -> asyncpg.Pool:
    """Create the asyncpg connection pool described by ``settings``."""
    pool = await asyncpg.create_pool(
        dsn=settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    logger.info(
        "Database pool created (min_size=%s, max_size=%s)",
        settings.db_pool_min_size,
        settings.db_pool_max_size,
    )
    return pool


# PUBLIC_INTERFACE
async def close_pool(pool: Optional[asyncpg.Pool]) -> None:
    """Close ``pool`` if there is one."""
    if pool is None:
        return
    await pool.close()
    logger.info("Database pool closed")
