"""
SQLite pool over aiosqlite, exposing the subset of the asyncpg pool
interface used by the service layer, for local runs and test sessions
"""

import re
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import aiosqlite

logger = logging.getLogger(__name__)

# asyncpg style $1 placeholders -> SQLite numbered ?1 placeholders
_PLACEHOLDER = re.compile(r"\$(\d+)")

_DML_VERBS = ("INSERT", "UPDATE", "DELETE")


class SQLiteConnection:
    """aiosqlite connection with asyncpg-like fetch/execute methods"""

    dialect = "sqlite"

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn
        self._transaction_depth = 0

    @classmethod
    async def connect(cls, path: str) -> "SQLiteConnection":
        # Autocommit mode; transactions are opened explicitly
        conn = await aiosqlite.connect(path, isolation_level=None)
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA foreign_keys = ON")
        return cls(conn)

    @staticmethod
    def _translate(query: str) -> str:
        return _PLACEHOLDER.sub(r"?\1", query)

    async def fetch(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        async with self._conn.execute(self._translate(query), args) as cursor:
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args: Any) -> Optional[Dict[str, Any]]:
        # RETURNING statements only complete once every row is read
        rows = await self.fetch(query, *args)
        return rows[0] if rows else None

    async def fetchval(self, query: str, *args: Any) -> Any:
        row = await self.fetchrow(query, *args)
        if row is None:
            return None
        return next(iter(row.values()))

    async def execute(self, query: str, *args: Any) -> str:
        """Execute a statement and return an asyncpg-style status string"""
        async with self._conn.execute(self._translate(query), args) as cursor:
            rowcount = cursor.rowcount
        verb = query.strip().split(None, 1)[0].upper()
        if verb == "INSERT":
            return f"INSERT 0 {rowcount}"
        if verb in _DML_VERBS:
            return f"{verb} {rowcount}"
        return verb

    @asynccontextmanager
    async def transaction(self):
        """Transaction block; nested blocks join the outermost transaction"""
        outermost = self._transaction_depth == 0
        if outermost:
            await self._conn.execute("BEGIN")
        self._transaction_depth += 1
        try:
            yield self
        except Exception:
            self._transaction_depth -= 1
            if outermost:
                await self._conn.execute("ROLLBACK")
            raise
        else:
            self._transaction_depth -= 1
            if outermost:
                await self._conn.execute("COMMIT")

    async def close(self) -> None:
        await self._conn.close()


class SQLitePool:
    """Pool of one connection; acquire() waits until the connection is free"""

    dialect = "sqlite"

    def __init__(self, path: str, connection: SQLiteConnection):
        self.path = path
        self._connection = connection
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, path: str) -> "SQLitePool":
        return cls(path, await SQLiteConnection.connect(path))

    @asynccontextmanager
    async def acquire(self):
        async with self._lock:
            yield self._connection

    async def close(self) -> None:
        await self._connection.close()
        logger.info(f"SQLite database closed: {self.path}")


def sqlite_path_from_url(database_url: str) -> str:
    """sqlite:///relative.db, sqlite:////abs/path.db and sqlite:///:memory:"""
    path = database_url.split("://", 1)[1]
    if path.startswith("/"):
        path = path[1:]
    return path or ":memory:"
