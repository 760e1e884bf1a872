"""
Database connection and pool management
"""

import asyncpg
import logging
from typing import Optional

from entity_api.config.settings import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE
from entity_api.database.sqlite_pool import SQLitePool, sqlite_path_from_url

logger = logging.getLogger(__name__)

# Global database pool
db_pool = None


class PostgresPool:
    """asyncpg pool tagged with its SQL dialect"""

    dialect = "postgresql"

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    def acquire(self):
        return self._pool.acquire()

    async def close(self) -> None:
        await self._pool.close()


async def init_database(database_url: Optional[str] = None, create_schema: bool = True):
    """Initialize database connection pool"""
    global db_pool
    database_url = database_url or DATABASE_URL

    if database_url.startswith("sqlite"):
        db_pool = await SQLitePool.open(sqlite_path_from_url(database_url))
    else:
        pool = await asyncpg.create_pool(
            database_url,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
            command_timeout=60,
            statement_cache_size=0  # Fix for pgbouncer compatibility
        )
        db_pool = PostgresPool(pool)

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")

    if create_schema:
        from entity_api.database.schema import create_schema as build_schema
        await build_schema(db_pool)

    logger.info(f"Database initialized successfully ({db_pool.dialect})")
    return db_pool


async def close_database():
    """Close database connection pool"""
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
    logger.info("Database connections closed")

def get_db_pool():
    """Get the database pool instance"""
    return db_pool
