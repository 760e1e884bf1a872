"""
Schema management - DDL generated from entity contracts, plus the cleanup
helpers used to reset state between test runs
"""

import logging
from typing import Iterable, List

from entity_api.contracts.base import ContractField, DataType, EntityContract
from entity_api.contracts.registry import get_contract, get_storage_contracts

logger = logging.getLogger(__name__)

COLUMN_TYPES = {
    "postgresql": {
        DataType.INTEGER: "INTEGER",
        DataType.STRING: "VARCHAR(255)",
        DataType.TEXT: "TEXT",
        DataType.BOOLEAN: "BOOLEAN",
        DataType.FLOAT: "DOUBLE PRECISION",
        DataType.DATE: "DATE",
        DataType.TIMESTAMP: "TIMESTAMP",
    },
    "sqlite": {
        DataType.INTEGER: "INTEGER",
        DataType.STRING: "VARCHAR(255)",
        DataType.TEXT: "TEXT",
        DataType.BOOLEAN: "BOOLEAN",
        DataType.FLOAT: "REAL",
        DataType.DATE: "DATE",
        DataType.TIMESTAMP: "TIMESTAMP",
    },
}

PRIMARY_KEY_COLUMNS = {
    "postgresql": "id SERIAL PRIMARY KEY",
    "sqlite": "id INTEGER PRIMARY KEY AUTOINCREMENT",
}


def _column_definition(field: ContractField, dialect: str) -> str:
    if field.name == "id":
        return PRIMARY_KEY_COLUMNS[dialect]

    parts = [field.name, COLUMN_TYPES[dialect][field.data_type]]
    if field.required:
        parts.append("NOT NULL")
    if field.name == "created_date":
        parts.append("DEFAULT CURRENT_TIMESTAMP")
    if field.fk_entity:
        target = get_contract(field.fk_entity)
        parts.append(f"REFERENCES {target.table}(id) ON DELETE CASCADE")
    return " ".join(parts)


def build_create_table(contract: EntityContract, dialect: str) -> str:
    """CREATE TABLE statement for one entity"""
    columns = [_column_definition(field, dialect) for field in contract.fields if not field.custom]
    return f"CREATE TABLE IF NOT EXISTS {contract.table} ({', '.join(columns)})"


async def create_schema(pool) -> None:
    """Create every entity table that does not exist yet"""
    async with pool.acquire() as conn:
        for contract in get_storage_contracts():
            await conn.execute(build_create_table(contract, pool.dialect))
    logger.info("Entity schema created")


async def list_tables(pool) -> List[str]:
    async with pool.acquire() as conn:
        if pool.dialect == "sqlite":
            rows = await conn.fetch(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
            )
        else:
            rows = await conn.fetch(
                "SELECT table_name AS name FROM information_schema.tables WHERE table_schema = current_schema()"
            )
    return sorted(row["name"] for row in rows)


async def truncate_tables(pool, tables: Iterable[str]) -> None:
    """Empty the given tables and reset their id sequences"""
    existing = set(await list_tables(pool))
    async with pool.acquire() as conn:
        for table in tables:
            if table not in existing:
                logger.warning(f"Cannot truncate missing table: {table}")
                continue
            if pool.dialect == "sqlite":
                await conn.execute(f"DELETE FROM {table}")
                if await _has_sqlite_sequence(conn):
                    await conn.execute("DELETE FROM sqlite_sequence WHERE name = $1", table)
            else:
                await conn.execute(f"TRUNCATE TABLE {table} RESTART IDENTITY CASCADE")
            logger.info(f"Truncated table: {table}")


async def _has_sqlite_sequence(conn) -> bool:
    row = await conn.fetchrow("SELECT name FROM sqlite_master WHERE name = 'sqlite_sequence'")
    return row is not None


async def drop_tables_by_prefix(pool, prefix: str) -> List[str]:
    """Drop every table whose name starts with prefix; returns the dropped names"""
    dropped = [table for table in await list_tables(pool) if table.startswith(prefix)]
    async with pool.acquire() as conn:
        for table in dropped:
            await conn.execute(f"DROP TABLE IF EXISTS {table}")
            logger.info(f"Dropped table: {table}")
    return dropped
