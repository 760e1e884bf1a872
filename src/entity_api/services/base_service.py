"""
Base service layer - SQL building and execution for one entity table
"""

import re
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import aiosqlite
import asyncpg

from entity_api.contracts.base import ContractField, DataType, EntityContract
from entity_api.database.connection import get_db_pool
from entity_api.exceptions import APIException
from entity_api.models.params import WhereClause

logger = logging.getLogger(__name__)

# Errors raised by either database driver
DATABASE_ERRORS = (asyncpg.PostgresError, aiosqlite.Error)

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


class EntityService:
    """Executes validated requests against the table backing an entity"""

    def __init__(self, contract: EntityContract):
        if not contract.table:
            raise ValueError(f"Entity has no table: {contract.name}")
        self.contract = contract
        self.table = contract.table
        logger.debug(f"EntityService initialized for entity: {contract.name}")

    def _get_pool(self):
        db_pool = get_db_pool()
        if not db_pool:
            raise APIException("Database pool not initialized", error_code="DATABASE_ERROR")
        return db_pool

    # Public operations

    async def read(
        self,
        select: Optional[List[str]] = None,
        where: Optional[List[WhereClause]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: int = 0,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        """Read rows matching the where clauses"""
        db_pool = self._get_pool()
        fields = select or [f.name for f in self.contract.fields if not f.custom]
        query, params = self._build_read_query(fields, where or [], order_by or {}, limit, offset, db_pool.dialect)

        async with db_pool.acquire() as conn:
            logger.info(f"Executing READ query: {query}")
            logger.info(f"Parameters: {params}")
            try:
                rows = await conn.fetch(query, *params)
            except DATABASE_ERRORS as e:
                raise self._database_error("READ", e)

        return [self._from_db_row(dict(row)) for row in rows]

    async def count(self, where: Optional[List[WhereClause]] = None) -> int:
        """Count rows matching the where clauses"""
        db_pool = self._get_pool()
        params: List[Any] = []
        query = f"SELECT COUNT(*) AS row_count FROM {self.table}"
        where_sql = self._build_where(where or [], params, db_pool.dialect)
        if where_sql:
            query += f" WHERE {where_sql}"

        async with db_pool.acquire() as conn:
            logger.info(f"Executing COUNT query: {query}")
            try:
                value = await conn.fetchval(query, *params)
            except DATABASE_ERRORS as e:
                raise self._database_error("COUNT", e)

        return int(value or 0)

    async def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row, filling contract defaults, and return the post-image"""
        db_pool = self._get_pool()
        values = self._with_defaults(values)

        params = [self._to_db_value(self.contract.get_field(name), value, db_pool.dialect) for name, value in values.items()]
        if values:
            placeholders = ", ".join(f"${i}" for i in range(1, len(values) + 1))
            query = f"INSERT INTO {self.table} ({', '.join(values)}) VALUES ({placeholders}) RETURNING *"
        else:
            query = f"INSERT INTO {self.table} DEFAULT VALUES RETURNING *"

        async with db_pool.acquire() as conn:
            async with conn.transaction():
                logger.info(f"Executing INSERT: {query}")
                logger.info(f"Parameters: {params}")
                try:
                    row = await conn.fetchrow(query, *params)
                    if not row:
                        raise APIException(
                            f"Insert into {self.contract.name} returned no data",
                            error_code="DATABASE_ERROR"
                        )
                    row = dict(row)
                    row = await self._after_insert(conn, row) or row
                except DATABASE_ERRORS as e:
                    raise self._database_error("INSERT", e)

        return self._from_db_row(row)

    async def update(self, where: List[WhereClause], values: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Update matching rows and return their post-images"""
        db_pool = self._get_pool()
        params: List[Any] = []
        set_parts = []
        for field_name, value in values.items():
            params.append(self._to_db_value(self.contract.get_field(field_name), value, db_pool.dialect))
            set_parts.append(f"{field_name} = ${len(params)}")

        query = f"UPDATE {self.table} SET {', '.join(set_parts)}"
        query += f" WHERE {self._build_where(where, params, db_pool.dialect)} RETURNING *"

        async with db_pool.acquire() as conn:
            async with conn.transaction():
                logger.info(f"Executing UPDATE: {query}")
                logger.info(f"Parameters: {params}")
                try:
                    rows = await conn.fetch(query, *params)
                except DATABASE_ERRORS as e:
                    raise self._database_error("UPDATE", e)

        return sorted((self._from_db_row(dict(row)) for row in rows), key=lambda row: row["id"])

    async def delete(self, where: List[WhereClause]) -> List[Dict[str, Any]]:
        """Delete matching rows; returns [{"id": ...}] for each deleted row"""
        db_pool = self._get_pool()
        params: List[Any] = []
        where_sql = self._build_where(where, params, db_pool.dialect)

        async with db_pool.acquire() as conn:
            async with conn.transaction():
                try:
                    doomed = await conn.fetch(f"SELECT * FROM {self.table} WHERE {where_sql}", *params)
                    doomed = [dict(row) for row in doomed]
                    if not doomed:
                        return []
                    await self._before_delete(conn, doomed)

                    query = f"DELETE FROM {self.table} WHERE {where_sql}"
                    logger.info(f"Executing DELETE: {query}")
                    logger.info(f"Parameters: {params}")
                    result = await conn.execute(query, *params)
                except DATABASE_ERRORS as e:
                    raise self._database_error("DELETE", e)

        # Drivers return "DELETE N" where N is the number of rows
        deleted_count = int(result.split()[-1]) if result else 0
        if deleted_count != len(doomed):
            logger.warning(f"Expected to delete {len(doomed)} {self.contract.name} rows, deleted {deleted_count}")

        return [{"id": row["id"]} for row in sorted(doomed, key=lambda row: row["id"])]

    # Hooks for entity-specific storage side effects

    async def _after_insert(self, conn, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return None

    async def _before_delete(self, conn, rows: List[Dict[str, Any]]) -> None:
        return None

    # SQL building

    def _build_read_query(
        self,
        fields: List[str],
        where: List[WhereClause],
        order_by: Dict[str, str],
        limit: int,
        offset: int,
        dialect: str
    ) -> Tuple[str, List[Any]]:
        """Build SQL query from a validated get request"""
        params: List[Any] = []
        query = f"SELECT {', '.join(fields)} FROM {self.table}"

        where_sql = self._build_where(where, params, dialect)
        if where_sql:
            query += f" WHERE {where_sql}"

        if order_by:
            order_parts = [f"{field} {direction.upper()}" for field, direction in order_by.items()]
            query += f" ORDER BY {', '.join(order_parts)}"
        else:
            query += " ORDER BY id ASC"

        if limit:
            params.append(limit)
            query += f" LIMIT ${len(params)}"
        elif offset and dialect == "sqlite":
            # SQLite only accepts OFFSET after a LIMIT
            query += " LIMIT -1"

        if offset:
            params.append(offset)
            query += f" OFFSET ${len(params)}"

        return query, params

    def _build_where(self, where: List[WhereClause], params: List[Any], dialect: str) -> str:
        """AND together where clauses, appending their values to params"""
        parts = []
        for clause in where:
            field = self.contract.get_field(clause.field)
            op = clause.op.upper()

            if op in ("IS NULL", "IS NOT NULL"):
                parts.append(f"{clause.field} {op}")
            elif op in ("IN", "NOT IN"):
                if not clause.value:
                    # Empty IN matches nothing, empty NOT IN matches everything
                    parts.append("1 = 0" if op == "IN" else "1 = 1")
                    continue
                placeholders = []
                for item in clause.value:
                    params.append(self._to_db_value(field, item, dialect))
                    placeholders.append(f"${len(params)}")
                parts.append(f"{clause.field} {op} ({', '.join(placeholders)})")
            elif op == "LIKE":
                params.append(clause.value)
                parts.append(f"{clause.field} LIKE ${len(params)}")
            else:
                params.append(self._to_db_value(field, clause.value, dialect))
                parts.append(f"{clause.field} {op} ${len(params)}")

        return " AND ".join(parts)

    # Value conversion

    def _with_defaults(self, values: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(values)
        for field in self.contract.fields:
            if field.name not in merged and field.default is not None and not field.readonly:
                merged[field.name] = field.default
        return merged

    def _to_db_value(self, field: Optional[ContractField], value: Any, dialect: str) -> Any:
        """Convert an API value to what the driver expects for the column"""
        if value is None or field is None:
            return value

        data_type = field.data_type
        if data_type == DataType.INTEGER:
            return int(value)
        if data_type == DataType.FLOAT:
            return float(value)
        if data_type == DataType.BOOLEAN:
            return bool(value) if dialect == "postgresql" else int(bool(value))
        if data_type == DataType.DATE:
            parsed = value if isinstance(value, date) else date.fromisoformat(str(value)[:10])
            if isinstance(parsed, datetime):
                parsed = parsed.date()
            return parsed if dialect == "postgresql" else parsed.isoformat()
        if data_type == DataType.TIMESTAMP:
            parsed = value if isinstance(value, datetime) else datetime.fromisoformat(str(value).replace("Z", "+00:00"))
            # Columns are timezone-naive
            parsed = parsed.replace(tzinfo=None)
            return parsed if dialect == "postgresql" else parsed.isoformat(sep=" ")
        return value

    def _from_db_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize driver values: booleans as bool, dates as ISO strings"""
        for key, value in row.items():
            field = self.contract.get_field(key)
            if value is None or field is None:
                continue
            if field.data_type == DataType.BOOLEAN:
                row[key] = bool(value)
            elif isinstance(value, datetime):
                row[key] = value.isoformat(sep=" ")
            elif isinstance(value, date):
                row[key] = value.isoformat()
        return row

    def _database_error(self, operation: str, error: Exception) -> APIException:
        logger.error(f"{operation} failed for {self.contract.name}: {error}", exc_info=True)
        message = str(error).lower()
        if "unique" in message:
            return APIException(f"{self.contract.name} record already exists", error_code="CONFLICT")
        if "foreign key" in message:
            return APIException(f"Referenced record not found for {self.contract.name}", error_code="FOREIGN_KEY_ERROR")
        return APIException(f"Database {operation} failed: {error}", error_code="DATABASE_ERROR")


def safe_identifier(name: str) -> str:
    """Lower-case a name into something usable as a SQL identifier"""
    identifier = re.sub(r"[^a-z0-9_]", "", name.lower().replace(" ", "_"))
    if not identifier or not _IDENTIFIER.match(identifier):
        identifier = f"t_{identifier}"
    return identifier
