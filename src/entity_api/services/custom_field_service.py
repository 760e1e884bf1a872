"""
Custom field service - each custom field is a column of its group's value table
"""

import logging
from typing import Any, Dict, List, Optional

from entity_api.contracts.custom import CUSTOM_DATA_TYPES
from entity_api.contracts.registry import get_contract
from entity_api.database.schema import COLUMN_TYPES
from entity_api.services.base_service import EntityService, safe_identifier

logger = logging.getLogger(__name__)


class CustomFieldService(EntityService):
    """Adds and drops the value column alongside the custom field row"""

    async def _group_table(self, conn, custom_group_id: int) -> Optional[str]:
        return await conn.fetchval(
            f"SELECT table_name FROM {get_contract('CustomGroup').table} WHERE id = $1",
            custom_group_id
        )

    async def _after_insert(self, conn, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        table_name = await self._group_table(conn, row["custom_group_id"])
        if not table_name:
            logger.warning(f"Custom group {row['custom_group_id']} has no value table")
            return None

        # The id suffix keeps column names unique and clear of SQL keywords
        column_name = f"{safe_identifier(row['name'])}_{row['id']}"
        column_type = COLUMN_TYPES[self._get_pool().dialect][CUSTOM_DATA_TYPES[row["data_type"]]]
        await conn.execute(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_type}")

        updated = await conn.fetchrow(
            f"UPDATE {self.table} SET column_name = $1 WHERE id = $2 RETURNING *",
            column_name,
            row["id"]
        )
        logger.info(f"Added column {column_name} to {table_name}")
        return dict(updated)

    async def _before_delete(self, conn, rows: List[Dict[str, Any]]) -> None:
        for row in rows:
            if not row.get("column_name"):
                continue
            table_name = await self._group_table(conn, row["custom_group_id"])
            if table_name:
                await conn.execute(f"ALTER TABLE {table_name} DROP COLUMN {row['column_name']}")
                logger.info(f"Dropped column {row['column_name']} from {table_name}")
