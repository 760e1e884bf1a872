"""
Custom group service - each custom group owns a table holding its values
"""

import logging
from typing import Any, Dict, List, Optional

from entity_api.contracts.custom import CUSTOM_VALUE_TABLE_PREFIX
from entity_api.services.base_service import EntityService, safe_identifier

logger = logging.getLogger(__name__)


class CustomGroupService(EntityService):
    """Creates and drops the value table alongside the custom group row"""

    async def _after_insert(self, conn, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        table_name = f"{CUSTOM_VALUE_TABLE_PREFIX}{safe_identifier(row['name'])}_{row['id']}"
        await conn.execute(
            f"CREATE TABLE IF NOT EXISTS {table_name} ("
            f"id INTEGER PRIMARY KEY, entity_id INTEGER NOT NULL)"
        )
        updated = await conn.fetchrow(
            f"UPDATE {self.table} SET table_name = $1 WHERE id = $2 RETURNING *",
            table_name,
            row["id"]
        )
        logger.info(f"Created custom value table {table_name} for custom group {row['name']}")
        return dict(updated)

    async def _before_delete(self, conn, rows: List[Dict[str, Any]]) -> None:
        for row in rows:
            if row.get("table_name"):
                await conn.execute(f"DROP TABLE IF EXISTS {row['table_name']}")
                logger.info(f"Dropped custom value table {row['table_name']}")
