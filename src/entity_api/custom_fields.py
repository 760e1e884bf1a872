"""
Custom field metadata - merges custom field definitions into getFields output
"""

import logging
from typing import Any, Dict, List

from entity_api.contracts.base import ContractField
from entity_api.contracts.custom import CUSTOM_DATA_TYPES, EXTENDABLE_ENTITIES
from entity_api.contracts.registry import get_contract
from entity_api.database.connection import get_db_pool
from entity_api.models.params import WhereClause
from entity_api.services import get_service

logger = logging.getLogger(__name__)


async def get_custom_field_specs(entity_name: str) -> List[Dict[str, Any]]:
    """getFields rows for active custom fields extending an entity"""
    if entity_name not in EXTENDABLE_ENTITIES:
        return []

    if get_db_pool() is None:
        logger.warning(f"Database not initialized - custom fields for {entity_name} omitted")
        return []

    groups = await get_service(get_contract("CustomGroup")).read(
        where=[
            WhereClause(field="extends", op="=", value=entity_name),
            WhereClause(field="is_active", op="=", value=True),
        ]
    )
    if not groups:
        return []

    groups_by_id = {group["id"]: group for group in groups}
    custom_fields = await get_service(get_contract("CustomField")).read(
        where=[
            WhereClause(field="custom_group_id", op="IN", value=list(groups_by_id)),
            WhereClause(field="is_active", op="=", value=True),
        ]
    )

    specs = []
    for custom_field in custom_fields:
        group = groups_by_id[custom_field["custom_group_id"]]
        spec = ContractField(
            name=f"{group['name']}.{custom_field['name']}",
            title=custom_field["label"],
            data_type=CUSTOM_DATA_TYPES[custom_field["data_type"]],
            description=f"Custom field in {group['title']}",
            required=custom_field["is_required"],
            custom=True
        ).to_field_spec()
        spec["custom_group_id"] = group["id"]
        spec["custom_field_id"] = custom_field["id"]
        specs.append(spec)

    return specs
