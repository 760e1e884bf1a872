"""
Environment reset for conformance runs - truncation, custom table cleanup and
dataset loading
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from entity_api.config.settings import TABLE_PREFIX
from entity_api.contracts.custom import CUSTOM_VALUE_TABLE_PREFIX
from entity_api.database.schema import drop_tables_by_prefix, truncate_tables
from entity_api.entities import get_api_class
from entity_api.exceptions import APIException

logger = logging.getLogger(__name__)

DATASET_DIR = Path(__file__).parent / "datasets"

TABLES_TO_TRUNCATE = [
    f"{TABLE_PREFIX}case_type",
    f"{TABLE_PREFIX}custom_group",
    f"{TABLE_PREFIX}custom_field",
    f"{TABLE_PREFIX}group",
    f"{TABLE_PREFIX}event",
    f"{TABLE_PREFIX}participant",
]

CUSTOM_TABLE_PREFIX = f"{CUSTOM_VALUE_TABLE_PREFIX}myfavorite"

DATASETS = ["CaseType", "ConformanceTest"]


def read_data_set(name: str) -> List[Dict[str, Any]]:
    """Records of a bundled dataset"""
    path = DATASET_DIR / f"{name}.json"
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {name}")
    with path.open() as f:
        return json.load(f)["records"]


def _resolve_references(values: Dict[str, Any], created: Dict[str, int]) -> Dict[str, Any]:
    """Replace "@key" values with the id of the record loaded under that key"""
    resolved = {}
    for field_name, value in values.items():
        if isinstance(value, str) and value.startswith("@"):
            key = value[1:]
            if key not in created:
                raise APIException(f"Dataset reference to unknown record: {key}")
            value = created[key]
        resolved[field_name] = value
    return resolved


async def load_data_set(name: str) -> Dict[str, int]:
    """Create every record of a dataset; returns key -> id"""
    created: Dict[str, int] = {}
    for record in read_data_set(name):
        values = _resolve_references(record["values"], created)
        row = (
            await get_api_class(record["entity"]).create(False)
            .set_values(values)
            .execute()
        ).first()
        if record.get("key"):
            created[record["key"]] = row["id"]

    logger.info(f"Loaded dataset {name}: {len(created)} records")
    return created


async def reset_environment(pool) -> Dict[str, Dict[str, int]]:
    """Bring the database to the known state every conformance run starts from"""
    await truncate_tables(pool, TABLES_TO_TRUNCATE)
    dropped = await drop_tables_by_prefix(pool, CUSTOM_TABLE_PREFIX)
    if dropped:
        logger.info(f"Dropped {len(dropped)} leftover custom value tables")

    return {name: await load_data_set(name) for name in DATASETS}
