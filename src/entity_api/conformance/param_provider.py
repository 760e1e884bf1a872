"""
Test creation parameter provider
Generates the minimal valid values needed to create any entity
"""

import logging
from typing import Any, Dict, List, Optional

from faker import Faker

from entity_api.entities import get_api_class

logger = logging.getLogger(__name__)


class CreationParameterProvider:
    """Builds required create() values from field metadata"""

    def __init__(self, fake: Optional[Faker] = None):
        self.fake = fake or Faker()
        # Referenced records created to satisfy foreign keys
        self.created_dependencies: Dict[str, List[int]] = {}

    def track_dependency(self, entity_name: str, record_id: int):
        """Track created dependency for reporting"""
        self.created_dependencies.setdefault(entity_name, []).append(record_id)

    async def get_required(self, entity_name: str) -> Dict[str, Any]:
        """Values for every required field that has no default"""
        fields = await get_api_class(entity_name).get_fields(False) \
            .set_include_custom(False) \
            .execute()

        values = {}
        for field in fields:
            if not field["required"] or field["readonly"] or field["default"] is not None:
                continue
            values[field["name"]] = await self._value_for(field)

        logger.info(f"Required creation params for {entity_name}: {sorted(values)}")
        return values

    async def _value_for(self, field: Dict[str, Any]) -> Any:
        if field["fk_entity"]:
            return await self._create_dependency(field["fk_entity"])

        if field["options"]:
            return self.fake.random_element(field["options"])

        data_type = field["data_type"]
        name = field["name"]

        if data_type == "Integer":
            return self.fake.random_int(min=1, max=1000)
        if data_type == "Float":
            return round(self.fake.pyfloat(min_value=0, max_value=100), 2)
        if data_type == "Boolean":
            return self.fake.pybool()
        if data_type == "Date":
            return self.fake.date()
        if data_type == "Timestamp":
            return self.fake.date_time().isoformat(sep=" ")
        if data_type == "Text":
            return self.fake.paragraph()

        if "email" in name:
            return self.fake.email()
        if name == "name":
            # Machine names are unique per entity
            return f"{self.fake.word()}_{self.fake.uuid4()[:8]}"
        if name in ("title", "label"):
            return self.fake.catch_phrase()[:60]
        return self.fake.sentence(nb_words=4)[:60]

    async def _create_dependency(self, entity_name: str) -> int:
        """Create a referenced record and return its id"""
        values = await self.get_required(entity_name)
        record = (
            await get_api_class(entity_name).create(False)
            .set_values(values)
            .execute()
        ).first()
        self.track_dependency(entity_name, record["id"])
        logger.info(f"Created {entity_name} {record['id']} to satisfy a foreign key")
        return record["id"]
