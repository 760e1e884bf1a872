"""
Service registry - one service instance per entity table
"""

from typing import Dict, Type

from entity_api.contracts.base import EntityContract
from entity_api.services.base_service import EntityService
from entity_api.services.custom_field_service import CustomFieldService
from entity_api.services.custom_group_service import CustomGroupService

# Entities whose storage needs more than plain row handling
SERVICE_CLASSES: Dict[str, Type[EntityService]] = {
    "CustomField": CustomFieldService,
    "CustomGroup": CustomGroupService,
}

_service_cache: Dict[str, EntityService] = {}


def get_service(contract: EntityContract) -> EntityService:
    """Get service instance for an entity with caching"""
    if contract.name not in _service_cache:
        service_class = SERVICE_CLASSES.get(contract.name, EntityService)
        _service_cache[contract.name] = service_class(contract)
    return _service_cache[contract.name]
