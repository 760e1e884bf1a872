"""
Contract registry for centralized contract management
"""

from typing import Dict, List, Optional

from entity_api.components import ComponentSettings, get_component_settings
from entity_api.contracts.base import EntityContract
from entity_api.contracts.core import (
    get_activity_contract,
    get_contact_contract,
    get_email_contract,
    get_group_contract,
    get_note_contract,
    get_tag_contract,
)
from entity_api.contracts.custom import (
    get_custom_field_contract,
    get_custom_group_contract,
    get_custom_value_contract,
)
from entity_api.contracts.event import get_event_contract, get_participant_contract
from entity_api.contracts.case import get_case_contract, get_case_type_contract
from entity_api.contracts.entity import get_entity_contract

_CONTRACT_FACTORIES = [
    get_activity_contract,
    get_case_contract,
    get_case_type_contract,
    get_contact_contract,
    get_custom_field_contract,
    get_custom_group_contract,
    get_custom_value_contract,
    get_email_contract,
    get_entity_contract,
    get_event_contract,
    get_group_contract,
    get_note_contract,
    get_participant_contract,
    get_tag_contract,
]

_contracts: Optional[Dict[str, EntityContract]] = None


def _load_contracts() -> Dict[str, EntityContract]:
    global _contracts
    if _contracts is None:
        contracts = [factory() for factory in _CONTRACT_FACTORIES]
        _contracts = {contract.name: contract for contract in contracts}
    return _contracts


def get_contract(entity_name: str) -> EntityContract:
    """Get a contract by entity name, regardless of component state"""
    contracts = _load_contracts()
    if entity_name not in contracts:
        raise KeyError(entity_name)
    return contracts[entity_name]


def get_all_contracts(components: Optional[ComponentSettings] = None) -> Dict[str, EntityContract]:
    """Get contracts for every standalone entity whose component is enabled"""
    if components is None:
        components = get_component_settings()

    return {
        name: contract
        for name, contract in sorted(_load_contracts().items())
        if contract.standalone and components.is_enabled(contract.component)
    }


def get_available_entities(components: Optional[ComponentSettings] = None) -> List[str]:
    """Get list of all available entity names"""
    return list(get_all_contracts(components).keys())


def get_storage_contracts() -> List[EntityContract]:
    """Contracts backed by a table, in dependency order (referenced tables first)"""
    ordered: List[EntityContract] = []
    seen = set()
    contracts = _load_contracts()

    def visit(contract: EntityContract) -> None:
        if contract.name in seen:
            return
        seen.add(contract.name)
        for field in contract.fields:
            if field.fk_entity:
                visit(contracts[field.fk_entity])
        if contract.table:
            ordered.append(contract)

    for name in sorted(contracts):
        visit(contracts[name])
    return ordered
