"""
Entity discovery - reconciles the live registry with the static handle table

The hi-tech list comes from Entity.get() and is canonical, but needs the
registry and components to be configured. The lo-tech list is built from the
registration table plus manual overrides; it is available at test collection
time but may need occasional twiddling when entities are added.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from entity_api.components import ComponentSettings
from entity_api.entities import API_CLASSES, Entity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManualOverrides:
    """Corrections applied to the registration table"""
    add: List[str] = field(default_factory=list)
    remove: List[str] = field(default_factory=lambda: ["CustomValue"])
    transform: Dict[str, str] = field(default_factory=lambda: {"CiviCase": "Case"})


DEFAULT_OVERRIDES = ManualOverrides()


def to_data_provider_array(names: Iterable[str]) -> Dict[str, List[str]]:
    """
    Shape entity names as data-provider arguments, one per entity.

    Args:
        names: List of entity names, e.g. ['Foo', 'Bar']

    Returns:
        Sorted mapping of name -> argument list, e.g. {'Bar': ['Bar'], 'Foo': ['Foo']}
    """
    return {name: [name] for name in sorted(names)}


async def get_entities_hitech(components: Optional[ComponentSettings] = None) -> Dict[str, List[str]]:
    """Entities from the live registry, with every component enabled"""
    components = components or ComponentSettings()
    # Ensure all components are enabled so their entities show up
    components.enable_all()

    result = await Entity.get(False).set_components(components).execute()
    names = result.column("name")
    logger.info(f"Live registry lists {len(names)} entities")
    return to_data_provider_array(names)


def get_entities_lotech(overrides: ManualOverrides = DEFAULT_OVERRIDES) -> Dict[str, List[str]]:
    """Entities from the registration table and manual overrides"""
    scanned = [overrides.transform.get(class_name, class_name) for class_name in API_CLASSES]

    names = set(scanned) | set(overrides.add)
    names -= set(overrides.remove)

    return to_data_provider_array(names)


PROVIDER_MISMATCH_MESSAGE = (
    "The lo-tech list of entities does not match the hi-tech list. "
    "You probably need to update get_entities_lotech()."
)


def describe_provider_mismatch(hitech: Dict[str, List[str]], lotech: Dict[str, List[str]]) -> str:
    """Assertion message for differing entity lists, naming the differences"""
    missing = sorted(set(hitech) - set(lotech))
    extra = sorted(set(lotech) - set(hitech))
    return f"{PROVIDER_MISMATCH_MESSAGE} Missing: {missing}. Extra: {extra}."
