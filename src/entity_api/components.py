"""
Optional application components and their enablement state
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from entity_api.config.settings import ENABLED_COMPONENTS

logger = logging.getLogger(__name__)

# Components that can be switched on or off; core entities belong to none
KNOWN_COMPONENTS = {
    "CiviEvent": "Event registration and participant tracking",
    "CiviCase": "Case management",
}


@dataclass
class ComponentSettings:
    """Set of enabled components, passed explicitly to whatever needs it"""
    enabled: Set[str] = field(default_factory=set)

    def enable_component(self, component: str) -> None:
        if component not in KNOWN_COMPONENTS:
            raise ValueError(f"Unknown component: {component}")
        if component not in self.enabled:
            logger.info(f"Enabling component: {component}")
            self.enabled.add(component)

    def disable_component(self, component: str) -> None:
        self.enabled.discard(component)

    def enable_all(self) -> "ComponentSettings":
        """Enable every known component so all of their entities are exposed"""
        for component in KNOWN_COMPONENTS:
            self.enable_component(component)
        return self

    def is_enabled(self, component: Optional[str]) -> bool:
        """Core entities (component None) are always enabled"""
        return component is None or component in self.enabled

    @classmethod
    def from_names(cls, names: List[str]) -> "ComponentSettings":
        settings = cls()
        for name in names:
            settings.enable_component(name)
        return settings


# Global settings instance
_component_settings: Optional[ComponentSettings] = None

def get_component_settings() -> ComponentSettings:
    """Get the process-wide component settings built from configuration"""
    global _component_settings
    if _component_settings is None:
        _component_settings = ComponentSettings.from_names(ENABLED_COMPONENTS)
    return _component_settings
