"""
Action permissions configuration - single source of truth for who may run what
"""

from typing import Dict, List, Iterable

# Granting this permission implies every other permission
SUPER_PERMISSION = "administer CiviCRM"

# Permission required per action when check_permissions is enabled
ACTION_PERMISSIONS: Dict[str, List[str]] = {
    "get": ["access CiviCRM"],
    "create": ["access CiviCRM", "edit all contacts"],
    "update": ["access CiviCRM", "edit all contacts"],
    "delete": ["access CiviCRM", "delete contacts"],
    "getFields": [],
    "getActions": [],
}

# Component-specific permissions layered on top of ACTION_PERMISSIONS
COMPONENT_PERMISSIONS: Dict[str, Dict[str, List[str]]] = {
    "CiviEvent": {
        "get": ["view event info"],
        "create": ["edit all events"],
        "update": ["edit all events"],
        "delete": ["delete in CiviEvent"],
    },
    "CiviCase": {
        "get": ["access all cases and activities"],
        "create": ["add cases"],
        "update": ["access all cases and activities"],
        "delete": ["delete in CiviCase"],
    },
}


def get_required_permissions(action: str, component: str = None) -> List[str]:
    """Get the permissions an action needs, including component extras"""
    required = list(ACTION_PERMISSIONS.get(action, ["administer CiviCRM"]))
    if component:
        required.extend(COMPONENT_PERMISSIONS.get(component, {}).get(action, []))
    return required


def has_permissions(granted: Iterable[str], required: Iterable[str]) -> bool:
    """Check a granted permission set against a required list"""
    granted = set(granted)
    if SUPER_PERMISSION in granted:
        return True
    return all(perm in granted for perm in required)
