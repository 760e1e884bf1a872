"""
Base contract models for entity metadata
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from enum import Enum

class DataType(str, Enum):
    """Supported field data types"""
    INTEGER = "Integer"
    STRING = "String"
    TEXT = "Text"
    BOOLEAN = "Boolean"
    FLOAT = "Float"
    DATE = "Date"
    TIMESTAMP = "Timestamp"

class FilterOperator(str, Enum):
    """Allowed filter operators"""
    EQ = "="
    NEQ = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    IN = "IN"
    NOT_IN = "NOT IN"
    LIKE = "LIKE"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"

class Action(str, Enum):
    """Actions an entity can expose"""
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    GET_FIELDS = "getFields"
    GET_ACTIONS = "getActions"

CRUD_ACTIONS = [Action.GET, Action.CREATE, Action.UPDATE, Action.DELETE]

ACTION_DESCRIPTIONS = {
    Action.GET: "Retrieve records, optionally filtered and counted",
    Action.CREATE: "Create a new record",
    Action.UPDATE: "Update one or more records matching a where clause",
    Action.DELETE: "Delete one or more records matching a where clause",
    Action.GET_FIELDS: "List the fields of this entity",
    Action.GET_ACTIONS: "List the actions this entity supports",
}

class ContractField(BaseModel):
    """Field definition within an entity contract"""
    name: str
    title: str
    data_type: DataType
    description: str = ""
    required: bool = False
    readonly: bool = False
    default: Any = None
    fk_entity: Optional[str] = None
    options: Optional[List[str]] = None
    custom: bool = False

    def to_field_spec(self) -> Dict[str, Any]:
        """Render the field as a getFields row"""
        spec = self.model_dump()
        spec["data_type"] = self.data_type.value
        return spec


class EntityContract(BaseModel):
    """Complete metadata contract for one entity"""
    name: str
    title: str
    title_plural: str
    description: str
    type: List[str] = Field(default_factory=lambda: ["DAOEntity"])
    table: Optional[str] = None
    component: Optional[str] = None
    primary_key: str = "id"
    actions: List[Action] = Field(default_factory=lambda: list(Action))
    fields: List[ContractField]
    # Entities that only exist when attached to another record (e.g. custom values)
    standalone: bool = True

    def get_field(self, field_name: str) -> Optional[ContractField]:
        """Get field definition by name"""
        return next((f for f in self.fields if f.name == field_name), None)

    def is_action_allowed(self, action: str) -> bool:
        """Check if action is exposed"""
        return action in [a.value for a in self.actions]

    def is_crud(self) -> bool:
        return all(action in self.actions for action in CRUD_ACTIONS)

    def get_info(self) -> Dict[str, Any]:
        """Entity info mapping as returned by get_info()"""
        return {
            "name": self.name,
            "title": self.title,
            "title_plural": self.title_plural,
            "description": self.description,
            "type": list(self.type),
            "table": self.table,
            "component": self.component,
            "primary_key": self.primary_key,
        }

    def writable_fields(self) -> List[ContractField]:
        return [f for f in self.fields if not f.readonly]
