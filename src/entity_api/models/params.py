"""
Action parameter models - type-checked before any action runs
"""

from typing import Any, Dict, List, Literal
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator

class WhereClause(BaseModel):
    """Single where condition: [field, op, value]"""
    field: StrictStr
    op: StrictStr = "="
    value: Any = None

    def as_list(self) -> List[Any]:
        return [self.field, self.op, self.value]


def _coerce_where(value: Any) -> Any:
    """Accept [field, op, value] lists as well as mappings"""
    if not isinstance(value, list):
        return value
    clauses = []
    for clause in value:
        if isinstance(clause, (list, tuple)):
            if len(clause) == 2:
                clause = {"field": clause[0], "op": clause[1]}
            elif len(clause) == 3:
                clause = {"field": clause[0], "op": clause[1], "value": clause[2]}
        clauses.append(clause)
    return clauses


class ActionParams(BaseModel):
    """Parameters shared by every action"""
    model_config = ConfigDict(extra="forbid")

    check_permissions: StrictBool = True
    debug: StrictBool = False

    @field_validator("where", mode="before", check_fields=False)
    @classmethod
    def normalize_where(cls, value: Any) -> Any:
        return _coerce_where(value)


class GetParams(ActionParams):
    select: List[StrictStr] = Field(default_factory=list)
    where: List[WhereClause] = Field(default_factory=list)
    order_by: Dict[StrictStr, Literal["ASC", "DESC"]] = Field(default_factory=dict)
    limit: StrictInt = Field(default=0, ge=0)
    offset: StrictInt = Field(default=0, ge=0)
    select_row_count: StrictBool = False


class CreateParams(ActionParams):
    values: Dict[StrictStr, Any] = Field(default_factory=dict)


class UpdateParams(ActionParams):
    values: Dict[StrictStr, Any] = Field(default_factory=dict)
    where: List[WhereClause] = Field(default_factory=list)


class DeleteParams(ActionParams):
    where: List[WhereClause] = Field(default_factory=list)


class GetFieldsParams(ActionParams):
    include_custom: StrictBool = True


class GetActionsParams(ActionParams):
    pass


# camelCase names accepted over HTTP -> snake_case parameter names
PARAM_ALIASES = {
    "checkPermissions": "check_permissions",
    "orderBy": "order_by",
    "selectRowCount": "select_row_count",
    "includeCustom": "include_custom",
}
