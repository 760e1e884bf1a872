"""
Action builders - chainable requests that run against an entity on execute()
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as ParamsValidationError

from entity_api.components import ComponentSettings, get_component_settings
from entity_api.config.permissions import get_required_permissions, has_permissions
from entity_api.config.settings import API_USER_PERMISSIONS
from entity_api.contracts.base import ACTION_DESCRIPTIONS, Action, EntityContract
from entity_api.contracts.registry import get_all_contracts
from entity_api.custom_fields import get_custom_field_specs
from entity_api.exceptions import APIException, UnauthorizedException
from entity_api.models.params import (
    PARAM_ALIASES,
    ActionParams,
    CreateParams,
    DeleteParams,
    GetActionsParams,
    GetFieldsParams,
    GetParams,
    UpdateParams,
    WhereClause,
)
from entity_api.result import Result
from entity_api.services import get_service
from entity_api.validator import ValidationError, get_validator

logger = logging.getLogger(__name__)


def describe_params_error(error: ParamsValidationError, entity: str, action: str) -> str:
    """Turn a pydantic error into an API message naming the offending parameter"""
    first = error.errors()[0]
    name = str(first["loc"][0]) if first["loc"] else "params"
    if first["type"] == "extra_forbidden":
        return f"Unknown parameter '{name}' for {entity}.{action}"
    return f"Parameter '{name}' is of the wrong type: {first['msg']}"


class AbstractAction:
    """Base for every action; holds raw params until execute()"""

    action_name: str = ""
    params_model = ActionParams

    def __init__(self, contract: EntityContract, check_permissions: bool = True):
        self.contract = contract
        self.entity_name = contract.name
        self._params: Dict[str, Any] = {"check_permissions": check_permissions}
        self._user_permissions: Optional[List[str]] = None

    def set_check_permissions(self, check_permissions: bool) -> "AbstractAction":
        self._params["check_permissions"] = check_permissions
        return self

    def set_debug(self, debug: bool) -> "AbstractAction":
        self._params["debug"] = debug
        return self

    def set_user_permissions(self, permissions: Iterable[str]) -> "AbstractAction":
        """Act as a user holding exactly these permissions"""
        self._user_permissions = list(permissions)
        return self

    def set_params(self, params: Dict[str, Any]) -> "AbstractAction":
        """Bulk-set params, accepting camelCase names"""
        for key, value in params.items():
            self._params[PARAM_ALIASES.get(key, key)] = value
        return self

    def get_params(self) -> Dict[str, Any]:
        return dict(self._params)

    def _build_params(self) -> ActionParams:
        try:
            return self.params_model(**self._params)
        except ParamsValidationError as e:
            message = describe_params_error(e, self.entity_name, self.action_name)
            logger.warning(f"Rejected {self.entity_name}.{self.action_name}: {message}")
            raise APIException(message, error_code="INVALID_PARAMETER")

    def _authorize(self, params: ActionParams) -> None:
        if not params.check_permissions:
            return
        granted = self._user_permissions if self._user_permissions is not None else API_USER_PERMISSIONS
        required = get_required_permissions(self.action_name, self.contract.component)
        if not has_permissions(granted, required):
            raise UnauthorizedException(
                f"Authorization failed: missing permission to {self.action_name} {self.entity_name}",
                details={"required": required}
            )

    @staticmethod
    def _raise_if_invalid(error: Optional[ValidationError]) -> None:
        if error:
            raise APIException(
                error.message,
                error_code=error.error_type,
                details={"field": error.field, "entity": error.entity}
            )

    async def execute(self) -> Result:
        """Validate params, check permissions and run the action"""
        params = self._build_params()
        self._authorize(params)

        logger.info(f"Executing {self.entity_name}.{self.action_name}")
        result = await self._run(params)
        result.entity = self.entity_name
        result.action = self.action_name
        if params.debug:
            result.debug = {"params": params.model_dump(mode="json")}
        return result

    async def _run(self, params: ActionParams) -> Result:
        raise NotImplementedError


class WhereMixin:
    """Builder methods for actions filtered by a where clause"""

    def add_where(self, field: str, op: str = "=", value: Any = None):
        self._params.setdefault("where", []).append([field, op, value])
        return self

    def set_where(self, where: List[List[Any]]):
        self._params["where"] = list(where)
        return self


class ValuesMixin:
    """Builder methods for actions that write values"""

    def add_value(self, field: str, value: Any):
        self._params.setdefault("values", {})[field] = value
        return self

    def set_values(self, values: Dict[str, Any]):
        self._params["values"] = dict(values)
        return self


class GetAction(WhereMixin, AbstractAction):
    action_name = Action.GET.value
    params_model = GetParams

    def add_select(self, *fields: str) -> "GetAction":
        self._params.setdefault("select", []).extend(fields)
        return self

    def set_select(self, fields: List[str]) -> "GetAction":
        self._params["select"] = list(fields)
        return self

    def add_order_by(self, field: str, direction: str = "ASC") -> "GetAction":
        self._params.setdefault("order_by", {})[field] = direction
        return self

    def set_limit(self, limit: int) -> "GetAction":
        self._params["limit"] = limit
        return self

    def set_offset(self, offset: int) -> "GetAction":
        self._params["offset"] = offset
        return self

    def select_row_count(self) -> "GetAction":
        self._params["select_row_count"] = True
        return self

    async def _run(self, params: GetParams) -> Result:
        self._raise_if_invalid(
            get_validator().validate_get(self.contract, params.select, params.where, params.order_by)
        )
        service = get_service(self.contract)
        select = [field for field in params.select if field != "row_count"]

        row_count = None
        if params.select_row_count:
            row_count = await service.count(params.where)

        rows = []
        if not params.select_row_count or select:
            rows = await service.read(
                select=select or None,
                where=params.where,
                order_by=params.order_by,
                limit=params.limit,
                offset=params.offset
            )
        return Result(rows, row_count=row_count)


class EntityGetAction(GetAction):
    """Lists entities from the live registry instead of a table"""

    def __init__(self, contract: EntityContract, check_permissions: bool = True):
        super().__init__(contract, check_permissions)
        self._components: Optional[ComponentSettings] = None

    def set_components(self, components: ComponentSettings) -> "EntityGetAction":
        self._components = components
        return self

    async def _run(self, params: GetParams) -> Result:
        self._raise_if_invalid(
            get_validator().validate_get(self.contract, params.select, params.where, params.order_by)
        )
        components = self._components or get_component_settings()
        rows = [contract.get_info() for contract in get_all_contracts(components).values()]
        rows = [row for row in rows if all(_matches(row, clause) for clause in params.where)]

        for field, direction in reversed(list(params.order_by.items())):
            rows.sort(key=lambda row: str(row.get(field) or ""), reverse=direction == "DESC")

        row_count = len(rows) if params.select_row_count else None
        rows = rows[params.offset:]
        if params.limit:
            rows = rows[:params.limit]

        select = [field for field in params.select if field != "row_count"]
        if params.select_row_count and not select:
            rows = []
        elif select:
            rows = [{field: row.get(field) for field in select} for row in rows]
        return Result(rows, row_count=row_count)


def _matches(row: Dict[str, Any], clause: WhereClause) -> bool:
    """In-memory evaluation of the operators the registry supports"""
    actual = row.get(clause.field)
    op = clause.op.upper()
    if op == "=":
        return actual == clause.value
    if op == "!=":
        return actual != clause.value
    if op == "IN":
        return actual in clause.value
    if op == "NOT IN":
        return actual not in clause.value
    if op == "IS NULL":
        return actual is None
    if op == "IS NOT NULL":
        return actual is not None
    raise APIException(f"Operator {clause.op} is not supported when listing entities")


class CreateAction(ValuesMixin, AbstractAction):
    action_name = Action.CREATE.value
    params_model = CreateParams

    async def _run(self, params: CreateParams) -> Result:
        self._raise_if_invalid(get_validator().validate_create(self.contract, params.values))
        row = await get_service(self.contract).create(params.values)
        logger.info(f"Created {self.entity_name} {row.get('id')}")
        return Result([row])


class UpdateAction(ValuesMixin, WhereMixin, AbstractAction):
    action_name = Action.UPDATE.value
    params_model = UpdateParams

    async def _run(self, params: UpdateParams) -> Result:
        values = dict(params.values)
        where = list(params.where)
        primary_key = self.contract.primary_key

        # An id among the values identifies the record when no where is given
        if not where and values.get(primary_key) is not None:
            where = [WhereClause(field=primary_key, op="=", value=values.pop(primary_key))]

        self._raise_if_invalid(get_validator().validate_update(self.contract, values, where))
        rows = await get_service(self.contract).update(where, values)
        logger.info(f"Updated {len(rows)} {self.entity_name} records")
        return Result(rows)


class DeleteAction(WhereMixin, AbstractAction):
    action_name = Action.DELETE.value
    params_model = DeleteParams

    async def _run(self, params: DeleteParams) -> Result:
        self._raise_if_invalid(get_validator().validate_delete(self.contract, params.where))
        rows = await get_service(self.contract).delete(params.where)
        logger.info(f"Deleted {len(rows)} {self.entity_name} records")
        return Result(rows)


class GetFieldsAction(AbstractAction):
    action_name = Action.GET_FIELDS.value
    params_model = GetFieldsParams

    def set_include_custom(self, include_custom: bool) -> "GetFieldsAction":
        self._params["include_custom"] = include_custom
        return self

    async def _run(self, params: GetFieldsParams) -> Result:
        rows = [field.to_field_spec() for field in self.contract.fields]
        if params.include_custom:
            rows.extend(await get_custom_field_specs(self.entity_name))
        return Result(rows)


class GetActionsAction(AbstractAction):
    action_name = Action.GET_ACTIONS.value
    params_model = GetActionsParams

    async def _run(self, params: GetActionsParams) -> Result:
        rows = [
            {"name": action.value, "description": ACTION_DESCRIPTIONS[action]}
            for action in self.contract.actions
        ]
        return Result(rows)
