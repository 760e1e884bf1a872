"""
Validator component - deterministic validation of action requests against contracts
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from dataclasses import dataclass

from entity_api.contracts.base import ContractField, DataType, EntityContract, FilterOperator
from entity_api.models.params import WhereClause

logger = logging.getLogger(__name__)

@dataclass
class ValidationError:
    """Validation error details"""
    error_type: str
    message: str
    field: Optional[str] = None
    entity: Optional[str] = None

class Validator:
    """Deterministic validator for entity actions"""

    def validate_get(
        self,
        contract: EntityContract,
        select: List[str],
        where: List[WhereClause],
        order_by: Dict[str, str]
    ) -> Optional[ValidationError]:
        """Validate a get request: selected, filtered and ordered fields must exist"""
        for field_name in select:
            if field_name != "row_count" and not contract.get_field(field_name):
                return self._unknown_field(contract, field_name)

        error = self._validate_where_clauses(contract, where)
        if error:
            return error

        for field_name in order_by:
            if not contract.get_field(field_name):
                return self._unknown_field(contract, field_name)

        return None

    def validate_create(self, contract: EntityContract, values: Dict[str, Any]) -> Optional[ValidationError]:
        """Validate a create request"""
        # Creation must never turn into an update
        if contract.primary_key in values:
            return ValidationError(
                error_type="INVALID_QUERY",
                message=(
                    f"Cannot pass {contract.primary_key} to create action on {contract.name}. "
                    f"Use the update action instead."
                ),
                field=contract.primary_key,
                entity=contract.name
            )

        missing = [
            field.name for field in contract.fields
            if field.required and field.default is None and values.get(field.name) in (None, "")
        ]
        if missing:
            return ValidationError(
                error_type="INVALID_QUERY",
                message=f"Mandatory values missing from create on {contract.name}: {', '.join(missing)}",
                field=missing[0],
                entity=contract.name
            )

        error = self._validate_values(contract, values)
        if error:
            return error

        return None

    def validate_update(
        self,
        contract: EntityContract,
        values: Dict[str, Any],
        where: List[WhereClause]
    ) -> Optional[ValidationError]:
        """Validate an update request; a where clause is mandatory"""
        if not where:
            return self._where_required(contract)

        error = self._validate_where_clauses(contract, where)
        if error:
            return error

        if not values:
            return ValidationError(
                error_type="INVALID_QUERY",
                message=f"No values given to update on {contract.name}",
                entity=contract.name
            )

        error = self._validate_values(contract, values)
        if error:
            return error

        for field_name, value in values.items():
            field = contract.get_field(field_name)
            if field.required and value in (None, ""):
                return ValidationError(
                    error_type="INVALID_QUERY",
                    message=f"Field '{field_name}' on {contract.name} cannot be empty",
                    field=field_name,
                    entity=contract.name
                )

        return None

    def validate_delete(self, contract: EntityContract, where: List[WhereClause]) -> Optional[ValidationError]:
        """Validate a delete request; a where clause is mandatory"""
        if not where:
            return self._where_required(contract)
        return self._validate_where_clauses(contract, where)

    def _where_required(self, contract: EntityContract) -> ValidationError:
        return ValidationError(
            error_type="INVALID_QUERY",
            message="Parameter 'where' is required.",
            field="where",
            entity=contract.name
        )

    def _unknown_field(self, contract: EntityContract, field_name: str) -> ValidationError:
        return ValidationError(
            error_type="INVALID_QUERY",
            message=f"Invalid field '{field_name}' for {contract.name}",
            field=field_name,
            entity=contract.name
        )

    def _validate_values(self, contract: EntityContract, values: Dict[str, Any]) -> Optional[ValidationError]:
        for field_name, value in values.items():
            field = contract.get_field(field_name)
            if not field:
                return self._unknown_field(contract, field_name)

            if field.readonly:
                return ValidationError(
                    error_type="UNAUTHORIZED_FIELD",
                    message=f"Field '{field_name}' on {contract.name} is read-only",
                    field=field_name,
                    entity=contract.name
                )

            error = self._validate_field_value(contract, field, value)
            if error:
                return error

        return None

    def _validate_where_clauses(self, contract: EntityContract, where: List[WhereClause]) -> Optional[ValidationError]:
        for clause in where:
            field = contract.get_field(clause.field)
            if not field:
                return self._unknown_field(contract, clause.field)

            try:
                operator = FilterOperator(clause.op.upper())
            except ValueError:
                return ValidationError(
                    error_type="INVALID_QUERY",
                    message=f"Illegal operator '{clause.op}' for field '{clause.field}'",
                    field=clause.field,
                    entity=contract.name
                )

            if operator in (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL):
                continue

            if operator in (FilterOperator.IN, FilterOperator.NOT_IN):
                if not isinstance(clause.value, list):
                    return ValidationError(
                        error_type="INVALID_QUERY",
                        message=f"Operator {operator.value} on field '{clause.field}' expects a list",
                        field=clause.field,
                        entity=contract.name
                    )
                candidates = clause.value
            elif operator == FilterOperator.LIKE:
                if not isinstance(clause.value, str):
                    return ValidationError(
                        error_type="INVALID_QUERY",
                        message=f"Operator LIKE on field '{clause.field}' expects a string",
                        field=clause.field,
                        entity=contract.name
                    )
                continue
            else:
                candidates = [clause.value]

            for candidate in candidates:
                # Options are not enforced on filters; unknown options simply match nothing
                error = self._validate_field_value(contract, field, candidate, check_options=False)
                if error:
                    return error

        return None

    def _validate_field_value(
        self,
        contract: EntityContract,
        field: ContractField,
        value: Any,
        check_options: bool = True
    ) -> Optional[ValidationError]:
        """Validate field value matches expected type and option constraints"""
        if value is None:
            return None

        if check_options and field.options and value not in field.options:
            return ValidationError(
                error_type="INVALID_QUERY",
                message=(
                    f"Invalid value for field '{field.name}': '{value}'. "
                    f"Valid options are: {', '.join(field.options)}"
                ),
                field=field.name,
                entity=contract.name
            )

        if not _matches_data_type(field.data_type, value):
            return ValidationError(
                error_type="INVALID_QUERY",
                message=f"Invalid value for {field.data_type.value} field '{field.name}': {value!r}",
                field=field.name,
                entity=contract.name
            )

        return None


def _matches_data_type(data_type: DataType, value: Any) -> bool:
    if data_type == DataType.INTEGER:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        return isinstance(value, str) and value.lstrip("-").isdigit()
    if data_type == DataType.FLOAT:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        try:
            float(value)
        except (TypeError, ValueError):
            return False
        return True
    if data_type == DataType.BOOLEAN:
        return isinstance(value, bool) or value in (0, 1)
    if data_type in (DataType.STRING, DataType.TEXT):
        return isinstance(value, str)
    if data_type == DataType.DATE:
        if isinstance(value, date):
            return True
        return _parses(value, lambda v: date.fromisoformat(v[:10]))
    if data_type == DataType.TIMESTAMP:
        if isinstance(value, datetime):
            return True
        return _parses(value, lambda v: datetime.fromisoformat(v.replace("Z", "+00:00")))
    return True


def _parses(value: Any, parser) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parser(value)
    except ValueError:
        return False
    return True

# Global validator instance
_validator: Optional[Validator] = None

def get_validator() -> Validator:
    """Get the global validator instance"""
    global _validator
    if _validator is None:
        _validator = Validator()
    return _validator
