"""
Field builders shared by entity contracts
"""

from entity_api.contracts.base import ContractField, DataType


def id_field(entity_title: str) -> ContractField:
    """Auto-generated integer primary key"""
    return ContractField(
        name="id",
        title=f"{entity_title} ID",
        data_type=DataType.INTEGER,
        description=f"Unique {entity_title} ID",
        required=False,
        readonly=True
    )


def created_date_field() -> ContractField:
    return ContractField(
        name="created_date",
        title="Created Date",
        data_type=DataType.TIMESTAMP,
        readonly=True
    )


def fk_field(name: str, title: str, fk_entity: str, required: bool = True) -> ContractField:
    return ContractField(
        name=name,
        title=title,
        data_type=DataType.INTEGER,
        required=required,
        fk_entity=fk_entity
    )


def is_active_field() -> ContractField:
    return ContractField(
        name="is_active",
        title="Enabled",
        data_type=DataType.BOOLEAN,
        default=True
    )
