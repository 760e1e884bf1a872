"""
Custom data contracts - custom groups, custom fields and their stored values
"""

from entity_api.contracts.base import EntityContract, ContractField, DataType, Action
from entity_api.contracts.fields import id_field, fk_field, is_active_field
from entity_api.config.settings import TABLE_PREFIX

# Prefix of the per-group tables holding custom values
CUSTOM_VALUE_TABLE_PREFIX = f"{TABLE_PREFIX}value_"

# Custom field data types mapped onto entity field data types
CUSTOM_DATA_TYPES = {
    "String": DataType.STRING,
    "Int": DataType.INTEGER,
    "Float": DataType.FLOAT,
    "Boolean": DataType.BOOLEAN,
    "Date": DataType.DATE,
    "Memo": DataType.TEXT,
}

EXTENDABLE_ENTITIES = ["Contact", "Activity", "Event", "Participant", "Case"]


def get_custom_group_contract() -> EntityContract:
    fields = [
        id_field("Custom Group"),
        ContractField(name="name", title="Custom Group Name", data_type=DataType.STRING, required=True),
        ContractField(name="title", title="Custom Group Title", data_type=DataType.STRING, required=True),
        ContractField(
            name="extends",
            title="Custom Group Extends",
            data_type=DataType.STRING,
            required=True,
            options=EXTENDABLE_ENTITIES
        ),
        ContractField(
            name="table_name",
            title="Table Name",
            data_type=DataType.STRING,
            readonly=True
        ),
        ContractField(name="weight", title="Order", data_type=DataType.INTEGER, default=1),
        is_active_field()
    ]

    return EntityContract(
        name="CustomGroup",
        title="Custom Field Group",
        title_plural="Custom Field Groups",
        description="Sets of custom fields which extend an entity.",
        table=f"{TABLE_PREFIX}custom_group",
        fields=fields
    )


def get_custom_field_contract() -> EntityContract:
    fields = [
        id_field("Custom Field"),
        fk_field("custom_group_id", "Custom Group", "CustomGroup"),
        ContractField(name="name", title="Custom Field Name", data_type=DataType.STRING, required=True),
        ContractField(name="label", title="Custom Field Label", data_type=DataType.STRING, required=True),
        ContractField(
            name="data_type",
            title="Data Type",
            data_type=DataType.STRING,
            required=True,
            options=list(CUSTOM_DATA_TYPES)
        ),
        ContractField(
            name="html_type",
            title="HTML Type",
            data_type=DataType.STRING,
            required=True,
            options=["Text", "TextArea", "Select", "Radio", "CheckBox", "Select Date"]
        ),
        ContractField(
            name="column_name",
            title="Column Name",
            data_type=DataType.STRING,
            readonly=True
        ),
        ContractField(name="is_required", title="Custom Field Is Required?", data_type=DataType.BOOLEAN, default=False),
        is_active_field()
    ]

    return EntityContract(
        name="CustomField",
        title="Custom Field",
        title_plural="Custom Fields",
        description="Individual custom field definitions.",
        table=f"{TABLE_PREFIX}custom_field",
        fields=fields
    )


def get_custom_value_contract() -> EntityContract:
    """Custom values only exist per custom group, so this is not a standalone entity"""
    fields = [
        id_field("Custom Value"),
        ContractField(name="entity_id", title="Entity ID", data_type=DataType.INTEGER, required=True)
    ]

    return EntityContract(
        name="CustomValue",
        title="Custom Value",
        title_plural="Custom Values",
        description="Values stored in custom field groups; addressed as Custom_<group>.",
        table=None,
        actions=[Action.GET_FIELDS, Action.GET_ACTIONS],
        fields=fields,
        standalone=False
    )
