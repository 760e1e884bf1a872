"""
Contract for the Entity registry itself - a read-only, non-CRUD entity
"""

from entity_api.contracts.base import EntityContract, ContractField, DataType, Action


def get_entity_contract() -> EntityContract:
    fields = [
        ContractField(name="name", title="Entity Name", data_type=DataType.STRING, readonly=True),
        ContractField(name="title", title="Entity Title", data_type=DataType.STRING, readonly=True),
        ContractField(name="title_plural", title="Title Plural", data_type=DataType.STRING, readonly=True),
        ContractField(name="description", title="Description", data_type=DataType.TEXT, readonly=True),
        ContractField(name="type", title="Type", data_type=DataType.STRING, readonly=True),
        ContractField(name="table", title="Table Name", data_type=DataType.STRING, readonly=True),
        ContractField(name="component", title="Component", data_type=DataType.STRING, readonly=True),
        ContractField(name="primary_key", title="Primary Key", data_type=DataType.STRING, readonly=True)
    ]

    return EntityContract(
        name="Entity",
        title="Entity",
        title_plural="Entities",
        description="Metadata about every entity exposed by the API.",
        type=["AbstractEntity"],
        primary_key="name",
        actions=[Action.GET, Action.GET_FIELDS, Action.GET_ACTIONS],
        fields=fields
    )
