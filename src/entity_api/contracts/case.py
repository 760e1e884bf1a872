"""
CiviCase component contracts
"""

from entity_api.contracts.base import EntityContract, ContractField, DataType
from entity_api.contracts.fields import id_field, created_date_field, fk_field, is_active_field
from entity_api.config.settings import TABLE_PREFIX

COMPONENT = "CiviCase"


def get_case_type_contract() -> EntityContract:
    fields = [
        id_field("Case Type"),
        ContractField(name="name", title="Case Type Name", data_type=DataType.STRING, required=True),
        ContractField(name="title", title="Case Type Title", data_type=DataType.STRING, required=True),
        ContractField(name="description", title="Case Type Description", data_type=DataType.STRING),
        ContractField(name="definition", title="Case Type Definition", data_type=DataType.TEXT),
        ContractField(name="weight", title="Order", data_type=DataType.INTEGER, default=1),
        is_active_field()
    ]

    return EntityContract(
        name="CaseType",
        title="Case Type",
        title_plural="Case Types",
        description="Case type definitions, including activity types and roles.",
        table=f"{TABLE_PREFIX}case_type",
        component=COMPONENT,
        fields=fields
    )


def get_case_contract() -> EntityContract:
    fields = [
        id_field("Case"),
        fk_field("case_type_id", "Case Type", "CaseType"),
        fk_field("contact_id", "Case Client", "Contact"),
        ContractField(name="subject", title="Case Subject", data_type=DataType.STRING),
        ContractField(
            name="status",
            title="Case Status",
            data_type=DataType.STRING,
            default="Open",
            options=["Open", "Closed", "Urgent"]
        ),
        ContractField(name="start_date", title="Case Start Date", data_type=DataType.DATE),
        ContractField(name="end_date", title="Case End Date", data_type=DataType.DATE),
        ContractField(name="is_deleted", title="Case is in the Trash", data_type=DataType.BOOLEAN, default=False),
        created_date_field()
    ]

    return EntityContract(
        name="Case",
        title="Case",
        title_plural="Cases",
        description="Cases track interactions with contacts over time.",
        table=f"{TABLE_PREFIX}case",
        component=COMPONENT,
        fields=fields
    )
