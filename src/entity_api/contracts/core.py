"""
Core entity contracts - always available regardless of components
"""

from entity_api.contracts.base import EntityContract, ContractField, DataType
from entity_api.contracts.fields import id_field, created_date_field, fk_field, is_active_field
from entity_api.config.settings import TABLE_PREFIX


def get_contact_contract() -> EntityContract:
    """Individuals, organizations and households"""
    fields = [
        id_field("Contact"),
        ContractField(
            name="contact_type",
            title="Contact Type",
            data_type=DataType.STRING,
            required=True,
            options=["Individual", "Organization", "Household"]
        ),
        ContractField(name="first_name", title="First Name", data_type=DataType.STRING),
        ContractField(name="last_name", title="Last Name", data_type=DataType.STRING),
        ContractField(name="organization_name", title="Organization Name", data_type=DataType.STRING),
        ContractField(name="display_name", title="Display Name", data_type=DataType.STRING),
        ContractField(name="birth_date", title="Birth Date", data_type=DataType.DATE),
        ContractField(
            name="is_deleted",
            title="Contact is in Trash",
            data_type=DataType.BOOLEAN,
            default=False
        ),
        created_date_field()
    ]

    return EntityContract(
        name="Contact",
        title="Contact",
        title_plural="Contacts",
        description="Individuals, organizations, households, etc.",
        table=f"{TABLE_PREFIX}contact",
        fields=fields
    )


def get_email_contract() -> EntityContract:
    fields = [
        id_field("Email"),
        fk_field("contact_id", "Contact ID", "Contact"),
        ContractField(name="email", title="Email", data_type=DataType.STRING, required=True),
        ContractField(
            name="location_type",
            title="Location Type",
            data_type=DataType.STRING,
            default="Home",
            options=["Home", "Work", "Billing", "Other"]
        ),
        ContractField(name="is_primary", title="Is Primary", data_type=DataType.BOOLEAN, default=False),
        ContractField(name="on_hold", title="On Hold", data_type=DataType.BOOLEAN, default=False)
    ]

    return EntityContract(
        name="Email",
        title="Email",
        title_plural="Emails",
        description="Email addresses belonging to contacts",
        table=f"{TABLE_PREFIX}email",
        fields=fields
    )


def get_activity_contract() -> EntityContract:
    fields = [
        id_field("Activity"),
        ContractField(
            name="activity_type",
            title="Activity Type",
            data_type=DataType.STRING,
            required=True,
            options=["Meeting", "Phone Call", "Email", "Follow up"]
        ),
        ContractField(name="subject", title="Subject", data_type=DataType.STRING),
        ContractField(name="details", title="Details", data_type=DataType.TEXT),
        ContractField(name="activity_date_time", title="Activity Date", data_type=DataType.TIMESTAMP),
        ContractField(
            name="status",
            title="Activity Status",
            data_type=DataType.STRING,
            default="Scheduled",
            options=["Scheduled", "Completed", "Cancelled"]
        ),
        ContractField(name="duration", title="Duration", data_type=DataType.INTEGER),
        fk_field("source_contact_id", "Source Contact", "Contact", required=False),
        created_date_field()
    ]

    return EntityContract(
        name="Activity",
        title="Activity",
        title_plural="Activities",
        description="Past or future actions concerning one or more contacts.",
        table=f"{TABLE_PREFIX}activity",
        fields=fields
    )


def get_group_contract() -> EntityContract:
    fields = [
        id_field("Group"),
        ContractField(name="name", title="Group Name", data_type=DataType.STRING, required=True),
        ContractField(name="title", title="Group Title", data_type=DataType.STRING, required=True),
        ContractField(name="description", title="Group Description", data_type=DataType.TEXT),
        ContractField(
            name="visibility",
            title="Group Visibility",
            data_type=DataType.STRING,
            default="User and User Admin Only",
            options=["User and User Admin Only", "Public Pages"]
        ),
        is_active_field()
    ]

    return EntityContract(
        name="Group",
        title="Group",
        title_plural="Groups",
        description="Groups of contacts, either manually added or by smart criteria.",
        table=f"{TABLE_PREFIX}group",
        fields=fields
    )


def get_tag_contract() -> EntityContract:
    fields = [
        id_field("Tag"),
        ContractField(name="name", title="Tag Name", data_type=DataType.STRING, required=True),
        ContractField(name="description", title="Description", data_type=DataType.STRING),
        ContractField(
            name="used_for",
            title="Used For",
            data_type=DataType.STRING,
            default="civicrm_contact",
            options=["civicrm_contact", "civicrm_activity", "civicrm_case"]
        ),
        ContractField(name="is_selectable", title="Display Tag?", data_type=DataType.BOOLEAN, default=True),
        ContractField(name="color", title="Color", data_type=DataType.STRING)
    ]

    return EntityContract(
        name="Tag",
        title="Tag",
        title_plural="Tags",
        description="Tags and tagsets used to categorize contacts, activities and cases.",
        table=f"{TABLE_PREFIX}tag",
        fields=fields
    )


def get_note_contract() -> EntityContract:
    fields = [
        id_field("Note"),
        ContractField(
            name="entity_table",
            title="Reference Type",
            data_type=DataType.STRING,
            default="civicrm_contact",
            options=["civicrm_contact", "civicrm_relationship", "civicrm_participant", "civicrm_note"]
        ),
        ContractField(name="entity_id", title="Reference ID", data_type=DataType.INTEGER, required=True),
        ContractField(name="note", title="Note", data_type=DataType.TEXT),
        ContractField(name="subject", title="Subject", data_type=DataType.STRING),
        ContractField(
            name="privacy",
            title="Privacy",
            data_type=DataType.STRING,
            default="None",
            options=["None", "Author Only"]
        ),
        created_date_field()
    ]

    return EntityContract(
        name="Note",
        title="Note",
        title_plural="Notes",
        description="Free-form notes attached to contacts and other records.",
        table=f"{TABLE_PREFIX}note",
        fields=fields
    )
