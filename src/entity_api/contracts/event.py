"""
CiviEvent component contracts
"""

from entity_api.contracts.base import EntityContract, ContractField, DataType
from entity_api.contracts.fields import id_field, created_date_field, fk_field, is_active_field
from entity_api.config.settings import TABLE_PREFIX

COMPONENT = "CiviEvent"


def get_event_contract() -> EntityContract:
    fields = [
        id_field("Event"),
        ContractField(name="title", title="Event Title", data_type=DataType.STRING, required=True),
        ContractField(
            name="event_type",
            title="Event Type",
            data_type=DataType.STRING,
            required=True,
            options=["Conference", "Exhibition", "Fundraiser", "Meeting", "Workshop"]
        ),
        ContractField(name="summary", title="Event Summary", data_type=DataType.TEXT),
        ContractField(name="start_date", title="Event Start Date", data_type=DataType.TIMESTAMP, required=True),
        ContractField(name="end_date", title="Event End Date", data_type=DataType.TIMESTAMP),
        ContractField(name="max_participants", title="Max Participants", data_type=DataType.INTEGER),
        ContractField(name="is_public", title="Is Event Public", data_type=DataType.BOOLEAN, default=True),
        is_active_field(),
        created_date_field()
    ]

    return EntityContract(
        name="Event",
        title="Event",
        title_plural="Events",
        description="Scheduled events with participants and registrations.",
        table=f"{TABLE_PREFIX}event",
        component=COMPONENT,
        fields=fields
    )


def get_participant_contract() -> EntityContract:
    fields = [
        id_field("Participant"),
        fk_field("event_id", "Event", "Event"),
        fk_field("contact_id", "Contact", "Contact"),
        ContractField(
            name="status",
            title="Participant Status",
            data_type=DataType.STRING,
            default="Registered",
            options=["Registered", "Attended", "No-show", "Cancelled"]
        ),
        ContractField(
            name="role",
            title="Participant Role",
            data_type=DataType.STRING,
            default="Attendee",
            options=["Attendee", "Volunteer", "Host", "Speaker"]
        ),
        ContractField(name="register_date", title="Register Date", data_type=DataType.TIMESTAMP),
        ContractField(name="fee_amount", title="Fee Amount", data_type=DataType.FLOAT)
    ]

    return EntityContract(
        name="Participant",
        title="Participant",
        title_plural="Participants",
        description="Event participants: contacts registered for an event.",
        table=f"{TABLE_PREFIX}participant",
        component=COMPONENT,
        fields=fields
    )
