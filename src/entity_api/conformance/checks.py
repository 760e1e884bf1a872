"""
Per-entity conformance lifecycle

Runs one entity through metadata checks, a create/get/delete round trip and
the negative paths every CRUD entity must reject:

    checker = ConformanceChecker(CreationParameterProvider())
    report = await checker.run("Contact")
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, List, Optional

from entity_api.conformance.param_provider import CreationParameterProvider
from entity_api.contracts.base import CRUD_ACTIONS
from entity_api.entities import get_api_class
from entity_api.exceptions import APIException

logger = logging.getLogger(__name__)

REQUIRED_INFO_KEYS = ["name", "title", "title_plural", "type", "description"]


class ConformanceState(str, Enum):
    """Lifecycle states, in the order they are reached"""
    STARTED = "Started"
    INFO = "Info"
    ACTIONS = "Actions"
    SKIPPED = "Skipped"
    FIELDS = "Fields"
    CREATED = "Created"
    VERIFIED = "Verified"
    REJECTED_UPDATE = "RejectedUpdate"
    REJECTED_BAD_PARAM = "RejectedBadParam"
    REJECTED_NO_ID_DELETE = "RejectedNoIdDelete"
    DELETED = "Deleted"
    COMPLETE = "Complete"


class ConformanceFailure(AssertionError):
    """An entity broke one of the lifecycle assertions"""


class ConformanceSkipped(Exception):
    """Entity is not CRUD-capable and is exempt from the lifecycle"""


@dataclass
class ConformanceReport:
    entity: str
    state: ConformanceState = ConformanceState.STARTED
    record_id: Optional[int] = None
    history: List[ConformanceState] = field(default_factory=list)

    def advance(self, state: ConformanceState):
        self.state = state
        self.history.append(state)
        logger.info(f"{self.entity}: {state.value}")

    @property
    def complete(self) -> bool:
        return self.state == ConformanceState.COMPLETE


def check(condition: bool, message: str):
    if not condition:
        raise ConformanceFailure(message)


async def expect_api_exception(awaitable: Awaitable[Any], what: str, *fragments: str) -> APIException:
    """
    Await an action that must be rejected.

    Fails if nothing is raised or if the message lacks any of the fragments.
    Errors other than APIException propagate unchanged.
    """
    try:
        await awaitable
    except APIException as e:
        message = e.get_message()
        for fragment in fragments:
            check(
                fragment in message,
                f"APIException from {what} should mention '{fragment}', got: {message}"
            )
        return e
    raise ConformanceFailure(f"Expected APIException from {what}, none was raised")


class ConformanceChecker:
    """Drives a single entity through the conformance lifecycle"""

    def __init__(self, provider: Optional[CreationParameterProvider] = None):
        self.provider = provider or CreationParameterProvider()

    async def run(self, entity: str) -> ConformanceReport:
        """
        Run every check for one entity.

        Raises:
            ConformanceSkipped: entity lacks one of get/create/update/delete
            ConformanceFailure: any assertion failed; the report so far is attached
        """
        report = ConformanceReport(entity=entity)
        handle = get_api_class(entity)
        try:
            self.check_entity_info(handle)
            report.advance(ConformanceState.INFO)

            await self.check_actions(handle, report)
            report.advance(ConformanceState.ACTIONS)

            await self.check_fields(handle)
            report.advance(ConformanceState.FIELDS)

            record_id = await self.check_creation(entity, handle)
            report.record_id = record_id
            report.advance(ConformanceState.CREATED)

            await self.check_get(handle, record_id)
            await self.check_get_count(handle, record_id)
            report.advance(ConformanceState.VERIFIED)

            await self.check_update_fails_from_create(handle, record_id)
            report.advance(ConformanceState.REJECTED_UPDATE)

            await self.check_wrong_param_type(handle)
            report.advance(ConformanceState.REJECTED_BAD_PARAM)

            await self.check_delete_with_no_id(handle)
            report.advance(ConformanceState.REJECTED_NO_ID_DELETE)

            await self.check_deletion(handle, record_id)
            report.advance(ConformanceState.DELETED)

            await self.check_post_delete(handle, record_id)
            report.advance(ConformanceState.COMPLETE)
        except ConformanceFailure as e:
            logger.error(f"{entity} failed conformance after {report.state.value}: {e}")
            e.report = report
            raise

        return report

    def check_entity_info(self, handle):
        info = handle.get_info()
        for key in REQUIRED_INFO_KEYS:
            check(bool(info.get(key)), f"Entity info for {handle.get_entity_name()} is missing '{key}'")

    async def check_actions(self, handle, report: ConformanceReport):
        actions = (await handle.get_actions(False).execute()).index_by("name")
        check(bool(actions), f"{handle.get_entity_name()} lists no actions")

        missing = [action.value for action in CRUD_ACTIONS if action.value not in actions]
        if missing:
            report.advance(ConformanceState.SKIPPED)
            raise ConformanceSkipped(
                f"{handle.get_entity_name()} does not support {', '.join(missing)}"
            )

    async def check_fields(self, handle):
        fields = (
            await handle.get_fields(False)
            .set_include_custom(False)
            .execute()
        ).index_by("name")

        custom = [name for name, spec in fields.items() if spec.get("custom")]
        check(not custom, f"Custom fields returned although excluded: {custom}")
        check("id" in fields, f"{handle.get_entity_name()} has no id field")
        check(
            fields["id"].get("data_type") == "Integer",
            f"id field of {handle.get_entity_name()} should be Integer, got {fields['id'].get('data_type')}"
        )

    async def check_creation(self, entity: str, handle) -> int:
        params = await self.provider.get_required(entity)
        record = (
            await handle.create()
            .set_values(params)
            .set_check_permissions(False)
            .execute()
        ).first()

        check(record is not None, f"create on {entity} returned no record")
        record_id = record.get("id")
        check(
            isinstance(record_id, int) and not isinstance(record_id, bool) and record_id > 0,
            f"create on {entity} returned invalid id {record_id!r}"
        )
        return record_id

    async def check_get(self, handle, record_id: int):
        result = await handle.get(False).add_where("id", "=", record_id).execute()
        check(len(result) == 1, f"get by id {record_id} returned {len(result)} rows")
        check(result.first()["id"] == record_id, f"get by id {record_id} returned id {result.first()['id']}")

    async def check_get_count(self, handle, record_id: int):
        count = (
            await handle.get(False)
            .add_where("id", "=", record_id)
            .select_row_count()
            .execute()
        ).count()
        check(count == 1, f"row count for id {record_id} was {count}")

        total = (await handle.get(False).select_row_count().execute()).count()
        check(total >= 1, f"unfiltered row count was {total}")

    async def check_update_fails_from_create(self, handle, record_id: int):
        await expect_api_exception(
            handle.create(False).add_value("id", record_id).execute(),
            f"{handle.get_entity_name()}.create with an id",
            "id"
        )

    async def check_wrong_param_type(self, handle):
        await expect_api_exception(
            handle.get().set_debug("not a bool").execute(),
            f"{handle.get_entity_name()}.get with a non-boolean debug",
            "debug", "type"
        )

    async def check_delete_with_no_id(self, handle):
        await expect_api_exception(
            handle.delete().execute(),
            f"{handle.get_entity_name()}.delete without a where clause",
            "required"
        )

    async def check_deletion(self, handle, record_id: int):
        deleted = await handle.delete(False).add_where("id", "=", record_id).execute()
        check(
            list(deleted) == [{"id": record_id}],
            f"delete by id {record_id} returned {list(deleted)}"
        )

    async def check_post_delete(self, handle, record_id: int):
        result = await handle.get(False).add_where("id", "=", record_id).execute()
        check(len(result) == 0, f"record {record_id} still readable after delete")
