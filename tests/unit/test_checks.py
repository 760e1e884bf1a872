"""
Conformance checker - conforming entities pass, broken ones are caught
"""

import pytest

from entity_api.conformance import checks
from entity_api.conformance.checks import (
    ConformanceChecker,
    ConformanceFailure,
    ConformanceSkipped,
    ConformanceState,
    expect_api_exception,
)
from entity_api.contracts.base import ContractField, DataType
from entity_api.entities import Contact, Tag
from entity_api.exceptions import APIException


class UntitledContact(Contact):
    """Contact whose info lacks a title"""

    @classmethod
    def get_info(cls):
        info = super().get_info()
        info["title"] = ""
        return info


class StringIdTag(Tag):
    """Tag whose id field is declared as a string"""

    @classmethod
    def get_contract(cls):
        contract = super().get_contract()
        fields = [
            ContractField(name="id", title="Tag ID", data_type=DataType.STRING, readonly=True)
            if field.name == "id" else field
            for field in contract.fields
        ]
        return contract.model_copy(update={"fields": fields})


async def succeed():
    return None


async def fail_with(message):
    raise APIException(message)


async def crash():
    raise RuntimeError("storage exploded")


@pytest.mark.unit
class TestExpectApiException:

    @pytest.mark.asyncio
    async def test_no_exception_is_a_failure(self):
        with pytest.raises(ConformanceFailure, match="Expected APIException from Thing.delete, none was raised"):
            await expect_api_exception(succeed(), "Thing.delete")

    @pytest.mark.asyncio
    async def test_message_fragments_checked(self):
        error = await expect_api_exception(fail_with("Parameter 'where' is required."), "x", "required")
        assert error.get_message() == "Parameter 'where' is required."

        with pytest.raises(ConformanceFailure, match="should mention 'debug'"):
            await expect_api_exception(fail_with("Parameter 'where' is required."), "x", "debug")

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        with pytest.raises(RuntimeError):
            await expect_api_exception(crash(), "x")


@pytest.mark.unit
@pytest.mark.crud
class TestConformanceChecker:

    @pytest.mark.asyncio
    async def test_contact_lifecycle(self, database, provider):
        report = await ConformanceChecker(provider).run("Contact")

        assert report.complete
        assert report.history == [
            ConformanceState.INFO,
            ConformanceState.ACTIONS,
            ConformanceState.FIELDS,
            ConformanceState.CREATED,
            ConformanceState.VERIFIED,
            ConformanceState.REJECTED_UPDATE,
            ConformanceState.REJECTED_BAD_PARAM,
            ConformanceState.REJECTED_NO_ID_DELETE,
            ConformanceState.DELETED,
            ConformanceState.COMPLETE,
        ]
        assert len(await Contact.get(False).add_where("id", "=", report.record_id).execute()) == 0

    @pytest.mark.asyncio
    async def test_dependent_entity_lifecycle(self, database, provider):
        report = await ConformanceChecker(provider).run("Participant")

        assert report.complete
        assert provider.created_dependencies["Event"], "Event dependency not created"
        assert provider.created_dependencies["Contact"], "Contact dependency not created"

    @pytest.mark.asyncio
    async def test_non_crud_entity_skipped(self, database, provider):
        with pytest.raises(ConformanceSkipped, match="create, update, delete"):
            await ConformanceChecker(provider).run("Entity")

    @pytest.mark.asyncio
    async def test_missing_info_detected(self, database, provider, monkeypatch):
        monkeypatch.setattr(checks, "get_api_class", lambda entity: UntitledContact)

        with pytest.raises(ConformanceFailure, match="missing 'title'") as exc_info:
            await ConformanceChecker(provider).run("Contact")
        assert exc_info.value.report.state == ConformanceState.STARTED

    @pytest.mark.asyncio
    async def test_non_integer_id_detected(self, database, provider, monkeypatch):
        monkeypatch.setattr(checks, "get_api_class", lambda entity: StringIdTag)

        with pytest.raises(ConformanceFailure, match="should be Integer") as exc_info:
            await ConformanceChecker(provider).run("Tag")
        assert exc_info.value.report.state == ConformanceState.ACTIONS
        assert exc_info.value.report.record_id is None, "Nothing should be created"
