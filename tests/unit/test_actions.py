"""
Entity handles and action builders against an in-memory database
"""

import pytest

from entity_api.components import ComponentSettings
from entity_api.entities import (
    CiviCase,
    Contact,
    CustomField,
    CustomGroup,
    CustomValue,
    Email,
    Entity,
    get_api_class,
)
from entity_api.exceptions import APIException, NotFoundException, UnauthorizedException


async def create_contact(**values):
    values.setdefault("contact_type", "Individual")
    result = await Contact.create(False).set_values(values).execute()
    return result.first()


@pytest.mark.unit
@pytest.mark.crud
class TestContactCRUD:
    """Round trip through every CRUD action"""

    @pytest.mark.asyncio
    async def test_full_crud_cycle(self, database):
        # === CREATE ===
        contact = await create_contact(first_name="Ada", last_name="Lovelace")
        assert isinstance(contact["id"], int) and contact["id"] > 0
        assert contact["is_deleted"] is False, "Default not applied"
        assert contact["created_date"], "created_date not populated"

        # === READ ===
        result = await Contact.get(False).add_where("id", "=", contact["id"]).execute()
        assert len(result) == 1
        assert result.first()["first_name"] == "Ada"
        assert result.entity == "Contact"
        assert result.action == "get"

        # === UPDATE ===
        updated = await Contact.update(False).add_value("id", contact["id"]).add_value("first_name", "Augusta").execute()
        assert updated.column("first_name") == ["Augusta"]

        # === DELETE ===
        deleted = await Contact.delete(False).add_where("id", "=", contact["id"]).execute()
        assert list(deleted) == [{"id": contact["id"]}]

        result = await Contact.get(False).add_where("id", "=", contact["id"]).execute()
        assert len(result) == 0

    @pytest.mark.asyncio
    async def test_row_count(self, database):
        for name in ["Ann", "Bob", "Cy"]:
            await create_contact(first_name=name)

        result = await Contact.get(False).select_row_count().execute()
        assert result.count() == 3
        assert len(result) == 0, "Row count alone should not return rows"

        result = await Contact.get(False).add_select("first_name", "row_count").select_row_count().execute()
        assert result.count() == 3
        assert len(result) == 3

    @pytest.mark.asyncio
    async def test_order_limit_offset(self, database):
        for name in ["Cy", "Ann", "Bob"]:
            await create_contact(first_name=name)

        result = await Contact.get(False) \
            .add_select("first_name") \
            .add_order_by("first_name", "ASC") \
            .set_limit(2) \
            .set_offset(1) \
            .execute()
        assert result.column("first_name") == ["Bob", "Cy"]

        result = await Contact.get(False).add_order_by("first_name", "DESC").set_offset(2).execute()
        assert result.column("first_name") == ["Ann"]

    @pytest.mark.asyncio
    async def test_where_operators(self, database):
        ann = await create_contact(first_name="Ann", contact_type="Individual")
        org = await create_contact(organization_name="Acme", contact_type="Organization")

        result = await Contact.get(False).add_where("id", "IN", [ann["id"], org["id"]]).execute()
        assert result.column("id") == [ann["id"], org["id"]]

        result = await Contact.get(False).add_where("organization_name", "LIKE", "Ac%").execute()
        assert result.column("id") == [org["id"]]

        result = await Contact.get(False).add_where("first_name", "IS NULL").execute()
        assert result.column("id") == [org["id"]]

        result = await Contact.get(False).add_where("id", "IN", []).execute()
        assert len(result) == 0

    @pytest.mark.asyncio
    async def test_update_many_and_index_by(self, database):
        first = await create_contact(first_name="Ann")
        second = await create_contact(first_name="Bob")

        updated = await Contact.update(False) \
            .add_where("contact_type", "=", "Individual") \
            .add_value("last_name", "Smith") \
            .execute()
        rows = updated.index_by("id")
        assert set(rows) == {first["id"], second["id"]}
        assert all(row["last_name"] == "Smith" for row in rows.values())

    @pytest.mark.asyncio
    async def test_debug_output(self, database):
        result = await Contact.get(False).set_debug(True).execute()
        assert result.debug["params"]["debug"] is True

    @pytest.mark.asyncio
    async def test_foreign_key_required_to_exist(self, database):
        with pytest.raises(APIException) as exc_info:
            await Email.create(False).set_values({"contact_id": 999, "email": "a@example.org"}).execute()
        assert exc_info.value.error_code == "FOREIGN_KEY_ERROR"

    @pytest.mark.asyncio
    async def test_deleting_contact_cascades(self, database):
        contact = await create_contact(first_name="Ann")
        await Email.create(False).set_values({"contact_id": contact["id"], "email": "ann@example.org"}).execute()

        await Contact.delete(False).add_where("id", "=", contact["id"]).execute()
        assert len(await Email.get(False).execute()) == 0


@pytest.mark.unit
class TestRejectedRequests:
    """Malformed requests fail with APIException before touching storage"""

    @pytest.mark.asyncio
    async def test_create_with_id(self, database):
        with pytest.raises(APIException) as exc_info:
            await Contact.create(False).add_value("id", 1).execute()
        assert exc_info.value.get_message() == (
            "Cannot pass id to create action on Contact. Use the update action instead."
        )

    @pytest.mark.asyncio
    async def test_wrong_param_type(self, database):
        with pytest.raises(APIException) as exc_info:
            await Contact.get().set_debug("not a bool").execute()
        message = exc_info.value.get_message()
        assert "debug" in message and "type" in message
        assert exc_info.value.error_code == "INVALID_PARAMETER"

    @pytest.mark.asyncio
    async def test_unknown_param(self, database):
        with pytest.raises(APIException, match="Unknown parameter 'bogus'"):
            await Contact.get().set_params({"bogus": 1}).execute()

    @pytest.mark.asyncio
    async def test_delete_without_where(self, database):
        with pytest.raises(APIException, match="required"):
            await Contact.delete().execute()

    @pytest.mark.asyncio
    async def test_update_without_where(self, database):
        with pytest.raises(APIException, match="required"):
            await Contact.update().add_value("first_name", "Nobody").execute()

    @pytest.mark.asyncio
    async def test_missing_mandatory_value(self, database):
        with pytest.raises(APIException, match="Mandatory values missing from create on Contact: contact_type"):
            await Contact.create(False).add_value("first_name", "Ann").execute()

    @pytest.mark.asyncio
    async def test_invalid_option(self, database):
        with pytest.raises(APIException, match="Valid options are"):
            await Contact.create(False).add_value("contact_type", "Robot").execute()

    @pytest.mark.asyncio
    async def test_unknown_field(self, database):
        with pytest.raises(APIException, match="Invalid field 'shoe_size'"):
            await Contact.get(False).add_where("shoe_size", "=", 9).execute()

    @pytest.mark.asyncio
    async def test_illegal_operator(self, database):
        with pytest.raises(APIException, match="Illegal operator"):
            await Contact.get(False).add_where("id", "~", 9).execute()


@pytest.mark.unit
class TestPermissions:

    @pytest.mark.asyncio
    async def test_missing_permission(self, database):
        with pytest.raises(UnauthorizedException) as exc_info:
            await Contact.create().set_user_permissions(["access CiviCRM"]) \
                .add_value("contact_type", "Individual") \
                .execute()
        assert exc_info.value.error_code == "UNAUTHORIZED_OPERATION"

    @pytest.mark.asyncio
    async def test_check_permissions_disabled(self, database):
        result = await Contact.create(False).set_user_permissions([]) \
            .add_value("contact_type", "Individual").execute()
        assert result.first()["id"] > 0

    @pytest.mark.asyncio
    async def test_component_permissions(self, database):
        with pytest.raises(UnauthorizedException):
            await CiviCase.get().set_user_permissions(["access CiviCRM"]).execute()

        result = await CiviCase.get().set_user_permissions(
            ["access CiviCRM", "access all cases and activities"]
        ).execute()
        assert len(result) == 0

    @pytest.mark.asyncio
    async def test_metadata_needs_no_permission(self):
        result = await Contact.get_fields().set_user_permissions([]).set_include_custom(False).execute()
        assert "id" in result.index_by("name")


@pytest.mark.unit
class TestMetadata:

    def test_info(self):
        info = Contact.get_info()
        for key in ["name", "title", "title_plural", "type", "description"]:
            assert info[key], f"Missing {key}"
        assert CiviCase.get_info()["name"] == "Case"

    @pytest.mark.asyncio
    async def test_fields(self):
        fields = (await Contact.get_fields(False).set_include_custom(False).execute()).index_by("name")
        assert fields["id"]["data_type"] == "Integer"
        assert fields["id"]["readonly"] is True
        assert fields["contact_type"]["options"] == ["Individual", "Organization", "Household"]

    @pytest.mark.asyncio
    async def test_actions(self):
        actions = (await Contact.get_actions(False).execute()).column("name")
        assert {"get", "create", "update", "delete"} <= set(actions)

        actions = (await Entity.get_actions(False).execute()).column("name")
        assert "create" not in actions

    @pytest.mark.asyncio
    async def test_custom_fields_merged(self, database):
        group = (await CustomGroup.create(False).set_values({
            "name": "MyFavoriteThings",
            "title": "My Favorite Things",
            "extends": "Contact",
        }).execute()).first()
        assert group["table_name"] == f"civicrm_value_myfavoritethings_{group['id']}"

        await CustomField.create(False).set_values({
            "custom_group_id": group["id"],
            "name": "FavColor",
            "label": "Favorite Color",
            "data_type": "String",
            "html_type": "Text",
        }).execute()

        with_custom = (await Contact.get_fields(False).execute()).index_by("name")
        assert with_custom["MyFavoriteThings.FavColor"]["custom"] is True
        assert with_custom["MyFavoriteThings.FavColor"]["data_type"] == "String"

        without_custom = await Contact.get_fields(False).set_include_custom(False).execute()
        assert not [row for row in without_custom if row["custom"]]

    @pytest.mark.asyncio
    async def test_custom_value_is_metadata_only(self):
        assert not hasattr(CustomValue, "get")
        fields = (await CustomValue.get_fields(False).execute()).column("name")
        assert fields == ["id", "entity_id"]

    def test_unknown_entity(self):
        with pytest.raises(NotFoundException):
            get_api_class("Spaceship")


@pytest.mark.unit
class TestEntityRegistry:

    @pytest.mark.asyncio
    async def test_lists_standalone_entities(self):
        names = (await Entity.get(False).execute()).column("name")
        assert "Contact" in names
        assert "CustomValue" not in names
        assert names == sorted(names)

    @pytest.mark.asyncio
    async def test_filter_and_select(self):
        result = await Entity.get(False).add_select("name", "title").add_where("name", "IN", ["Contact", "Tag"]).execute()
        assert list(result) == [
            {"name": "Contact", "title": "Contact"},
            {"name": "Tag", "title": "Tag"},
        ]

    @pytest.mark.asyncio
    async def test_row_count(self):
        result = await Entity.get(False) \
            .set_components(ComponentSettings().enable_all()) \
            .add_where("component", "=", "CiviEvent") \
            .select_row_count() \
            .execute()
        assert result.count() == 2


async def table_columns(pool, table_name):
    async with pool.acquire() as conn:
        rows = await conn.fetch(f"PRAGMA table_info({table_name})")
    return [row["name"] for row in rows]


@pytest.mark.unit
@pytest.mark.crud
class TestCustomDataStorage:
    """Custom groups own a value table and custom fields own its columns"""

    @pytest.mark.asyncio
    async def test_field_column_lifecycle(self, database):
        group = (await CustomGroup.create(False).set_values({
            "name": "Preferences",
            "title": "Preferences",
            "extends": "Contact",
        }).execute()).first()
        assert await table_columns(database, group["table_name"]) == ["id", "entity_id"]

        field = (await CustomField.create(False).set_values({
            "custom_group_id": group["id"],
            "name": "Shoe Size",
            "label": "Shoe Size",
            "data_type": "Int",
            "html_type": "Text",
        }).execute()).first()
        assert field["column_name"] == f"shoe_size_{field['id']}"
        assert await table_columns(database, group["table_name"]) == ["id", "entity_id", field["column_name"]]

        deleted = await CustomField.delete(False).add_where("id", "=", field["id"]).execute()
        assert list(deleted) == [{"id": field["id"]}]
        assert await table_columns(database, group["table_name"]) == ["id", "entity_id"]

    @pytest.mark.asyncio
    async def test_group_delete_drops_table(self, database):
        group = (await CustomGroup.create(False).set_values({
            "name": "Temporary",
            "title": "Temporary",
            "extends": "Activity",
        }).execute()).first()

        await CustomGroup.delete(False).add_where("id", "=", group["id"]).execute()
        assert await table_columns(database, group["table_name"]) == []

    @pytest.mark.asyncio
    async def test_column_name_is_readonly(self, database):
        with pytest.raises(APIException, match="read-only"):
            await CustomField.create(False).set_values({
                "custom_group_id": 1,
                "name": "x",
                "label": "x",
                "data_type": "String",
                "html_type": "Text",
                "column_name": "sneaky",
            }).execute()
