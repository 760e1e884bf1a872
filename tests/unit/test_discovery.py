"""
Entity discovery and data-provider formatting
"""

import pytest

from entity_api.components import ComponentSettings
from entity_api.conformance.discovery import (
    ManualOverrides,
    describe_provider_mismatch,
    get_entities_hitech,
    get_entities_lotech,
    to_data_provider_array,
)
from entity_api.entities import API_CLASSES


@pytest.mark.unit
class TestDataProviderArray:

    def test_sorts_and_wraps_names(self):
        result = to_data_provider_array(["Foo", "Bar"])
        assert result == {"Bar": ["Bar"], "Foo": ["Foo"]}
        assert list(result) == ["Bar", "Foo"]

    def test_empty_input(self):
        assert to_data_provider_array([]) == {}


@pytest.mark.unit
class TestLotechDiscovery:

    def test_default_overrides(self):
        entities = get_entities_lotech()

        assert "Case" in entities
        assert "CiviCase" not in entities, "CiviCase handle should be renamed to Case"
        assert "CustomValue" not in entities, "CustomValue is not a standalone entity"
        assert entities["Contact"] == ["Contact"]

    def test_custom_overrides(self):
        overrides = ManualOverrides(add=["Widget"], remove=["Tag", "CustomValue"], transform={})
        entities = get_entities_lotech(overrides)

        assert "Widget" in entities
        assert "Tag" not in entities
        assert "CiviCase" in entities

    def test_covers_registration_table(self):
        overrides = ManualOverrides(add=[], remove=[], transform={})
        assert set(get_entities_lotech(overrides)) == set(API_CLASSES)


@pytest.mark.unit
class TestHitechDiscovery:

    @pytest.mark.asyncio
    async def test_enables_all_components(self):
        components = ComponentSettings()
        entities = await get_entities_hitech(components)

        assert components.is_enabled("CiviCase")
        assert components.is_enabled("CiviEvent")
        assert {"Case", "CaseType", "Event", "Participant"} <= set(entities)

    @pytest.mark.asyncio
    async def test_matches_lotech(self):
        assert await get_entities_hitech() == get_entities_lotech()


@pytest.mark.unit
class TestComponentSettings:

    def test_core_always_enabled(self):
        assert ComponentSettings().is_enabled(None)

    def test_unknown_component_rejected(self):
        with pytest.raises(ValueError):
            ComponentSettings().enable_component("CiviNope")

    def test_disable_component(self):
        components = ComponentSettings.from_names(["CiviCase"])
        components.disable_component("CiviCase")
        assert not components.is_enabled("CiviCase")


@pytest.mark.unit
class TestProviderMismatchMessage:

    def test_names_differences(self):
        message = describe_provider_mismatch(
            to_data_provider_array(["Contact", "Tag"]),
            to_data_provider_array(["Contact", "Widget"]),
        )
        assert message.startswith(
            "The lo-tech list of entities does not match the hi-tech list. "
            "You probably need to update get_entities_lotech()."
        )
        assert "Missing: ['Tag']" in message
        assert "Extra: ['Widget']" in message
