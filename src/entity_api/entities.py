"""
Entity handles - one class per entity, composed from capability mixins

Every handle is used through class methods only:

    result = await Contact.get(False).add_where("id", "=", 42).execute()

The registration table API_CLASSES lists every handle by class name. It is the
static counterpart of the live registry returned by Entity.get().
"""

from typing import Any, Dict, Type

from entity_api.actions import (
    CreateAction,
    DeleteAction,
    EntityGetAction,
    GetAction,
    GetActionsAction,
    GetFieldsAction,
    UpdateAction,
)
from entity_api.contracts.base import Action, EntityContract
from entity_api.contracts.registry import get_contract
from entity_api.exceptions import NotFoundException


class Describable:
    """Metadata capability: info, fields and actions"""

    entity_name: str = ""

    @classmethod
    def get_contract(cls) -> EntityContract:
        return get_contract(cls.entity_name)

    @classmethod
    def get_entity_name(cls) -> str:
        return cls.entity_name

    @classmethod
    def get_info(cls) -> Dict[str, Any]:
        return cls.get_contract().get_info()

    @classmethod
    def _build(cls, action_class: Type, action: Action, check_permissions: bool):
        contract = cls.get_contract()
        if not contract.is_action_allowed(action.value):
            raise NotFoundException(f"Api {cls.entity_name} {action.value} does not exist.")
        return action_class(contract, check_permissions)

    @classmethod
    def get_fields(cls, check_permissions: bool = True) -> GetFieldsAction:
        return cls._build(GetFieldsAction, Action.GET_FIELDS, check_permissions)

    @classmethod
    def get_actions(cls, check_permissions: bool = True) -> GetActionsAction:
        return cls._build(GetActionsAction, Action.GET_ACTIONS, check_permissions)


class Queryable:
    """Read capability"""

    get_action_class = GetAction

    @classmethod
    def get(cls, check_permissions: bool = True) -> GetAction:
        return cls._build(cls.get_action_class, Action.GET, check_permissions)


class Mutable:
    """Write capability"""

    @classmethod
    def create(cls, check_permissions: bool = True) -> CreateAction:
        return cls._build(CreateAction, Action.CREATE, check_permissions)

    @classmethod
    def update(cls, check_permissions: bool = True) -> UpdateAction:
        return cls._build(UpdateAction, Action.UPDATE, check_permissions)

    @classmethod
    def delete(cls, check_permissions: bool = True) -> DeleteAction:
        return cls._build(DeleteAction, Action.DELETE, check_permissions)


class AbstractEntity(Describable):
    """Common base so handles can be type-checked as a family"""


class DAOEntity(Mutable, Queryable, AbstractEntity):
    """Table-backed entity with full CRUD"""


class Activity(DAOEntity):
    entity_name = "Activity"


class CiviCase(DAOEntity):
    # "Case" is the API name; the handle keeps its historical class name
    entity_name = "Case"


class CaseType(DAOEntity):
    entity_name = "CaseType"


class Contact(DAOEntity):
    entity_name = "Contact"


class CustomField(DAOEntity):
    entity_name = "CustomField"


class CustomGroup(DAOEntity):
    entity_name = "CustomGroup"


class CustomValue(AbstractEntity):
    entity_name = "CustomValue"


class Email(DAOEntity):
    entity_name = "Email"


class Entity(Queryable, AbstractEntity):
    entity_name = "Entity"
    get_action_class = EntityGetAction


class Event(DAOEntity):
    entity_name = "Event"


class Group(DAOEntity):
    entity_name = "Group"


class Note(DAOEntity):
    entity_name = "Note"


class Participant(DAOEntity):
    entity_name = "Participant"


class Tag(DAOEntity):
    entity_name = "Tag"


# Registration table: class name -> handle
API_CLASSES: Dict[str, Type[AbstractEntity]] = {
    cls.__name__: cls
    for cls in [
        Activity,
        CaseType,
        CiviCase,
        Contact,
        CustomField,
        CustomGroup,
        CustomValue,
        Email,
        Entity,
        Event,
        Group,
        Note,
        Participant,
        Tag,
    ]
}

_BY_ENTITY_NAME: Dict[str, Type[AbstractEntity]] = {cls.entity_name: cls for cls in API_CLASSES.values()}


def get_api_class(entity_name: str) -> Type[AbstractEntity]:
    """Resolve an entity name (e.g. 'Case') to its handle class"""
    if entity_name not in _BY_ENTITY_NAME:
        raise NotFoundException(f"API entity not found: {entity_name}")
    return _BY_ENTITY_NAME[entity_name]
