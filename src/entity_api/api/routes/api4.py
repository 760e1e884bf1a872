"""
API4 route - one endpoint dispatching to any entity action
"""

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body

from entity_api.entities import get_api_class
from entity_api.exceptions import NotFoundException
from entity_api.models.response import Api4Response

router = APIRouter()
logger = logging.getLogger(__name__)

# URL action name -> handle builder method
ACTION_BUILDERS = {
    "get": "get",
    "create": "create",
    "update": "update",
    "delete": "delete",
    "getFields": "get_fields",
    "getActions": "get_actions",
}


def build_action(entity: str, action: str):
    """Resolve entity and action names to a fresh action builder"""
    handle = get_api_class(entity)
    builder_name = ACTION_BUILDERS.get(action)
    if builder_name is None or not hasattr(handle, builder_name):
        raise NotFoundException(f"Api {entity} {action} does not exist.")
    return getattr(handle, builder_name)()


@router.post("/api4/{entity}/{action}", response_model=Api4Response)
async def api4_call(
    entity: str,
    action: str,
    params: Optional[Dict[str, Any]] = Body(default=None)
):
    """
    Run an entity action with the JSON body as its params.

    Params use the API names (where, values, select, orderBy, limit, offset,
    checkPermissions, debug, includeCustom, selectRowCount). Errors are
    rendered by the APIException handler registered in the app.
    """
    request_id = str(uuid.uuid4())[:8]
    logger.info(f"[{request_id}] {entity}.{action} requested")

    builder = build_action(entity, action).set_params(params or {})
    result = await builder.execute()

    logger.info(f"[{request_id}] {entity}.{action} returned {len(result)} rows")
    return Api4Response.build_success(
        entity=result.entity,
        action=result.action,
        values=list(result),
        count=result.count(),
        debug=result.debug
    )
