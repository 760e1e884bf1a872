"""
Response models for API4 requests
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel

# HTTP status per APIException error code; anything else is a 400
ERROR_STATUS_CODES = {
    "UNAUTHORIZED_OPERATION": 403,
    "RESOURCE_NOT_FOUND": 404,
    "CONFLICT": 409,
}

class ResponseError(BaseModel):
    """Error details in unified response"""
    type: str
    message: str
    details: Optional[Dict[str, Any]] = None

class Api4Response(BaseModel):
    """Unified response envelope for every entity action"""
    ok: bool
    entity: Optional[str] = None
    action: Optional[str] = None
    values: List[Dict[str, Any]] = []
    count: int = 0  # get: row count when requested, otherwise rows returned
    debug: Optional[Dict[str, Any]] = None
    error: Optional[ResponseError] = None

    @classmethod
    def build_success(
        cls,
        entity: str,
        action: str,
        values: List[Dict[str, Any]],
        count: int = None,
        debug: Optional[Dict[str, Any]] = None
    ) -> "Api4Response":
        """Create successful response"""
        return cls(
            ok=True,
            entity=entity,
            action=action,
            values=values,
            count=count if count is not None else len(values),
            debug=debug
        )

    @classmethod
    def build_error(
        cls,
        error_type: str,
        message: str,
        entity: Optional[str] = None,
        action: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> "Api4Response":
        """Create error response"""
        return cls(
            ok=False,
            entity=entity,
            action=action,
            error=ResponseError(
                type=error_type,
                message=message,
                details=details
            )
        )


def status_code_for(error_code: str) -> int:
    return ERROR_STATUS_CODES.get(error_code, 400)
