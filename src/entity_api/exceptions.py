"""
Exceptions raised by the entity API
"""

from typing import Any, Dict, Optional


class APIException(Exception):
    """Generic entity API failure; callers distinguish cases by message"""

    def __init__(
        self,
        message: str,
        error_code: str = "INVALID_QUERY",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def get_message(self) -> str:
        return self.message


class UnauthorizedException(APIException):
    """Raised when permission checks are on and the user lacks a permission"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="UNAUTHORIZED_OPERATION", details=details)


class NotFoundException(APIException):
    """Raised for unknown entities or actions"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="RESOURCE_NOT_FOUND", details=details)
