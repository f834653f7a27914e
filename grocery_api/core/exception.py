from fastapi import HTTPException
from typing import Any, Optional
from ..schemas.result import ErrorCategory


class CustomException(HTTPException):
    """
    Base for every error a service raises on purpose.

    ``detail`` becomes the envelope's short ``error`` string; ``message``
    is the longer, user-facing explanation.
    """

    def __init__(
        self,
        error: str,
        status_code: int,
        category: ErrorCategory,
        message: Optional[str] = None,
        headers: Optional[dict] = None
    ):
        super().__init__(status_code=status_code, detail=error, headers=headers)
        self.category = category
        self.message = message or error


class ResourceNotFoundException(CustomException):
    """A list, item, share, tag or user that does not exist (for this caller)."""

    def __init__(
        self,
        resource_name: str,
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
    ):
        error = f"{resource_name} not found"
        if resource_id is not None and message is None:
            message = f"{resource_name} '{resource_id}' does not exist or is not yours."

        super().__init__(
            error=error,
            status_code=404,
            category=ErrorCategory.NOT_FOUND,
            message=message,
        )


class AuthenticationException(CustomException):
    """Missing, invalid or expired bearer token, or bad login credentials."""

    def __init__(self, error: str = "Invalid credentials", message: Optional[str] = None):
        super().__init__(
            error=error,
            status_code=401,
            category=ErrorCategory.AUTHENTICATION,
            message=message,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthorizationException(CustomException):
    """Signed in, but neither the owner nor an accepted recipient."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            error="Access denied",
            status_code=403,
            category=ErrorCategory.AUTHORIZATION,
            message=message or "You do not have permission to perform this action.",
        )


class ConflictException(CustomException):
    """Duplicate item, duplicate or self share, or an already-answered share."""

    def __init__(self, error: str, message: Optional[str] = None):
        super().__init__(
            error=error,
            status_code=409,
            category=ErrorCategory.RESOURCE_CONFLICT,
            message=message,
        )


class DuplicateResourceException(ConflictException):

    def __init__(
        self,
        resource_name: str,
        identifier: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if identifier:
            error = f"{resource_name} '{identifier}' already exists"
        else:
            error = f"{resource_name} already exists"

        super().__init__(error=error, message=message)


class ValidationException(CustomException):
    """Input that passed schema checks but breaks a business rule (e.g. a blank name)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            error=message,
            status_code=400,
            category=ErrorCategory.VALIDATION,
            message=f"Invalid {field}: {message}" if field else message,
        )


class BadRequestException(CustomException):

    def __init__(self, error: str = "The request is invalid or malformed."):
        super().__init__(
            error=error,
            status_code=400,
            category=ErrorCategory.BAD_REQUEST
        )
