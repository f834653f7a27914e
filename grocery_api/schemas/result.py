from enum import Enum
from pydantic import BaseModel
from typing import Generic, TypeVar, Optional

T = TypeVar("T")


class ErrorCategory(Enum):
    VALIDATION = "Validation"
    NOT_FOUND = "Not Found"
    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"
    INTERNAL = "Internal Server Error"
    BAD_REQUEST = "Bad Request"
    RESOURCE_CONFLICT = "Resource Conflict"
    CUSTOM = "Custom Error"


class Error(BaseModel):
    error: str
    message: Optional[str] = None
    status_code: int
    category: ErrorCategory

    class Config:
        use_enum_values = True


class Result(BaseModel, Generic[T]):
    success: bool
    error: Optional[str] = None
    message: Optional[str] = None
    category: Optional[ErrorCategory] = None
    data: Optional[T] = None

    class Config:
        use_enum_values = True

    @classmethod
    def successful(cls, data: Optional[T] = None):
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: Error):
        return cls(
            success=False,
            error=error.error,
            message=error.message or error.error,
            category=error.category,
        )
